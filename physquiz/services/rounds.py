"""Round orchestration: the gameplay contract every front end talks to.

The orchestrator composes the account directory, session store, leaderboard,
question catalog and target physics. It owns no state of its own beyond its
collaborators: callers pass users and sessions in explicitly, and a session
snapshot they hold is only ever used for its id.
"""
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from flask import current_app

from physquiz.records import GameMode, ScoreRow, SessionRecord, UserRecord
from physquiz.services import physics
from physquiz.services.questions import DEFAULT_TOLERANCE, Question, check_answer

# notify(event, session) where event is 'session_update' or 'session_completed'
Notifier = Callable[[str, SessionRecord], None]


def _id(obj) -> int:
    return obj if isinstance(obj, int) else obj.id


@dataclass(frozen=True)
class TargetSettings:
    gravity: float = physics.STANDARD_GRAVITY
    wall_distance: float = 13.0
    radius: float = 0.28
    max_height: float = 7.0
    angle_min_deg: float = 30.0
    angle_max_deg: float = 60.0


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    expected: str
    recorded: bool

    def to_dict(self):
        return {'correct': self.correct, 'expected': self.expected, 'recorded': self.recorded}


class RoundOrchestrator:

    def __init__(self, accounts, sessions, leaderboard, catalog,
                 target: Optional[TargetSettings] = None,
                 answer_tolerance: float = DEFAULT_TOLERANCE,
                 rng: Optional[random.Random] = None,
                 notify: Optional[Notifier] = None):
        self.accounts = accounts
        self.sessions = sessions
        self.board = leaderboard
        self.catalog = catalog
        self.target = target or TargetSettings()
        self.answer_tolerance = answer_tolerance
        self.rng = rng or random.Random()
        self.notify = notify

    # -- accounts --

    def register(self, username, password) -> UserRecord:
        return self.accounts.create(username, password)

    def login(self, username, password) -> Optional[UserRecord]:
        return self.accounts.authenticate(username, password)

    def get_user(self, user) -> Optional[UserRecord]:
        return self.accounts.get(_id(user))

    def list_users(self) -> List[UserRecord]:
        return self.accounts.list()

    def rename_user(self, user, new_username) -> bool:
        return self.accounts.rename(_id(user), new_username)

    def change_password(self, user, new_password) -> bool:
        return self.accounts.change_password(_id(user), new_password)

    def delete_account(self, user) -> bool:
        return self.accounts.delete(_id(user))

    # -- rounds --

    def start_round(self, user, mode) -> Optional[SessionRecord]:
        """Open a session for an existing user. None if the user is gone."""
        game_mode = GameMode.parse(mode)
        user_id = _id(user)
        if self.accounts.get(user_id) is None:
            current_app.logger.warning(f"[round-start] user={user_id} not found")
            return None
        record = self.sessions.start(user_id, game_mode)
        self._publish(record.id, completed=False)
        return record

    def submit_correct(self, session) -> bool:
        changed = self.sessions.record_correct(_id(session))
        if changed:
            self._publish(_id(session), completed=False)
        return changed

    def submit_wrong(self, session) -> bool:
        changed = self.sessions.record_wrong(_id(session))
        if changed:
            # only an active session can change, so completed here means just now
            self._publish(_id(session), completed=None)
        return changed

    def finish_round(self, session) -> bool:
        session_id = _id(session)
        before = self.sessions.get(session_id)
        finished = self.sessions.finish(session_id)
        # re-finishing a completed session changes nothing worth announcing
        if finished and before is not None and not before.completed:
            self._publish(session_id, completed=True)
        return finished

    def get_session(self, session) -> Optional[SessionRecord]:
        return self.sessions.get(_id(session))

    def list_sessions(self, user) -> List[SessionRecord]:
        return self.sessions.list_by_user(_id(user))

    def delete_session(self, session) -> bool:
        return self.sessions.delete(_id(session))

    # -- scores --

    def high_score(self, user, mode) -> Optional[int]:
        return self.sessions.high_score(_id(user), mode)

    def leaderboard(self, mode, limit: int) -> List[ScoreRow]:
        return self.board.rank(mode, limit)

    # -- quiz modes --

    def questions_for(self, mode) -> List[Question]:
        return self.catalog.questions_for(mode)

    def submit_answer(self, session, question: Question, answer: str) -> AnswerResult:
        correct = check_answer(question, answer, self.answer_tolerance)
        if correct:
            recorded = self.submit_correct(session)
        else:
            recorded = self.submit_wrong(session)
        return AnswerResult(correct=correct, expected=question.answer, recorded=recorded)

    # -- target mode --

    def new_target_challenge(self) -> physics.TargetChallenge:
        t = self.target
        return physics.new_target_challenge(
            self.rng,
            g=t.gravity,
            wall_distance=t.wall_distance,
            target_radius=t.radius,
            max_height=t.max_height,
            angle_min_deg=t.angle_min_deg,
            angle_max_deg=t.angle_max_deg,
        )

    def submit_shot(self, session, challenge: physics.TargetChallenge, speed: float) -> physics.ShotResult:
        """Judge a launch speed by its trajectory and record the outcome."""
        result = physics.judge_shot(challenge, speed)
        if result.hit:
            self.submit_correct(session)
        else:
            self.submit_wrong(session)
        current_app.logger.info(
            f"[target-shot] session={_id(session)} speed={speed:.2f} "
            f"y_at_wall={result.y_at_wall:.2f} target={challenge.target_height:.2f} hit={result.hit}"
        )
        return result

    def _publish(self, session_id: int, completed: Optional[bool]) -> None:
        if self.notify is None:
            return
        record = self.sessions.get(session_id)
        if record is None:
            return
        self.notify('session_update', record)
        if completed or (completed is None and record.completed):
            self.notify('session_completed', record)
