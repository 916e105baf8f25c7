"""Game session persistence and its ACTIVE -> COMPLETED state machine.

Score and strike mutations are single conditional UPDATE statements guarded
by ``completed = false``, so a completed session silently ignores late or
duplicate submissions. The third strike completes the session in the same
statement that records it.
"""
from typing import List, Optional

from flask import current_app
from sqlalchemy import case, delete, func, select, update

from physquiz.models import GameSession, utcnow
from physquiz.records import GameMode, SessionRecord
from physquiz.services.storage import transaction

MAX_STRIKES = 3


class SessionStore:

    def __init__(self, session, clock=utcnow):
        self._session = session
        self._clock = clock

    def _load(self, session_id: int) -> Optional[SessionRecord]:
        row = self._session.execute(
            select(GameSession)
            .where(GameSession.id == session_id)
            .execution_options(populate_existing=True)
        ).scalars().first()
        return row.to_record() if row else None

    def start(self, user_id: int, mode) -> SessionRecord:
        game_mode = GameMode.parse(mode)
        with transaction(self._session, 'start_session'):
            row = GameSession(
                user_id=user_id,
                mode=game_mode.value,
                started_at=self._clock(),
                score=0,
                strikes=0,
                completed=False,
            )
            self._session.add(row)
            self._session.flush()
            record = row.to_record()
        current_app.logger.info(
            f"[session-start] session={record.id} user={user_id} mode={game_mode.value}"
        )
        return record

    def get(self, session_id: int) -> Optional[SessionRecord]:
        with transaction(self._session, 'get_session'):
            return self._load(session_id)

    def record_correct(self, session_id: int) -> bool:
        """+1 score on an active session. False when nothing changed."""
        with transaction(self._session, 'record_correct'):
            result = self._session.execute(
                update(GameSession)
                .where(GameSession.id == session_id, GameSession.completed.is_(False))
                .values(score=GameSession.score + 1)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount > 0

    def record_wrong(self, session_id: int) -> bool:
        """+1 strike on an active session, completing it at the third strike.

        The increment and the completion are one UPDATE: the SET clauses see
        the pre-update ``strikes``, so ``strikes + 1`` is the new value.
        """
        now = self._clock()
        new_strikes = GameSession.strikes + 1
        reached_limit = new_strikes >= MAX_STRIKES
        with transaction(self._session, 'record_wrong'):
            result = self._session.execute(
                update(GameSession)
                .where(GameSession.id == session_id, GameSession.completed.is_(False))
                .values(
                    strikes=new_strikes,
                    completed=case((reached_limit, True), else_=False),
                    ended_at=case((reached_limit, now), else_=GameSession.ended_at),
                )
                .execution_options(synchronize_session=False)
            )
            changed = result.rowcount > 0
            record = self._load(session_id) if changed else None
        if record is not None and record.completed:
            current_app.logger.info(
                f"[session-complete] session={session_id} reason=strikes score={record.score}"
            )
        return changed

    def finish(self, session_id: int) -> bool:
        """Complete the session. Repeat calls keep the first ``ended_at``."""
        with transaction(self._session, 'finish_session'):
            result = self._session.execute(
                update(GameSession)
                .where(GameSession.id == session_id)
                .values(
                    completed=True,
                    ended_at=func.coalesce(GameSession.ended_at, self._clock()),
                )
                .execution_options(synchronize_session=False)
            )
        finished = result.rowcount > 0
        if finished:
            current_app.logger.info(f"[session-complete] session={session_id} reason=finish")
        return finished

    def high_score(self, user_id: int, mode) -> Optional[int]:
        """Best score over the user's completed sessions in ``mode``."""
        game_mode = GameMode.parse(mode)
        with transaction(self._session, 'high_score'):
            return self._session.execute(
                select(func.max(GameSession.score)).where(
                    GameSession.user_id == user_id,
                    GameSession.mode == game_mode.value,
                    GameSession.completed.is_(True),
                )
            ).scalar()

    def list_by_user(self, user_id: int) -> List[SessionRecord]:
        with transaction(self._session, 'list_sessions'):
            rows = self._session.execute(
                select(GameSession)
                .where(GameSession.user_id == user_id)
                .order_by(GameSession.started_at.desc(), GameSession.id.desc())
            ).scalars()
            return [row.to_record() for row in rows]

    def delete(self, session_id: int) -> bool:
        with transaction(self._session, 'delete_session'):
            result = self._session.execute(
                delete(GameSession)
                .where(GameSession.id == session_id)
                .execution_options(synchronize_session=False)
            )
        deleted = result.rowcount > 0
        if deleted:
            current_app.logger.info(f"[session-delete] session={session_id}")
        return deleted
