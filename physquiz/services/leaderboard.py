from typing import List

from sqlalchemy import func, select

from physquiz.models import GameSession, User
from physquiz.records import GameMode, ScoreRow
from physquiz.services.storage import transaction


class Leaderboard:
    """Per-mode ranking built from each user's best completed session."""

    def __init__(self, session):
        self._session = session

    def rank(self, mode, limit: int) -> List[ScoreRow]:
        game_mode = GameMode.parse(mode)
        limit = max(1, int(limit))
        high_score = func.max(GameSession.score).label('high_score')
        stmt = (
            select(User.id, User.username, high_score)
            .join(GameSession, GameSession.user_id == User.id)
            .where(GameSession.completed.is_(True), GameSession.mode == game_mode.value)
            .group_by(User.id, User.username)
            # ties resolve alphabetically, then by id, so pages are stable
            .order_by(high_score.desc(), User.username.asc(), User.id.asc())
            .limit(limit)
        )
        with transaction(self._session, 'leaderboard'):
            return [
                ScoreRow(user_id=uid, username=username, mode=game_mode, high_score=score)
                for uid, username, score in self._session.execute(stmt)
            ]
