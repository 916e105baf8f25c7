"""Plain, immutable records handed out by the services.

Front ends (HTTP, Socket.IO, CLI) only ever see these, never ORM rows. A
record is a snapshot: it does not change when the database row does.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class GameMode(str, enum.Enum):
    BASICS = 'BASICS'
    TRIG = 'TRIG'
    TARGET = 'TARGET'

    @classmethod
    def parse(cls, value) -> 'GameMode':
        """Accept a GameMode or its name in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown game mode: {value!r}") from None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    registered_at: datetime

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'registered_at': _iso(self.registered_at),
        }


@dataclass(frozen=True)
class SessionRecord:
    id: int
    user_id: int
    mode: GameMode
    started_at: datetime
    ended_at: Optional[datetime]
    score: int
    strikes: int
    completed: bool

    @property
    def state(self) -> str:
        return 'completed' if self.completed else 'active'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'mode': self.mode.value,
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
            'score': self.score,
            'strikes': self.strikes,
            'completed': self.completed,
            'state': self.state,
        }


@dataclass(frozen=True)
class ScoreRow:
    user_id: int
    username: str
    mode: GameMode
    high_score: int

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'username': self.username,
            'mode': self.mode.value,
            'high_score': self.high_score,
        }
