import sqlite3
from datetime import datetime, timezone

from flask_login import UserMixin
from sqlalchemy import event
from sqlalchemy.engine import Engine

from physquiz import db
from physquiz.records import GameMode, SessionRecord, UserRecord


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    registered_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    sessions = db.relationship(
        'GameSession',
        back_populates='user',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        db.Index('uq_user_username_lower', db.func.lower(username), unique=True),
    )

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            username=self.username,
            registered_at=self.registered_at,
        )

    def to_dict(self):
        return self.to_record().to_dict()


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('user.id', ondelete='CASCADE'),
        nullable=False,
    )
    mode = db.Column(db.String(16), nullable=False)
    started_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    ended_at = db.Column(db.DateTime, nullable=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    strikes = db.Column(db.Integer, nullable=False, default=0)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    user = db.relationship('User', back_populates='sessions')

    __table_args__ = (
        db.Index('ix_game_session_user_mode_completed', 'user_id', 'mode', 'completed'),
    )

    def to_record(self) -> SessionRecord:
        return SessionRecord(
            id=self.id,
            user_id=self.user_id,
            mode=GameMode(self.mode),
            started_at=self.started_at,
            ended_at=self.ended_at,
            score=self.score,
            strikes=self.strikes,
            completed=bool(self.completed),
        )

    def to_dict(self):
        return self.to_record().to_dict()
