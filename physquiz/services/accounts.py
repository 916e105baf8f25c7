from typing import List, Optional

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from physquiz.errors import InvalidCredentials, UsernameTaken
from physquiz.models import User, utcnow
from physquiz.records import UserRecord
from physquiz.services.credentials import wipe
from physquiz.services.storage import transaction


def _clean_username(username) -> str:
    name = (username or '').strip()
    if not name:
        raise InvalidCredentials('Username is required')
    return name


def _require_password(password) -> None:
    if not password:
        raise InvalidCredentials('Password is required')


class AccountDirectory:
    """User records with case-insensitive usernames and hashed credentials."""

    def __init__(self, session, verifier, clock=utcnow):
        self._session = session
        self._verifier = verifier
        self._clock = clock

    def _find_by_name(self, username: str, exclude_id: Optional[int] = None) -> Optional[User]:
        stmt = select(User).where(func.lower(User.username) == func.lower(username))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self._session.execute(stmt).scalars().first()

    def _flush_username(self, name: str) -> None:
        # a concurrent writer can still win the unique index
        try:
            self._session.flush()
        except IntegrityError:
            raise UsernameTaken(name) from None

    def create(self, username, password) -> UserRecord:
        try:
            name = _clean_username(username)
            _require_password(password)
        except InvalidCredentials:
            wipe(password)
            raise
        with transaction(self._session, 'create_user'):
            if self._find_by_name(name) is not None:
                wipe(password)
                raise UsernameTaken(name)
            user = User(
                username=name,
                password_hash=self._verifier.hash(password),
                registered_at=self._clock(),
            )
            self._session.add(user)
            self._flush_username(name)
            record = user.to_record()
        current_app.logger.info(f"[user-create] user={record.id} username={record.username}")
        return record

    def authenticate(self, username, password) -> Optional[UserRecord]:
        """Return the matching user, or None. Never says which part was wrong."""
        name = (username or '').strip()
        with transaction(self._session, 'authenticate'):
            user = self._find_by_name(name) if name else None
            if user is None:
                wipe(password)
                return None
            if not password or not self._verifier.verify(password, user.password_hash):
                wipe(password)
                return None
            return user.to_record()

    def get(self, user_id: int) -> Optional[UserRecord]:
        with transaction(self._session, 'get_user'):
            user = self._session.get(User, user_id)
            return user.to_record() if user else None

    def rename(self, user_id: int, new_username) -> bool:
        name = _clean_username(new_username)
        with transaction(self._session, 'rename_user'):
            user = self._session.get(User, user_id)
            if user is None:
                return False
            if self._find_by_name(name, exclude_id=user_id) is not None:
                raise UsernameTaken(name)
            user.username = name
            self._flush_username(name)
        current_app.logger.info(f"[user-rename] user={user_id} username={name}")
        return True

    def change_password(self, user_id: int, new_password) -> bool:
        """Replace the stored credential. A bytearray argument is zeroed."""
        try:
            _require_password(new_password)
        except InvalidCredentials:
            wipe(new_password)
            raise
        with transaction(self._session, 'change_password'):
            user = self._session.get(User, user_id)
            if user is None:
                wipe(new_password)
                return False
            user.password_hash = self._verifier.hash(new_password)
        current_app.logger.info(f"[user-password] user={user_id}")
        return True

    def delete(self, user_id: int) -> bool:
        """Delete the user and, by cascade, every session they own."""
        with transaction(self._session, 'delete_user'):
            user = self._session.get(User, user_id)
            if user is None:
                return False
            self._session.delete(user)
        current_app.logger.info(f"[user-delete] user={user_id}")
        return True

    def list(self) -> List[UserRecord]:
        with transaction(self._session, 'list_users'):
            stmt = select(User).order_by(User.username.asc(), User.id.asc())
            return [u.to_record() for u in self._session.execute(stmt).scalars()]
