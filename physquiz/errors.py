"""Domain errors raised by the physquiz services.

Missing users or sessions are not errors here: the store reports them as
``False``/``None`` results so callers racing with stale UI state can carry on.
"""


class PhysQuizError(Exception):
    """Base class for every error raised by the core services."""


class UsernameTaken(PhysQuizError):
    """Another account already holds this username (case-insensitive)."""

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is taken")
        self.username = username


class InvalidCredentials(PhysQuizError, ValueError):
    """Username or password input is empty or malformed."""


class UnreachableTarget(PhysQuizError, ValueError):
    """No launch speed sends the projectile through the requested point."""

    def __init__(self, angle_rad: float, x: float, y: float):
        super().__init__(f"Unreachable target for angle={angle_rad:.4f} rad x={x} y={y}")
        self.angle_rad = angle_rad
        self.x = x
        self.y = y


class InvalidShot(PhysQuizError, ValueError):
    """A submitted launch speed cannot be simulated."""


class StorageFailure(PhysQuizError):
    """The database could not complete an operation. Not retried."""
