from typing import Union

from flask_bcrypt import Bcrypt

Plaintext = Union[str, bytes, bytearray]


def wipe(buffer: Plaintext) -> None:
    """Zero a mutable plaintext buffer in place. Immutable ones are left alone."""
    if isinstance(buffer, bytearray):
        for i in range(len(buffer)):
            buffer[i] = 0


def _as_bytes(plaintext: Plaintext) -> bytes:
    if isinstance(plaintext, str):
        return plaintext.encode('utf-8')
    return bytes(plaintext)


class BcryptVerifier:
    """Credential verifier backed by the app's Flask-Bcrypt extension.

    Both methods wipe a ``bytearray`` plaintext once they are done with it.
    """

    def __init__(self, bcrypt: Bcrypt):
        self._bcrypt = bcrypt

    def hash(self, plaintext: Plaintext) -> str:
        try:
            return self._bcrypt.generate_password_hash(_as_bytes(plaintext)).decode('utf-8')
        finally:
            wipe(plaintext)

    def verify(self, plaintext: Plaintext, credential: str) -> bool:
        try:
            return self._bcrypt.check_password_hash(credential, _as_bytes(plaintext))
        except ValueError:
            # malformed stored hash
            return False
        finally:
            wipe(plaintext)
