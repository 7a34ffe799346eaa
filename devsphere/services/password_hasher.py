"""bcrypt-backed password hashing."""

import bcrypt

_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted one-way hashing with a fixed work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            ValueError: If the password exceeds bcrypt's 72 byte input limit
        """
        encoded = plaintext.encode("utf-8")
        if len(encoded) > _MAX_PASSWORD_BYTES:
            raise ValueError("Password must be at most 72 bytes long.")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return whether ``plaintext`` matches ``hashed``; malformed input counts as a mismatch."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False
