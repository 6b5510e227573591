"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

from passlib.context import CryptContext

# Compared against when the account does not exist, so a failed login costs
# the same bcrypt round either way.
_DUMMY_HASH = "$2b$12$WmDNGEj9s7YLV5sV/N7aBOpWL0.T5.R5ZQOeKHNlLB.d7WN4HFXIC"


class PasswordHasher:
    """Password hashing and verification using bcrypt."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Check a password against a stored hash.

        A missing hash still runs a full bcrypt verification and returns False.
        """
        if hashed_password is None:
            self._context.verify(plain_password, _DUMMY_HASH)
            return False
        return self._context.verify(plain_password, hashed_password)


password_hasher = PasswordHasher()
