"""
security/passwords.py
---------------------
One-way password hashing for user accounts (bcrypt).
"""

import bcrypt

from config import BCRYPT_ROUNDS
from utils.logger import get_logger

logger = get_logger(__name__)


class PasswordHasher:
    """
    Hashes and verifies passwords.

    Args:
        rounds: bcrypt cost factor (log2 of the iteration count).
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt digest of `plaintext`."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check `plaintext` against a stored digest.

        Returns False for a wrong password and for a missing or malformed
        digest alike; never raises for either.
        """
        if not plaintext or not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password digest is malformed.")
            return False
