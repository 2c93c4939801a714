"""
Password Hasher

bcrypt wrapper used for both passwords and secret-question answers.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """
    One-way salted hashing with constant-time verification.

    Every call to ``hash`` draws a fresh salt, so hashing the same input
    twice never yields the same digest.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = self.hash("dummy_password")

    @staticmethod
    def _encode(plain: str) -> bytes:
        return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, plain: str) -> str:
        hashed = bcrypt.hashpw(self._encode(plain), bcrypt.gensalt(self.rounds))
        return hashed.decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(plain), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    def dummy_verify(self, plain: str) -> bool:
        """
        Burn the same CPU time as a real verification.

        Called when no record exists so response timing does not reveal
        whether an account exists. Always returns False.
        """
        self.verify(plain, self._dummy_hash)
        return False
