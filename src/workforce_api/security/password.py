"""Password hashing and validation utilities."""

import re
from functools import lru_cache

import bcrypt

from workforce_api.config import get_settings


class PasswordService:
    """Service for password hashing and validation."""

    def __init__(self, rounds: int = 12, min_length: int = 8) -> None:
        self.rounds = rounds
        self.min_length = min_length

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password
            hashed: Hashed password

        Returns:
            True if password matches
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
            # Invalid hash format or encoding issues
            return False

    def validate_password_strength(self, password: str) -> list[str]:
        """Check a new password against the policy.

        Returns:
            List of violated requirements, empty when the password is acceptable
        """
        errors = []
        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters")
        if not re.search(r"[A-Za-z]", password):
            errors.append("Password must contain a letter")
        if not re.search(r"\d", password):
            errors.append("Password must contain a digit")
        return errors


@lru_cache
def get_password_service() -> PasswordService:
    """Get the process-wide password service."""
    settings = get_settings()
    return PasswordService(rounds=settings.bcrypt_rounds, min_length=settings.password_min_length)
