"""Application repository for API clients and their credentials."""

import hashlib
import hmac
import secrets

from leaderboard.logging import get_logger
from leaderboard.models import Application

from .base import BaseRepository

logger = get_logger("repository.application")

KEY_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
KEY_LENGTH = 32


def generate_key(length: int = KEY_LENGTH) -> str:
    """Generate a random lowercase alphanumeric key."""
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def hash_secret(secret: str) -> str:
    """SHA-256 hex digest of an application secret."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


class ApplicationRepository(BaseRepository[Application]):
    """Repository for Application operations."""

    model = Application
    kind = "application"

    def create_application(self, name: str, admin: bool = False) -> tuple[Application, str]:
        """
        Register a new application with a generated key and secret.

        Returns:
            Tuple of (application, plaintext secret). The secret is not
            stored and cannot be recovered later.
        """
        secret = generate_key()
        application = self.create(
            key=generate_key(),
            secret_hash=hash_secret(secret),
            name=name,
            admin=admin,
        )
        return application, secret

    def authenticate(self, key: str, secret: str) -> Application | None:
        """Return the application when the key exists and the secret matches."""
        application = self.get_by_id(key)
        if application is None:
            logger.info("basic_auth_failed", reason="unknown_key")
            return None
        if not hmac.compare_digest(application.secret_hash, hash_secret(secret)):
            logger.info("basic_auth_failed", reason="wrong_secret", key=key)
            return None
        return application

    def ensure_admin(self, key: str, secret: str, name: str = "Admin Application") -> Application:
        """Register the bootstrap admin application unless it already exists."""
        application = self.get_by_id(key)
        if application is not None:
            logger.info("admin_application_present", key=key)
            return application

        logger.info("admin_application_registered", key=key)
        return self.create(key=key, secret_hash=hash_secret(secret), name=name, admin=True)
