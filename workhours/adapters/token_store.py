"""
Access token storage backed by the OS keyring, with a plaintext file fallback.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)


KEYRING_SERVICE_NAME = "workhours"


class TokenStore:
    """
    Persists the API access token.

    The keyring is tried first; when it is unavailable or fails, the token is
    written to a file readable only by the owner and a warning is exposed via
    ``insecure_storage_warning``.
    """

    def __init__(self, account: str = "default", token_file: Path | None = None):
        """
        Initialize the store.

        Args:
            account: Keyring username under which the token is stored
            token_file: Optional path to the fallback token file
        """
        self.account = account
        self.token_file = token_file or Path.home() / ".workhours_token"
        self._keyring_supported = True
        self._insecure_storage_warning: Optional[str] = None

    @property
    def backend(self) -> str:
        """Return the active storage backend (keyring or file)."""
        return "keyring" if self._keyring_supported else "file"

    @property
    def insecure_storage_warning(self) -> Optional[str]:
        """Provide a warning message when the token falls back to plaintext storage."""
        return self._insecure_storage_warning

    def get_token(self) -> Optional[str]:
        token = self._load_from_keyring()
        if token is None:
            token = self._load_from_file()
        return token or None

    def has_token(self) -> bool:
        return bool(self.get_token())

    def save_token(self, token: str) -> None:
        """Save the token, preferring the keyring."""
        token = token.strip()
        if not token:
            raise ValueError("Access token must not be empty")

        if self._keyring_supported and self._save_to_keyring(token):
            return

        self._save_to_file(token)

    def clear(self) -> None:
        """Remove the token from every backend."""
        if self.token_file.exists():
            self.token_file.unlink()
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self.account)
        except PasswordDeleteError:
            pass  # Nothing stored
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Could not remove token from keyring: %s", exc)

    def _load_from_keyring(self) -> Optional[str]:
        if not self._keyring_supported:
            return None

        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, self.account)
        except KeyringError as exc:
            self._handle_keyring_failure(f"reading credentials failed: {exc}")
            return None

    def _load_from_file(self) -> Optional[str]:
        if self.token_file.exists():
            try:
                with open(self.token_file, "r", encoding="utf-8") as file_handle:
                    return file_handle.read().strip()
            except OSError as exc:
                logger.warning("Could not read token file %s: %s", self.token_file, exc)
        return None

    def _save_to_keyring(self, token: str) -> bool:
        try:
            keyring.set_password(KEYRING_SERVICE_NAME, self.account, token)
            return True
        except KeyringError as exc:
            self._handle_keyring_failure(f"writing credentials failed: {exc}")
            return False

    def _save_to_file(self, token: str) -> None:
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.token_file, "w", encoding="utf-8") as file_handle:
                file_handle.write(token)
            self.token_file.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not save token to %s: %s", self.token_file, exc)
            raise

    def _handle_keyring_failure(self, reason: str) -> None:
        if self._keyring_supported:
            logger.warning(
                "Secure credential storage unavailable (%s). Falling back to plaintext file.",
                reason,
            )
        self._keyring_supported = False
        if not self._insecure_storage_warning:
            self._insecure_storage_warning = (
                f"Secure credential storage unavailable ({reason}). "
                f"Falling back to plaintext token file at {self.token_file}."
            )
