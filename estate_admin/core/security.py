# ================================
# SECURITY CORE (core/security.py)
# ================================

import json
import logging
import os
from typing import Optional, Dict, Any

from estate_admin.config import settings
from estate_admin.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

class MemorySessionStore:
    """Key/value session storage held in memory"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

class FileSessionStore(MemorySessionStore):
    """Session storage persisted to a JSON file"""

    def __init__(self, path: str):
        self.path = path
        initial = {}
        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as fh:
                    initial = json.load(fh)
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable session file {path}: {str(e)}")
                initial = {}
        super().__init__(initial)

    def _flush(self) -> None:
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh)

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self._flush()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._flush()

class AuthContext:
    """Single source of truth for the admin session.

    Injected into the API client at construction; leaf calls never read
    session storage directly.
    """

    def __init__(self, store=None, token_key: str = None, user_key: str = None):
        self.store = store if store is not None else MemorySessionStore()
        self.token_key = token_key or settings.AUTH_TOKEN_KEY
        self.user_key = user_key or settings.AUTH_USER_KEY

    @classmethod
    def from_settings(cls) -> "AuthContext":
        if settings.SESSION_FILE:
            return cls(FileSessionStore(settings.SESSION_FILE))
        return cls()

    @property
    def token(self) -> Optional[str]:
        return self.store.get(self.token_key)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        raw = self.store.get(self.user_key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Stored admin user is not valid JSON, clearing session")
            self.logout()
            return None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def login(self, token: str, user: Dict[str, Any]) -> None:
        if not token:
            raise AuthenticationError("Login response did not contain an access token")
        self.store.set(self.token_key, token)
        self.store.set(self.user_key, json.dumps(user))
        logger.info(f"Admin session started for {user.get('email')}")

    def logout(self) -> None:
        """Invalidate the session; later calls go out without credentials"""
        self.store.remove(self.token_key)
        self.store.remove(self.user_key)
        logger.info("Admin session cleared")

    def auth_headers(self, required: bool = False) -> Dict[str, str]:
        token = self.token
        if not token:
            if required:
                raise AuthenticationError("Your session has expired. Please log in again.")
            return {}
        return {"Authorization": f"Bearer {token}"}
