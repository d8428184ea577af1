"""Persistent admin session.

The session is a small JSON document at
``~/.local/share/academy/session.json`` (XDG) or the platform-equivalent
data directory. It is written atomically with ``0o600`` permissions and
records who logged in and when the session lapses.

See Also:
    :func:`~academy.auth.manager.login` -- creates sessions.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from academy.config import _atomic_write, get_data_dir

SESSION_LIFETIME = timedelta(hours=24)
_SESSION_FILENAME = "session.json"


class AdminSession(BaseModel):
    """A logged-in admin.

    Attributes:
        username: The account that logged in.
        logged_in_at: UTC time of the login.
        expires_at: UTC time after which the session is no longer valid.
    """

    username: str
    logged_in_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime

    @classmethod
    def start(cls, username: str, now: Optional[datetime] = None) -> AdminSession:
        """Open a session for *username* lasting :data:`SESSION_LIFETIME`."""
        now = now or datetime.now(timezone.utc)
        return cls(username=username, logged_in_at=now, expires_at=now + SESSION_LIFETIME)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return now < expires


class SessionStore:
    """Read/write the admin session file.

    Args:
        path: Session file location. Defaults to ``session.json`` in the
            data directory.

    Example::

        store = SessionStore()
        store.save(AdminSession.start("admin"))
        store.load().username
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_data_dir() / _SESSION_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def save(self, session: AdminSession) -> None:
        """Persist *session* atomically with ``0o600`` permissions."""
        text = json.dumps(session.model_dump(mode="json"), indent=2) + "\n"
        _atomic_write(self._path, text, mode=0o600)

    def load(self) -> Optional[AdminSession]:
        """Return the stored session, or ``None`` if absent or unreadable.

        Expiry is not checked here; see :meth:`AdminSession.is_active`.
        """
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return AdminSession.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def clear(self) -> None:
        """Delete the session file. No-op if it does not exist."""
        if self._path.is_file():
            self._path.unlink()
