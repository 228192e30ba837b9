"""
Session context.

Supplies the opaque user id that is attached to every analysis request.
Sign-in is deliberately minimal: an email address is enough, and the user
id is minted from the sign-in time in epoch milliseconds. The signed-in
user can be persisted to a small JSON file so the CLI remembers it between
invocations.

Listeners registered with ``on_logout`` run when the user signs out; the
CLI uses this to reset the workflow.
"""

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class User:
    id: str
    email: str

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(id=str(data["id"]), email=str(data["email"]))


class SessionContext:
    """Holds the signed-in user, if any."""

    def __init__(self, session_file: str | Path | None = None):
        self.session_file = Path(session_file) if session_file else None
        self.user: Optional[User] = None
        self._logout_listeners: list[Callable[[], None]] = []

        if self.session_file is not None:
            self.user = self._load()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def get_user_id(self) -> Optional[str]:
        """The signed-in user's id, or None when nobody is signed in."""
        return self.user.id if self.user else None

    def login(self, email: str) -> User:
        """
        Sign in with an email address.

        Raises:
            ValidationError: If the email is blank.
        """
        email = (email or "").strip()
        if not email:
            raise ValidationError("Please enter an email address to sign in.")

        self.user = User(id=str(int(time.time() * 1000)), email=email)
        self._save()
        logger.info(f"Signed in as {email} (user id {self.user.id})")
        return self.user

    def logout(self) -> None:
        """Sign out, forget the persisted user and notify listeners."""
        if self.user is not None:
            logger.info(f"Signed out {self.user.email}")
        self.user = None
        if self.session_file is not None and self.session_file.exists():
            self.session_file.unlink()
        for listener in self._logout_listeners:
            listener()

    def on_logout(self, listener: Callable[[], None]) -> None:
        self._logout_listeners.append(listener)

    # ── Persistence ──

    def _load(self) -> Optional[User]:
        if not self.session_file.exists():
            return None
        try:
            data = json.loads(self.session_file.read_text(encoding="utf-8"))
            return User.from_dict(data)
        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.session_file}: {e}")
            return None

    def _save(self) -> None:
        if self.session_file is None or self.user is None:
            return
        self.session_file.parent.mkdir(parents=True, exist_ok=True)
        self.session_file.write_text(json.dumps(self.user.to_dict(), indent=2), encoding="utf-8")
