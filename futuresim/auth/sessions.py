"""Bearer-token sessions with one active session per user."""

import json
import logging
import secrets
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from futuresim.errors import SessionExpired

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Issues and resolves opaque session tokens.

    Logging in again evicts the user's previous token, so only the most
    recent login stays valid. When a path is given the token table is kept
    in a JSON file so sessions survive between CLI invocations.
    """

    TOKEN_BYTES = 24

    def __init__(self, path: Optional[Path] = None):
        """Initialize the session registry.

        Args:
            path: Optional JSON file to persist sessions in.
        """
        self.path = path
        self._lock = threading.Lock()
        self._sessions: dict[str, dict] = {}
        self._user_tokens: dict[str, str] = {}
        self._load_sessions()

    def _load_sessions(self) -> None:
        """Load persisted sessions, starting empty if none are readable."""
        if self.path is None or not self.path.exists():
            return

        try:
            data = json.loads(self.path.read_text())
            sessions = dict(data.get("sessions", {}))
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return

        for token, session in sessions.items():
            username = session.get("username") if isinstance(session, dict) else None
            if username:
                self._sessions[token] = session
                self._user_tokens[username] = token

    def _save_sessions(self) -> None:
        """Persist sessions if a path was configured."""
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"sessions": self._sessions}, indent=2))

    def create(self, username: str) -> str:
        """Start a session, evicting the user's previous one.

        Args:
            username: Authenticated username.

        Returns:
            New session token.
        """
        token = secrets.token_hex(self.TOKEN_BYTES)

        with self._lock:
            previous = self._user_tokens.get(username)
            if previous is not None:
                self._sessions.pop(previous, None)
                logger.info("Evicted previous session for %s", username)

            self._user_tokens[username] = token
            self._sessions[token] = {
                "username": username,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            self._save_sessions()

        return token

    def resolve(self, token: Optional[str]) -> str:
        """Get the username for a session token.

        Raises:
            SessionExpired: If the token is unknown or was evicted.
        """
        with self._lock:
            session = self._sessions.get(token) if token else None
        if session is None:
            raise SessionExpired()
        return session["username"]

    def clear(self, token: Optional[str]) -> None:
        """End a session. Unknown tokens are ignored."""
        if not token:
            return

        with self._lock:
            session = self._sessions.pop(token, None)
            if session is None:
                return
            username = session["username"]
            if self._user_tokens.get(username) == token:
                del self._user_tokens[username]
            self._save_sessions()
