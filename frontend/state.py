"""
Session state for Job Copilot clients.

Holds what a UI needs between requests: auth status and tokens, theme,
notifications, per-key loading flags and the sidebar flag. Tokens and
theme are mirrored into a caller-supplied storage mapping so a session
can be restored later.

Auth actions run against a JobCopilotClient and copy the resulting
tokens into that client's own config; nothing global is touched.
"""

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, MutableMapping, Optional

from .api_client import ApiError, JobCopilotClient


TOKEN_KEY = "token"
ADMIN_TOKEN_KEY = "adminToken"
THEME_KEY = "theme"

DEFAULT_NOTIFICATION_MS = 5000


@dataclass
class AuthState:
    token: Optional[str] = None
    admin_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    is_authenticated: bool = False
    is_admin: bool = False
    loading: bool = False
    error: Optional[str] = None


@dataclass
class Notification:
    id: int
    type: str
    message: str
    duration: int = DEFAULT_NOTIFICATION_MS


@dataclass
class UIState:
    theme: str = "light"
    notifications: List[Notification] = field(default_factory=list)
    loading: Dict[str, bool] = field(default_factory=dict)
    sidebar_open: bool = False


class SessionState:
    """
    Auth and UI state for one client session.

    Args:
        client: Client whose config receives the session's tokens
        storage: Mapping persisted across sessions (token, adminToken, theme)
    """

    def __init__(self, client: JobCopilotClient, storage: Optional[MutableMapping[str, str]] = None):
        self.client = client
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}
        self.auth = AuthState(
            token=self.storage.get(TOKEN_KEY),
            admin_token=self.storage.get(ADMIN_TOKEN_KEY),
        )
        self.ui = UIState(theme=self.storage.get(THEME_KEY, "light"))
        self._ids = itertools.count(1)

        self.client.config.token = self.auth.token
        self.client.config.admin_token = self.auth.admin_token

    # ===== Auth =====

    def _store_token(self, token: Optional[str]) -> None:
        self.auth.token = token
        self.client.config.token = token
        if token:
            self.storage[TOKEN_KEY] = token
        else:
            self.storage.pop(TOKEN_KEY, None)

    def _store_admin_token(self, token: Optional[str]) -> None:
        self.auth.admin_token = token
        self.client.config.admin_token = token
        if token:
            self.storage[ADMIN_TOKEN_KEY] = token
        else:
            self.storage.pop(ADMIN_TOKEN_KEY, None)

    def _authenticated(self, user: Dict[str, Any]) -> Dict[str, Any]:
        self.auth.user = user
        self.auth.is_authenticated = True
        self.auth.loading = False
        self.auth.error = None
        return user

    def _auth_failed(self, error: ApiError, clear_token: bool = True) -> None:
        if clear_token:
            self._store_token(None)
        self.auth.user = None
        self.auth.is_authenticated = False
        self.auth.loading = False
        self.auth.error = error.message

    def load_user(self) -> Optional[Dict[str, Any]]:
        """Restore the user from the stored token; clears a rejected token."""
        if not self.auth.token:
            self.auth.error = "No token found"
            return None
        self.auth.loading = True
        try:
            user = self.client.get_profile()
        except ApiError as e:
            self._auth_failed(e)
            return None
        return self._authenticated(user)

    def login(self, email: str, password: str) -> bool:
        self.auth.loading = True
        try:
            self._store_token(self.client.login(email, password))
            user = self.client.get_profile()
        except ApiError as e:
            self._auth_failed(e)
            return False
        self._authenticated(user)
        return True

    def register(self, name: str, email: str, password: str) -> bool:
        self.auth.loading = True
        try:
            self._store_token(self.client.register(name, email, password))
            user = self.client.get_profile()
        except ApiError as e:
            self._auth_failed(e)
            return False
        self._authenticated(user)
        return True

    def admin_login(self, email: str, password: str) -> bool:
        self.auth.loading = True
        try:
            self._store_admin_token(self.client.admin_login(email, password))
        except ApiError as e:
            self._store_admin_token(None)
            self.auth.is_admin = False
            self.auth.loading = False
            self.auth.error = e.message
            return False
        self.auth.is_admin = True
        self.auth.loading = False
        self.auth.error = None
        return True

    def logout(self) -> None:
        self._store_token(None)
        self.auth.user = None
        self.auth.is_authenticated = False
        self.auth.loading = False
        self.auth.error = None

    def admin_logout(self) -> None:
        self._store_admin_token(None)
        self.auth.is_admin = False
        self.auth.loading = False
        self.auth.error = None

    def clear_error(self) -> None:
        self.auth.error = None

    # ===== UI =====

    def toggle_theme(self) -> str:
        self.ui.theme = "dark" if self.ui.theme == "light" else "light"
        self.storage[THEME_KEY] = self.ui.theme
        return self.ui.theme

    def add_notification(
        self,
        type: str,
        message: str,
        duration: int = DEFAULT_NOTIFICATION_MS,
        id: Optional[int] = None,
    ) -> Notification:
        notification = Notification(
            id=id if id is not None else next(self._ids),
            type=type,
            message=message,
            duration=duration,
        )
        self.ui.notifications.append(notification)
        return notification

    def remove_notification(self, notification_id: int) -> None:
        self.ui.notifications = [n for n in self.ui.notifications if n.id != notification_id]

    def set_loading(self, key: str, is_loading: bool) -> None:
        self.ui.loading[key] = is_loading

    def is_loading(self, key: str) -> bool:
        return self.ui.loading.get(key, False)

    def toggle_sidebar(self) -> bool:
        self.ui.sidebar_open = not self.ui.sidebar_open
        return self.ui.sidebar_open

    def set_sidebar_open(self, is_open: bool) -> None:
        self.ui.sidebar_open = is_open
