from typing import Optional
from coffeehub.auth.session import UserSession
from coffeehub.services.kv_store import KeyValueStore

KEY_IS_LOGGED_IN = "is_logged_in"
KEY_USER_ID = "user_id"
KEY_USER_EMAIL = "user_email"
KEY_USER_NAME = "user_name"
KEY_IS_ADMIN = "is_admin"
KEY_REMEMBER_ME = "remember_me"


def session_namespace(user_id: str) -> str:
    return f"session:{user_id}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class SessionStore:
    """Persisted record of who is signed in on a device."""

    def __init__(self, storage: KeyValueStore):
        self._storage = storage

    @classmethod
    def for_user(cls, user_id: str) -> "SessionStore":
        return cls(KeyValueStore(session_namespace(user_id)))

    def save_session(self, user_id: str, email: str, name: str, is_admin: bool,
                     remember_me: bool = False) -> None:
        self._storage.set_many({
            KEY_IS_LOGGED_IN: _flag(True),
            KEY_USER_ID: user_id,
            KEY_USER_EMAIL: email,
            KEY_USER_NAME: name,
            KEY_IS_ADMIN: _flag(is_admin),
            KEY_REMEMBER_ME: _flag(remember_me),
        })

    def save_from(self, user_session: UserSession, remember_me: bool = False) -> None:
        self.save_session(
            user_session.user_id,
            user_session.email,
            user_session.name,
            user_session.is_admin,
            remember_me,
        )

    def _get_flag(self, key: str) -> bool:
        return self._storage.get(key) == "true"

    def is_logged_in(self) -> bool:
        return self._get_flag(KEY_IS_LOGGED_IN)

    def is_remember_me_enabled(self) -> bool:
        return self._get_flag(KEY_REMEMBER_ME)

    def is_admin(self) -> bool:
        return self._get_flag(KEY_IS_ADMIN)

    @property
    def user_id(self) -> Optional[str]:
        return self._storage.get(KEY_USER_ID)

    @property
    def email(self) -> Optional[str]:
        return self._storage.get(KEY_USER_EMAIL)

    @property
    def name(self) -> Optional[str]:
        return self._storage.get(KEY_USER_NAME)

    def set_remember_me(self, enabled: bool) -> None:
        self._storage.set(KEY_REMEMBER_ME, _flag(enabled))

    def clear(self) -> None:
        self._storage.clear()

    def to_dict(self):
        return {
            "is_logged_in": self.is_logged_in(),
            "user_id": self.user_id,
            "email": self.email,
            "name": self.name,
            "is_admin": self.is_admin(),
            "remember_me": self.is_remember_me_enabled(),
        }
