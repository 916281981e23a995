"""Session DTOs shared across application layers."""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

Role = Literal["Approver", "NPD", "Maintenance", "Spares", "Indentor"]

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_KEY = "user"
SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY)


@dataclass(frozen=True)
class Session:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_logged_in(self) -> bool:
        return bool(self.access_token)


def display_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return ""
    full = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()
    return full or user.get("email", "")


def user_role(user: Optional[Dict[str, Any]]) -> Optional[str]:
    return user.get("role") if user else None
