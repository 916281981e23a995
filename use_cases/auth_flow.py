"""Authentication flow orchestration (application layer)."""

from dataclasses import dataclass
from typing import Literal, Optional

from utils import session_manager

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    user_id: Optional[str] = None


def ensure_authenticated_session() -> AuthFlowResult:
    """Run auth-gate orchestration and return a control-flow status."""
    session_manager.init_session_state()
    client = session_manager.get_api_client()

    if not client.is_authenticated():
        return AuthFlowResult(status="STOP", reason="auth_required")

    user = client.get_current_user() or {}
    if user.get("isActive") is False:
        client.logout()
        return AuthFlowResult(status="STOP", reason="account_inactive")

    return AuthFlowResult(status="CONTINUE", reason="authenticated", user_id=user.get("id"))
