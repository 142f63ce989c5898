import hmac
from typing import Optional
from fastapi import Header, Query, Request
from utils.errors import AuthError, ConfigError


class AccessGate:
    """Shared-secret check for mutating endpoints.

    The secret is handed in when the app is built; an empty secret means the
    server is misconfigured and every gated request fails with a 500.
    """

    def __init__(self, admin_key: str):
        self._admin_key = admin_key or ""

    @property
    def configured(self) -> bool:
        return bool(self._admin_key)

    def check(self, presented: Optional[str]) -> None:
        if not self._admin_key:
            raise ConfigError("ADMIN_KEY not set on server")
        if not presented or not hmac.compare_digest(presented.encode(), self._admin_key.encode()):
            raise AuthError("Unauthorised")


def require_key(
    request: Request,
    x_key: Optional[str] = Header(None, alias="x-key"),
    key: Optional[str] = Query(None),
):
    request.app.state.access_gate.check(x_key or key)
