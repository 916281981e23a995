"""
HTTP client for the procurement backend.

Every call carries ``Authorization: Bearer <accessToken>`` when a session is
stored. A 401 triggers at most one refresh of the access token followed by a
single replay of the original request; if the refresh fails the stored
session is wiped and ``SessionExpiredError`` is raised.
"""

import base64
import json
import logging
import threading
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

import requests

import config
from infrastructure.storage.session_store import InMemorySessionStore, SessionStore
from use_cases.session_models import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, SESSION_KEYS, USER_KEY, Session

log = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."
NO_REFRESH_TOKEN_MESSAGE = "No refresh token available"
GENERIC_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class NetworkError(ApiError):
    pass


class SessionExpiredError(ApiError):
    pass


class NoRefreshTokenError(ApiError):
    pass


def _item_message(item: Any, fields) -> str:
    if isinstance(item, dict):
        for name in fields:
            if item.get(name):
                return str(item[name])
        return ""
    return str(item) if item else ""


def error_message(payload: Any) -> str:
    """Human-readable message from an error body; validation lists win over ``error``/``message``."""
    if not isinstance(payload, dict):
        return GENERIC_ERROR_MESSAGE
    fallback = str(payload.get("error") or payload.get("message") or GENERIC_ERROR_MESSAGE)
    for list_key, fields in (("details", ("message", "path")), ("errors", ("message",))):
        items = payload.get(list_key)
        if isinstance(items, list):
            joined = ", ".join(m for m in (_item_message(i, fields) for i in items) if m)
            return joined or fallback
    return fallback


def _decode_b64(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + pad)


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        store: Optional[SessionStore] = None,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or config.api_base_url()).rstrip("/")
        self.store = store if store is not None else InMemorySessionStore()
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout if timeout is not None else config.api_timeout()
        self._refresh_lock = threading.RLock()

    # --- transport ---

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        allow_retry: bool = True,
    ) -> Dict[str, Any]:
        token = self.store.get(ACCESS_TOKEN_KEY)

        merged_headers = {"Content-Type": "application/json"}
        merged_headers.update(headers or {})
        if token:
            merged_headers["Authorization"] = f"Bearer {token}"

        url = f"{self.base_url}{endpoint}"
        log.debug(f"{method} {url}")
        try:
            resp = self.http.request(
                method,
                url,
                headers=merged_headers,
                data=json.dumps(body) if body is not None else None,
                params=params or None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"❌ Network error on {method} {endpoint}: {e}")
            raise NetworkError(NETWORK_ERROR_MESSAGE) from e

        if resp.status_code == 401 and allow_retry:
            self._recover_session(token)
            return self.request(endpoint, method=method, body=body, params=params, headers=headers, allow_retry=False)

        payload = self._parse_body(resp)
        if not 200 <= resp.status_code < 300:
            message = error_message(payload)
            if resp.status_code == 403:
                self._log_forbidden(endpoint, payload)
            else:
                log.warning(f"API error {resp.status_code} on {method} {endpoint}: {message}")
            raise ApiError(message, status_code=resp.status_code, payload=payload)

        return payload

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.request(endpoint, method="GET", params=params)

    def post(self, endpoint: str, body: Any = None) -> Dict[str, Any]:
        return self.request(endpoint, method="POST", body=body)

    def put(self, endpoint: str, body: Any = None) -> Dict[str, Any]:
        return self.request(endpoint, method="PUT", body=body)

    def delete(self, endpoint: str) -> Dict[str, Any]:
        return self.request(endpoint, method="DELETE")

    @staticmethod
    def _parse_body(resp) -> Dict[str, Any]:
        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError:
            log.warning(f"Non-JSON response body (HTTP {resp.status_code})")
            return {}
        return data if isinstance(data, dict) else {"data": data}

    def _recover_session(self, failed_token: Optional[str]) -> None:
        # One refresh per client at a time; callers queued behind it reuse the new token.
        with self._refresh_lock:
            current = self.store.get(ACCESS_TOKEN_KEY)
            if current and current != failed_token:
                log.info("Access token was rotated by a concurrent refresh, replaying request")
                return
            try:
                self.refresh_token()
            except ApiError as e:
                log.warning(f"⚠️ Token refresh failed ({e}), clearing stored session")
                self.logout()
                raise SessionExpiredError(SESSION_EXPIRED_MESSAGE, status_code=401) from e

    # --- session ---

    def login(self, email: str, password: str) -> Dict[str, Any]:
        response = self.request(
            "/auth/login",
            method="POST",
            body={"email": email, "password": password},
            allow_retry=False,
        )
        data = response.get("data") or {}
        if not data.get("token") or not data.get("refreshToken"):
            raise ApiError(error_message(response), payload=response)

        self.store.set_many({
            ACCESS_TOKEN_KEY: data["token"],
            REFRESH_TOKEN_KEY: data["refreshToken"],
            USER_KEY: json.dumps(data.get("user")),
        })
        log.info(f"✅ Logged in as {(data.get('user') or {}).get('email', email)}")
        return data

    def refresh_token(self) -> Dict[str, Any]:
        refresh = self.store.get(REFRESH_TOKEN_KEY)
        if not refresh:
            raise NoRefreshTokenError(NO_REFRESH_TOKEN_MESSAGE)

        response = self.request(
            "/auth/refresh",
            method="POST",
            body={"refreshToken": refresh},
            allow_retry=False,
        )
        data = response.get("data") or {}
        if not data.get("token"):
            raise ApiError("Refresh response did not include a token", payload=response)

        self.store.set(ACCESS_TOKEN_KEY, data["token"])
        log.info("Access token refreshed")
        return data

    def logout(self) -> None:
        for key in SESSION_KEYS:
            self.store.delete(key)
        log.info("Session cleared")

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        raw = self.store.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            log.warning("Stored user snapshot is not valid JSON, ignoring it")
            return None
        return user if isinstance(user, dict) else None

    def is_authenticated(self) -> bool:
        return bool(self.store.get(ACCESS_TOKEN_KEY))

    def current_session(self) -> Session:
        return Session(
            access_token=self.store.get(ACCESS_TOKEN_KEY),
            refresh_token=self.store.get(REFRESH_TOKEN_KEY),
            user=self.get_current_user(),
        )

    @staticmethod
    def decode_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Decode a JWT payload without verifying it. Diagnostics only."""
        if not token:
            return None
        try:
            payload = json.loads(_decode_b64(token.split(".")[1]).decode("utf-8"))
        except (IndexError, ValueError, UnicodeDecodeError):
            return None
        return payload if isinstance(payload, dict) else None

    def _log_forbidden(self, endpoint: str, payload: Dict[str, Any]) -> None:
        claims = self.decode_token(self.store.get(ACCESS_TOKEN_KEY)) or {}
        exp = claims.get("exp")
        expires = datetime.fromtimestamp(exp).isoformat() if isinstance(exp, (int, float)) else "n/a"
        log.warning(
            f"Access denied on {endpoint}: {error_message(payload)} "
            f"(token role={claims.get('role')}, expires={expires})"
        )
