"""HTTP client for the tracking API.

API Flow:
1. TimeTrackingClient.login(email, password) -> AuthenticatedUser (bearer token)
2. TimeTrackingClient.fetch_state() -> full snapshot in one round trip
3. create_*/update_*/delete_* per entity; the store reconciles the results

Responses are wrapped as {"data": ...}; failures as {"error": "..."}.
"""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from timekeeper.errors import AuthorizationError, RemoteError
from timekeeper.models.auth_schemas import AuthenticatedUser, Token, UserResponse
from timekeeper.models.schemas import (
    CreateEntryRequest,
    CreateFolderRequest,
    CreateModuleRequest,
    CreateTimerSessionRequest,
    Entry,
    Folder,
    Module,
    Profile,
    StatePayload,
    TimerSession,
    UpdateEntryRequest,
    UpdateFolderRequest,
    UpdateModuleRequest,
    UpdateProfileRequest,
)
from timekeeper.settings import settings
from timekeeper.utils import get_logger

logger = get_logger(__name__)

ZEIT_PATH = "/api/zeit"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode(model: type[ModelT], data: Any, fallback_message: str) -> ModelT:
    """Validate an unwrapped response body; a malformed body is a RemoteError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Malformed {model.__name__} in response: {e.error_count()} validation error(s)")
        raise RemoteError(fallback_message) from e


class TimeTrackingClient:
    """Async client for the tracking API.

    Pass ``http_client`` to share a connection pool or to route requests to
    an in-process ASGI app (tests); otherwise the client owns its own
    ``httpx.AsyncClient`` and closes it in ``aclose()``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = settings.http_timeout if timeout is None else timeout
        self._access_token = access_token
        self._http_client = http_client
        self._owns_client = http_client is None

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def _get_headers(self, auth: bool) -> dict:
        headers = {"Content-Type": "application/json"}
        if auth and self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        json: dict | None = None,
        auth: bool = True,
    ) -> Any:
        """Send a request and unwrap the {"data": ...} envelope.

        Raises:
            AuthorizationError: If auth is required and no token is set (no request is sent)
            RemoteError: On transport failure or non-2xx status; the typed
                wrappers also raise it for a 2xx body that fails validation
        """
        if auth and not self._access_token:
            raise AuthorizationError("Please sign in first.")

        try:
            resp = await self._client().request(
                method,
                path,
                json=json,
                headers=self._get_headers(auth),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RemoteError(f"{fallback_message} ({e})") from e

        payload: Any = None
        if resp.status_code != 204 and resp.content:
            try:
                payload = resp.json()
            except ValueError:
                payload = None

        if not resp.is_success:
            message = payload.get("error") if isinstance(payload, dict) else None
            logger.warning(f"{method} {path} returned {resp.status_code}: {message or fallback_message}")
            raise RemoteError(message or fallback_message, status_code=resp.status_code)

        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    # ==================== Auth ====================

    async def register(self, email: str, password: str, display_name: str | None = None) -> UserResponse:
        data = await self._request(
            "POST",
            "/api/auth/register",
            "Registration failed.",
            json={"email": email, "password": password, "displayName": display_name},
            auth=False,
        )
        return _decode(UserResponse, data, "Registration failed.")

    async def login(self, email: str, password: str) -> AuthenticatedUser:
        """Exchange credentials for a bearer token and remember it."""
        data = await self._request(
            "POST",
            "/api/auth/login",
            "Sign-in failed.",
            json={"email": email, "password": password},
            auth=False,
        )
        token = _decode(Token, data, "Sign-in failed.")
        self.set_access_token(token.accessToken)
        return AuthenticatedUser(id=token.userId, email=email, accessToken=token.accessToken)

    # ==================== State ====================

    async def fetch_state(self) -> StatePayload:
        data = await self._request("GET", f"{ZEIT_PATH}/state", "Could not load tracking data.")
        return _decode(StatePayload, data or {}, "Could not load tracking data.")

    async def upsert_profile(self, request: UpdateProfileRequest) -> Profile:
        data = await self._request(
            "PATCH",
            f"{ZEIT_PATH}/profile",
            "Could not save profile.",
            json=request.model_dump(exclude_unset=True),
        )
        return _decode(Profile, data, "Could not save profile.")

    # ==================== Folders ====================

    async def create_folder(self, request: CreateFolderRequest) -> Folder:
        data = await self._request(
            "POST", f"{ZEIT_PATH}/folders", "Could not create folder.", json=request.model_dump()
        )
        return _decode(Folder, data, "Could not create folder.")

    async def update_folder(self, folder_id: str, request: UpdateFolderRequest) -> Folder:
        data = await self._request(
            "PATCH",
            f"{ZEIT_PATH}/folders/{folder_id}",
            "Could not update folder.",
            json=request.model_dump(exclude_unset=True),
        )
        return _decode(Folder, data, "Could not update folder.")

    async def delete_folder(self, folder_id: str) -> None:
        await self._request("DELETE", f"{ZEIT_PATH}/folders/{folder_id}", "Could not delete folder.")

    # ==================== Modules ====================

    async def create_module(self, request: CreateModuleRequest) -> Module:
        data = await self._request(
            "POST", f"{ZEIT_PATH}/modules", "Could not create module.", json=request.model_dump()
        )
        return _decode(Module, data, "Could not create module.")

    async def update_module(self, module_id: str, request: UpdateModuleRequest) -> Module:
        data = await self._request(
            "PATCH",
            f"{ZEIT_PATH}/modules/{module_id}",
            "Could not update module.",
            json=request.model_dump(exclude_unset=True),
        )
        return _decode(Module, data, "Could not update module.")

    async def delete_module(self, module_id: str) -> None:
        await self._request("DELETE", f"{ZEIT_PATH}/modules/{module_id}", "Could not delete module.")

    # ==================== Entries ====================

    async def create_entry(self, request: CreateEntryRequest) -> Entry:
        data = await self._request(
            "POST", f"{ZEIT_PATH}/entries", "Could not create entry.", json=request.model_dump()
        )
        return _decode(Entry, data, "Could not create entry.")

    async def update_entry(self, entry_id: str, request: UpdateEntryRequest) -> Entry:
        data = await self._request(
            "PATCH",
            f"{ZEIT_PATH}/entries/{entry_id}",
            "Could not update entry.",
            json=request.model_dump(exclude_unset=True),
        )
        return _decode(Entry, data, "Could not update entry.")

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"{ZEIT_PATH}/entries/{entry_id}", "Could not delete entry.")

    # ==================== Timer sessions ====================

    async def create_timer_session(self, request: CreateTimerSessionRequest) -> TimerSession:
        data = await self._request(
            "POST",
            f"{ZEIT_PATH}/timer-sessions",
            "Could not save timer session.",
            json=request.model_dump(),
        )
        return _decode(TimerSession, data, "Could not save timer session.")
