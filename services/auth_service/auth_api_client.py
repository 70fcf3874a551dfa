"""
HTTP client for the remote authentication API.

Wraps the four auth endpoints the console depends on (login, register,
federated login, profile update) and turns every failure into an
``ApiResponse`` carrying a human-readable message.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from config.app_config import APIConfig, get_config
from services.auth_service.models import (
    ApiResponse, AuthSession, Identity, RegistrationProfile
)
from utils.logging_config import get_logger, log_execution_time

logger = get_logger(__name__)

LOGIN_FAILED_MESSAGE = "Invalid credentials"
REGISTER_FAILED_MESSAGE = "Registration failed"
UPDATE_PROFILE_FAILED_MESSAGE = "Could not update profile"
FEDERATED_LOGIN_FAILED_MESSAGE = "Google sign-in could not be validated"


class AuthApiError(Exception):
    """Error response from the auth API"""

    def __init__(self, status_code: Optional[int], detail: Optional[str] = None,
                 field_errors: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.detail = detail
        self.field_errors = field_errors or {}
        super().__init__(detail or f"Auth API error (status {status_code})")

    @classmethod
    def from_response(cls, response: httpx.Response) -> 'AuthApiError':
        """Parse ``{"detail": ...}`` or a field-keyed validation map"""
        try:
            body = response.json()
        except ValueError:
            body = None

        detail = None
        field_errors: Dict[str, Any] = {}
        if isinstance(body, dict):
            if isinstance(body.get("detail"), str):
                detail = body["detail"]
            else:
                field_errors = body
        return cls(response.status_code, detail, field_errors)

    def first_field_error(self) -> Optional[str]:
        """First message of the first reported field"""
        for value in self.field_errors.values():
            if isinstance(value, (list, tuple)):
                value = value[0] if value else None
            if value:
                return str(value)
        return None


class RemoteAuthEndpoint(ABC):
    """Contract the session manager consumes"""

    @abstractmethod
    async def login(self, email: str, password: str) -> ApiResponse[AuthSession]:
        ...

    @abstractmethod
    async def register(self, profile: RegistrationProfile) -> ApiResponse[AuthSession]:
        ...

    @abstractmethod
    async def federated_login(self, provider_token: str) -> ApiResponse[AuthSession]:
        ...

    @abstractmethod
    async def update_profile(self, changes: Dict[str, Any],
                             token: Optional[str] = None) -> ApiResponse[Identity]:
        ...


class AuthApiClient(RemoteAuthEndpoint):
    """
    httpx-backed implementation of the auth endpoint contract

    Args:
        api_config: API settings (defaults to the global configuration)
        transport: Optional httpx transport, used by tests to stub the server
    """

    LOGIN_PATH = "login/"
    REGISTER_PATH = "register/"
    FEDERATED_LOGIN_PATH = "auth/google/"
    PROFILE_PATH = "auth/user/"

    def __init__(self, api_config: Optional[APIConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = api_config or get_config().api
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )

    async def _send(self, method: str, path: str, payload: Dict[str, Any],
                    token: Optional[str] = None) -> Any:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        with log_execution_time(logger, f"{method} {path}"):
            async with self._client() as client:
                response = await client.request(method, path, json=payload, headers=headers)

        if response.is_error:
            raise AuthApiError.from_response(response)
        return response.json()

    @staticmethod
    def _session_from(body: Any) -> AuthSession:
        if not isinstance(body, dict) or "user" not in body:
            raise ValueError("Auth response is missing 'user'")
        token = body.get("access") or body.get("accessToken") or body.get("access_token")
        if not token:
            raise ValueError("Auth response is missing the access token")
        return AuthSession(user=Identity.from_dict(body["user"]), access_token=token)

    async def login(self, email: str, password: str) -> ApiResponse[AuthSession]:
        try:
            body = await self._send("POST", self.LOGIN_PATH, {"email": email, "password": password})
        except AuthApiError as e:
            logger.info(f"Login rejected (status {e.status_code})")
            return ApiResponse.fail(e.detail or LOGIN_FAILED_MESSAGE)
        except httpx.RequestError as e:
            logger.error(f"Transport error during login: {e}")
            return ApiResponse.fail(LOGIN_FAILED_MESSAGE)
        return ApiResponse.ok(self._session_from(body))

    async def register(self, profile: RegistrationProfile) -> ApiResponse[AuthSession]:
        try:
            body = await self._send("POST", self.REGISTER_PATH, profile.to_payload())
        except AuthApiError as e:
            logger.info(f"Registration rejected (status {e.status_code})")
            message = REGISTER_FAILED_MESSAGE
            if e.status_code == 400:
                message = e.first_field_error() or e.detail or REGISTER_FAILED_MESSAGE
            return ApiResponse.fail(message)
        except httpx.RequestError as e:
            logger.error(f"Transport error during registration: {e}")
            return ApiResponse.fail(REGISTER_FAILED_MESSAGE)
        return ApiResponse.ok(self._session_from(body))

    async def federated_login(self, provider_token: str) -> ApiResponse[AuthSession]:
        try:
            body = await self._send("POST", self.FEDERATED_LOGIN_PATH, {"access_token": provider_token})
        except AuthApiError as e:
            logger.info(f"Federated login rejected (status {e.status_code})")
            return ApiResponse.fail(e.detail or FEDERATED_LOGIN_FAILED_MESSAGE)
        except httpx.RequestError as e:
            logger.error(f"Transport error during federated login: {e}")
            return ApiResponse.fail(FEDERATED_LOGIN_FAILED_MESSAGE)
        return ApiResponse.ok(self._session_from(body))

    async def update_profile(self, changes: Dict[str, Any],
                             token: Optional[str] = None) -> ApiResponse[Identity]:
        try:
            body = await self._send("PATCH", self.PROFILE_PATH, changes, token=token)
        except (AuthApiError, httpx.RequestError) as e:
            logger.warning(f"Profile update failed: {e}")
            return ApiResponse.fail(UPDATE_PROFILE_FAILED_MESSAGE)
        return ApiResponse.ok(Identity.from_dict(body))
