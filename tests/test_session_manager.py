"""
Tests for the session manager: login, registration, federated login,
profile updates, logout and startup restoration.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from config.app_config import AuthConfig
from services.auth_service.auth_api_client import RemoteAuthEndpoint
from services.auth_service.models import (
    ApiResponse, AuthSession, Identity, RegistrationProfile, UserRole
)
from services.auth_service.session_manager import (
    SessionManager, LOGIN_FAILED_MESSAGE, PASSWORD_MISMATCH_MESSAGE,
    MISSING_PROVIDER_TOKEN_MESSAGE, NOT_AUTHENTICATED_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE, UPDATE_FAILED_MESSAGE
)
from services.auth_service.session_store import KeyValueStore, MemoryStore

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_identity(**overrides) -> Identity:
    data = dict(
        id="42",
        email="ada@example.com",
        full_name="Ada Lovelace",
        role=UserRole.OPERATOR,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    data.update(overrides)
    return Identity(**data)


def session_response(token: str = "tok-1", **identity_overrides) -> ApiResponse:
    return ApiResponse.ok(AuthSession(user=make_identity(**identity_overrides), access_token=token))


class FailingStore(MemoryStore):
    """Store whose writes fail after the first one"""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        if self.writes > 1:
            raise OSError("disk full")
        super().set(key, value)


class TestSessionManagerBase:
    """Shared fixtures"""

    def setup_method(self):
        self.remote = AsyncMock(spec=RemoteAuthEndpoint)
        self.store = MemoryStore()
        self.auth_config = AuthConfig()
        self.navigate = Mock()
        self.error_tracker = Mock()
        self.manager = self.make_manager()

    def make_manager(self, store=None, **kwargs) -> SessionManager:
        return SessionManager(
            remote=self.remote,
            store=self.store if store is None else store,
            auth_config=self.auth_config,
            navigate=self.navigate,
            error_tracker=self.error_tracker,
            clock=lambda: NOW,
            **kwargs
        )

    def stored_keys(self):
        return set(self.store.data)


class TestLogin(TestSessionManagerBase):

    @pytest.mark.asyncio
    async def test_login_success_stamps_last_login_and_persists(self):
        self.remote.login.return_value = session_response()

        assert await self.manager.login("ada@example.com", "secret") is True

        self.remote.login.assert_awaited_once_with("ada@example.com", "secret")
        assert self.manager.is_authenticated
        assert self.manager.current_user.last_login_at == NOW
        assert self.manager.get_token() == "tok-1"
        assert self.manager.error_message == ""
        assert self.manager.is_loading is False

        assert self.store.get("auth_token") == "tok-1"
        stored = json.loads(self.store.get("user_data"))
        assert stored["id"] == "42"
        assert stored["lastLoginAt"] == NOW.isoformat()

    @pytest.mark.asyncio
    async def test_login_failure_uses_server_message(self):
        self.remote.login.return_value = ApiResponse.fail("Invalid credentials")

        assert await self.manager.login("ada@example.com", "wrong") is False

        assert self.manager.error_message == "Invalid credentials"
        assert not self.manager.is_authenticated
        assert self.stored_keys() == set()
        assert self.manager.is_loading is False

    @pytest.mark.asyncio
    async def test_login_failure_without_message_falls_back(self):
        self.remote.login.return_value = ApiResponse.fail("")

        assert await self.manager.login("ada@example.com", "wrong") is False
        assert self.manager.error_message == LOGIN_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_busy_flag_set_during_call(self):
        observed = []

        async def fake_login(email, password):
            observed.append(self.manager.is_loading)
            return session_response()

        self.remote.login.side_effect = fake_login

        await self.manager.login("ada@example.com", "secret")

        assert observed == [True]
        assert self.manager.is_loading is False

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_generic_message(self):
        self.remote.login.side_effect = RuntimeError("boom")

        assert await self.manager.login("ada@example.com", "secret") is False

        assert self.manager.error_message == UNEXPECTED_ERROR_MESSAGE
        assert self.manager.is_loading is False
        self.error_tracker.track_error.assert_called_once()
        error, context = self.error_tracker.track_error.call_args[0]
        assert isinstance(error, RuntimeError)
        assert context == "login"

    @pytest.mark.asyncio
    async def test_new_operation_clears_previous_error(self):
        self.remote.login.side_effect = [ApiResponse.fail("nope"), session_response()]

        await self.manager.login("ada@example.com", "wrong")
        assert self.manager.error_message == "nope"

        await self.manager.login("ada@example.com", "secret")
        assert self.manager.error_message == ""

    @pytest.mark.asyncio
    async def test_failed_persistence_leaves_no_half_session(self):
        store = FailingStore()
        manager = self.make_manager(store=store)
        self.remote.login.return_value = session_response()

        assert await manager.login("ada@example.com", "secret") is False

        assert store.data == {}
        assert not manager.is_authenticated
        assert manager.get_token() is None
        assert manager.error_message == UNEXPECTED_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_login_without_store_keeps_memory_session(self):
        manager = SessionManager(remote=self.remote, store=None, auth_config=self.auth_config)
        self.remote.login.return_value = session_response()

        assert await manager.login("ada@example.com", "secret") is True
        assert manager.is_authenticated
        assert manager.has_store is False


class TestRegister(TestSessionManagerBase):

    def profile(self, confirm="s3cret!") -> RegistrationProfile:
        return RegistrationProfile(
            full_name="Ada Lovelace",
            email="ada@example.com",
            password="s3cret!",
            confirm_password=confirm
        )

    @pytest.mark.asyncio
    async def test_password_mismatch_never_calls_remote(self):
        assert await self.manager.register(self.profile(confirm="other")) is False

        assert self.remote.register.await_count == 0
        assert self.manager.error_message == PASSWORD_MISMATCH_MESSAGE
        assert self.manager.is_loading is False
        assert not self.manager.is_authenticated

    @pytest.mark.asyncio
    async def test_register_success_signs_in_as_first_login(self):
        self.remote.register.return_value = session_response(token="tok-new")

        assert await self.manager.register(self.profile()) is True

        assert self.manager.is_authenticated
        assert self.manager.is_first_login is True
        assert self.manager.current_user.last_login_at is None
        assert self.store.get("auth_token") == "tok-new"

    @pytest.mark.asyncio
    async def test_register_failure_reports_message(self):
        self.remote.register.return_value = ApiResponse.fail("A user with that email already exists.")

        assert await self.manager.register(self.profile()) is False
        assert self.manager.error_message == "A user with that email already exists."
        assert self.stored_keys() == set()


class TestFederatedLogin(TestSessionManagerBase):

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "   "])
    async def test_empty_token_fails_locally(self, token):
        assert await self.manager.login_with_federated_provider(token) is False

        assert self.remote.federated_login.await_count == 0
        assert self.manager.error_message == MISSING_PROVIDER_TOKEN_MESSAGE
        assert self.manager.is_loading is False

    @pytest.mark.asyncio
    async def test_federated_success(self):
        self.remote.federated_login.return_value = session_response(token="tok-google")

        assert await self.manager.login_with_federated_provider("google-id-token") is True

        self.remote.federated_login.assert_awaited_once_with("google-id-token")
        assert self.manager.get_token() == "tok-google"
        assert self.store.get("auth_token") == "tok-google"


class TestUpdateProfile(TestSessionManagerBase):

    async def sign_in(self):
        self.remote.login.return_value = session_response()
        await self.manager.login("ada@example.com", "secret")

    @pytest.mark.asyncio
    async def test_requires_authentication(self):
        assert await self.manager.update_profile({"fullName": "Ada"}) is False

        assert self.manager.error_message == NOT_AUTHENTICATED_MESSAGE
        assert self.remote.update_profile.await_count == 0

    @pytest.mark.asyncio
    async def test_success_replaces_identity_and_storage(self):
        await self.sign_in()
        self.remote.update_profile.return_value = ApiResponse.ok(
            make_identity(full_name="Ada King", last_login_at=NOW)
        )

        assert await self.manager.update_profile({"fullName": "Ada King"}) is True

        self.remote.update_profile.assert_awaited_once_with({"fullName": "Ada King"}, token="tok-1")
        assert self.manager.current_user.full_name == "Ada King"
        assert json.loads(self.store.get("user_data"))["fullName"] == "Ada King"
        assert self.store.get("auth_token") == "tok-1"

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_identity(self):
        await self.sign_in()
        before = self.manager.current_user
        stored_before = self.store.get("user_data")
        self.remote.update_profile.return_value = ApiResponse.fail("")

        assert await self.manager.update_profile({"fullName": "Ada King"}) is False

        assert self.manager.current_user is before
        assert self.store.get("user_data") == stored_before
        assert self.manager.error_message == UPDATE_FAILED_MESSAGE


class TestLogout(TestSessionManagerBase):

    @pytest.mark.asyncio
    async def test_logout_clears_state_and_navigates(self):
        self.remote.login.return_value = session_response()
        await self.manager.login("ada@example.com", "secret")

        self.manager.logout()

        assert not self.manager.is_authenticated
        assert self.manager.get_token() is None
        assert self.stored_keys() == set()
        self.navigate.assert_called_once_with("login")

    def test_logout_is_idempotent(self):
        self.manager.logout()
        self.manager.logout()

        assert not self.manager.is_authenticated
        assert self.stored_keys() == set()
        assert self.navigate.call_count == 2


class TestRestoreSession(TestSessionManagerBase):

    @pytest.mark.asyncio
    async def test_round_trip_restores_same_identity(self):
        self.remote.login.return_value = session_response()
        await self.manager.login("ada@example.com", "secret")
        original = self.manager.current_user

        restored = self.make_manager()
        restored.restore_session()

        assert restored.current_user == original
        assert restored.get_token() == "tok-1"
        # Restoration trusts storage; nothing goes over the wire
        assert self.remote.login.await_count == 1

    def test_corrupt_user_data_purges_both_keys(self):
        self.store.set("auth_token", "tok-1")
        self.store.set("user_data", "{not json")

        self.manager.restore_session()

        assert not self.manager.is_authenticated
        assert self.stored_keys() == set()

    def test_unknown_role_purges_both_keys(self):
        self.store.set("auth_token", "tok-1")
        self.store.set("user_data", json.dumps({"id": "1", "email": "a@b.c", "role": "overlord"}))

        self.manager.restore_session()

        assert not self.manager.is_authenticated
        assert self.stored_keys() == set()

    def test_non_object_user_data_purges(self):
        self.store.set("auth_token", "tok-1")
        self.store.set("user_data", json.dumps(["not", "an", "object"]))

        self.manager.restore_session()

        assert self.stored_keys() == set()

    @pytest.mark.parametrize("present_key", ["auth_token", "user_data"])
    def test_partial_storage_purges(self, present_key):
        self.store.set(present_key, "value")

        self.manager.restore_session()

        assert not self.manager.is_authenticated
        assert self.stored_keys() == set()

    def test_empty_storage_stays_anonymous(self):
        self.manager.restore_session()

        assert not self.manager.is_authenticated
        assert self.manager.error_message == ""

    def test_no_store_skips_restore(self):
        manager = SessionManager(remote=self.remote, store=None, auth_config=self.auth_config)

        manager.restore_session()

        assert not manager.is_authenticated

    def test_restore_runs_once(self):
        self.manager.restore_session()
        self.store.set("auth_token", "tok-1")
        self.store.set("user_data", json.dumps(make_identity().to_dict()))

        self.manager.restore_session()

        assert not self.manager.is_authenticated

    def test_store_contract(self):
        assert issubclass(MemoryStore, KeyValueStore)
