"""
Session manager - owns the console's authentication state.

Handles login, registration, federated (Google) login, profile updates,
logout and startup restoration. Every public operation reports failure
through a boolean result plus ``error_message``; nothing is raised to the
caller.
"""

import json
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from config.app_config import AuthConfig, get_config
from services.auth_service.auth_api_client import RemoteAuthEndpoint
from services.auth_service.models import Identity, RegistrationProfile, utc_now
from services.auth_service.session_store import KeyValueStore
from utils.logging_config import ErrorTracker, get_logger, log_auth_event

LOGIN_FAILED_MESSAGE = "Login failed"
REGISTRATION_FAILED_MESSAGE = "Registration failed"
FEDERATED_LOGIN_FAILED_MESSAGE = "Google login failed"
UPDATE_FAILED_MESSAGE = "Update failed"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
MISSING_PROVIDER_TOKEN_MESSAGE = "A provider token is required"
NOT_AUTHENTICATED_MESSAGE = "You must be signed in to update your profile"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class SessionManager:
    """
    Authentication state for one console client

    Args:
        remote: Auth endpoint used for every credential exchange
        store: Key-value store for the persisted session; None disables
            persistence and restoration entirely
        auth_config: Storage keys and login route (defaults to global config)
        navigate: Called with the login route after logout
        error_tracker: Optional tracker for unexpected failures
        clock: Source of "now" for last-login stamps
    """

    def __init__(self,
                 remote: RemoteAuthEndpoint,
                 store: Optional[KeyValueStore] = None,
                 auth_config: Optional[AuthConfig] = None,
                 navigate: Optional[Callable[[str], None]] = None,
                 error_tracker: Optional[ErrorTracker] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.remote = remote
        self.store = store
        self.auth_config = auth_config or get_config().auth
        self.navigate = navigate
        self.error_tracker = error_tracker
        self.clock = clock
        self.logger = get_logger(__name__)

        self._current_user: Optional[Identity] = None
        self._token: Optional[str] = None
        self._is_loading = False
        self._error_message = ""
        self._restore_attempted = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[Identity]:
        return self._current_user

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    @property
    def is_first_login(self) -> bool:
        return self._current_user is not None and self._current_user.is_first_login

    @property
    def has_store(self) -> bool:
        return self.store is not None

    def get_token(self) -> Optional[str]:
        """Bearer token of the current session"""
        return self._token

    def clear_error(self) -> None:
        self._error_message = ""

    # ------------------------------------------------------------------
    # Credential exchanges
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> bool:
        """
        Sign in with email and password

        On success the identity's last login is stamped with the current
        time before it is stored.
        """
        self._begin()
        try:
            response = await self.remote.login(email, password)
            if not (response.success and response.data):
                self._error_message = response.message or LOGIN_FAILED_MESSAGE
                log_auth_event(self.logger, "login", False)
                return False

            user = replace(response.data.user, last_login_at=self.clock())
            self._establish(user, response.data.access_token)
            log_auth_event(self.logger, "login", True, user_id=user.id)
            return True
        except Exception as e:
            self._report_unexpected(e, "login")
            return False
        finally:
            self._is_loading = False

    async def register(self, profile: RegistrationProfile) -> bool:
        """Create an account and sign straight into it"""
        self._begin()
        try:
            if profile.password != profile.confirm_password:
                self._error_message = PASSWORD_MISMATCH_MESSAGE
                log_auth_event(self.logger, "register", False, reason="password_mismatch")
                return False

            response = await self.remote.register(profile)
            if not (response.success and response.data):
                self._error_message = response.message or REGISTRATION_FAILED_MESSAGE
                log_auth_event(self.logger, "register", False)
                return False

            self._establish(response.data.user, response.data.access_token)
            log_auth_event(self.logger, "register", True, user_id=response.data.user.id)
            return True
        except Exception as e:
            self._report_unexpected(e, "register")
            return False
        finally:
            self._is_loading = False

    async def login_with_federated_provider(self, external_token: str) -> bool:
        """Exchange a third-party identity token for a console session"""
        self._begin()
        try:
            if not external_token or not external_token.strip():
                self._error_message = MISSING_PROVIDER_TOKEN_MESSAGE
                log_auth_event(self.logger, "federated_login", False, reason="missing_token")
                return False

            response = await self.remote.federated_login(external_token)
            if not (response.success and response.data):
                self._error_message = response.message or FEDERATED_LOGIN_FAILED_MESSAGE
                log_auth_event(self.logger, "federated_login", False)
                return False

            self._establish(response.data.user, response.data.access_token)
            log_auth_event(self.logger, "federated_login", True, user_id=response.data.user.id)
            return True
        except Exception as e:
            self._report_unexpected(e, "federated_login")
            return False
        finally:
            self._is_loading = False

    async def update_profile(self, changes: Dict[str, Any]) -> bool:
        """
        Send partial identity fields to the server

        The server's answer replaces the in-memory identity. On failure the
        previous identity is kept as is.
        """
        self._begin()
        try:
            if self._current_user is None:
                self._error_message = NOT_AUTHENTICATED_MESSAGE
                return False

            response = await self.remote.update_profile(changes, token=self._token)
            if not (response.success and response.data):
                self._error_message = response.message or UPDATE_FAILED_MESSAGE
                log_auth_event(self.logger, "update_profile", False, user_id=self._current_user.id)
                return False

            self._persist_user(response.data)
            self._current_user = response.data
            log_auth_event(self.logger, "update_profile", True, user_id=response.data.id)
            return True
        except Exception as e:
            self._report_unexpected(e, "update_profile")
            return False
        finally:
            self._is_loading = False

    # ------------------------------------------------------------------
    # Teardown and restoration
    # ------------------------------------------------------------------

    def logout(self) -> None:
        """Return to the anonymous state and send the UI to the login route"""
        user_id = self._current_user.id if self._current_user else None
        self._current_user = None
        self._token = None
        self._error_message = ""
        self._purge_storage()
        log_auth_event(self.logger, "logout", True, user_id=user_id)

        if self.navigate is not None:
            self.navigate(self.auth_config.login_route)

    def restore_session(self) -> None:
        """
        Adopt a previously persisted session, once, at startup

        No remote call is made: the stored identity is trusted as is. A
        missing key or an unparsable identity purges both keys.
        """
        if self.store is None:
            self.logger.debug("No session store available; skipping restore")
            return
        if self._restore_attempted:
            self.logger.warning("restore_session called more than once; ignoring")
            return
        self._restore_attempted = True

        token = self.store.get(self.auth_config.token_storage_key)
        user_data = self.store.get(self.auth_config.user_storage_key)

        if not token or not user_data:
            if token or user_data:
                self.logger.warning("Persisted session is incomplete; purging")
            self._purge_storage()
            return

        try:
            user = Identity.from_dict(json.loads(user_data))
        except (ValueError, TypeError) as e:
            self.logger.warning(f"Could not restore session: {e}")
            self._purge_storage()
            log_auth_event(self.logger, "restore", False, reason="corrupt_user_data")
            return

        self._current_user = user
        self._token = token
        log_auth_event(self.logger, "restore", True, user_id=user.id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        self._is_loading = True
        self._error_message = ""

    def _establish(self, user: Identity, token: str) -> None:
        """Persist, then publish, a freshly authenticated pair"""
        if self.store is not None:
            try:
                self.store.set(self.auth_config.token_storage_key, token)
                self.store.set(self.auth_config.user_storage_key, json.dumps(user.to_dict()))
            except Exception:
                self._purge_storage()
                raise
        self._token = token
        self._current_user = user

    def _persist_user(self, user: Identity) -> None:
        if self.store is None:
            return
        try:
            self.store.set(self.auth_config.user_storage_key, json.dumps(user.to_dict()))
        except Exception:
            # Keys must stay paired; a half-written session is dropped
            self._purge_storage()
            raise

    def _purge_storage(self) -> None:
        if self.store is None:
            return
        self.store.remove(self.auth_config.token_storage_key)
        self.store.remove(self.auth_config.user_storage_key)

    def _report_unexpected(self, error: Exception, context: str) -> None:
        self._error_message = UNEXPECTED_ERROR_MESSAGE
        if self.error_tracker is not None:
            self.error_tracker.track_error(error, context)
        else:
            self.logger.error(f"Error during {context}: {error}", exc_info=True)
