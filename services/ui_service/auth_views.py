"""
Streamlit authentication screens backed by the SessionManager
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

import streamlit as st

from config.app_config import get_config
from services.auth_service.auth_api_client import AuthApiClient
from services.auth_service.models import Identity, RegistrationProfile
from services.auth_service.session_manager import SessionManager
from services.auth_service.session_store import flush_store, get_default_store
from utils.logging_config import get_error_tracker, get_logger, log_user_interaction

logger = get_logger(__name__)

R = TypeVar("R")

SESSION_MANAGER_KEY = "session_manager"
PAGE_KEY = "page"


def run_async(coroutine: Awaitable[R]) -> R:
    """Drive one SessionManager coroutine from a Streamlit script run"""
    return asyncio.run(coroutine)


def navigate(route: str) -> None:
    st.session_state[PAGE_KEY] = route


def get_session_manager() -> SessionManager:
    """
    Per-browser-session SessionManager

    Created on first access, at which point the persisted session (if any)
    is restored.
    """
    if SESSION_MANAGER_KEY not in st.session_state:
        config = get_config()
        manager = SessionManager(
            remote=AuthApiClient(config.api),
            store=get_default_store(config.auth),
            auth_config=config.auth,
            navigate=navigate,
            error_tracker=get_error_tracker()
        )
        manager.restore_session()
        st.session_state[SESSION_MANAGER_KEY] = manager
        logger.info("Session manager created", extra={"restored": manager.is_authenticated})
    return st.session_state[SESSION_MANAGER_KEY]


def _show_error(manager: SessionManager) -> None:
    if manager.error_message:
        st.error(f"❌ {manager.error_message}")


def render_auth_page(manager: Optional[SessionManager] = None):
    """Login / registration / Google sign-in tabs"""
    manager = manager or get_session_manager()
    config = get_config()

    st.title(f"🔐 {config.ui.app_title} - Authentication")

    tab_names = ["🔑 Login"]
    if config.auth.allow_self_registration:
        tab_names.append("📝 Register")
    if config.auth.allow_federated_login:
        tab_names.append("🌐 Google")
    tabs = dict(zip(tab_names, st.tabs(tab_names)))

    with tabs["🔑 Login"]:
        _render_login_tab(manager)
    if "📝 Register" in tabs:
        with tabs["📝 Register"]:
            _render_register_tab(manager)
    if "🌐 Google" in tabs:
        with tabs["🌐 Google"]:
            _render_federated_tab(manager)


def _render_login_tab(manager: SessionManager):
    with st.form("login_form"):
        st.subheader("Sign In")
        email = st.text_input("📧 Email", placeholder="you@company.com")
        password = st.text_input("🔒 Password", type="password")
        submitted = st.form_submit_button("🔑 Sign In", type="primary", use_container_width=True)

    if submitted:
        if not email or not password:
            st.error("Please enter both email and password")
            return
        with st.spinner("Authenticating..."):
            success = run_async(manager.login(email, password))
        log_user_interaction(logger, "login_submit", success=success)
        if success:
            navigate("console")
            st.rerun()
        _show_error(manager)


def _render_register_tab(manager: SessionManager):
    with st.form("register_form"):
        st.subheader("Create Account")
        col1, col2 = st.columns(2)
        with col1:
            full_name = st.text_input("👤 Full Name")
        with col2:
            email = st.text_input("📧 Email", key="register_email")
        password = st.text_input("🔒 Password", type="password", key="register_password")
        confirm_password = st.text_input("🔒 Confirm Password", type="password")
        submitted = st.form_submit_button("📝 Create Account", type="primary", use_container_width=True)

    if submitted:
        if not all([full_name, email, password, confirm_password]):
            st.error("All fields are required")
            return
        profile = RegistrationProfile(
            full_name=full_name,
            email=email,
            password=password,
            confirm_password=confirm_password
        )
        with st.spinner("Creating account..."):
            success = run_async(manager.register(profile))
        log_user_interaction(logger, "register_submit", success=success)
        if success:
            navigate("console")
            st.rerun()
        _show_error(manager)


def _render_federated_tab(manager: SessionManager):
    st.caption("Paste the ID token returned by Google Sign-In.")
    with st.form("google_form"):
        token = st.text_input("Google ID token", type="password")
        submitted = st.form_submit_button("🌐 Continue with Google", use_container_width=True)

    if submitted:
        with st.spinner("Validating Google sign-in..."):
            success = run_async(manager.login_with_federated_provider(token))
        log_user_interaction(logger, "federated_login_submit", success=success)
        if success:
            navigate("console")
            st.rerun()
        _show_error(manager)


def render_user_menu(manager: Optional[SessionManager] = None):
    """Sidebar identity card with profile editing and logout"""
    manager = manager or get_session_manager()
    user = manager.current_user
    if user is None:
        return

    with st.sidebar:
        st.markdown(f"**👤 {user.full_name}**")
        st.caption(f"{user.email} · {user.role.value}")
        if manager.is_first_login:
            st.info("👋 Welcome! This is your first sign-in.")

        with st.expander("⚙️ Profile"):
            with st.form("profile_form"):
                full_name = st.text_input("Full Name", value=user.full_name)
                submitted = st.form_submit_button("💾 Save")
            if submitted and full_name != user.full_name:
                if run_async(manager.update_profile(Identity.profile_changes(full_name=full_name))):
                    st.success("Profile updated")
                    st.rerun()
                _show_error(manager)

        if st.button("🚪 Logout", use_container_width=True):
            manager.logout()
            log_user_interaction(logger, "logout")
            st.rerun()


def sync_session_store(manager: Optional[SessionManager] = None) -> None:
    """Send this run's persisted-session changes to the browser; call last in the script"""
    manager = manager or get_session_manager()
    flush_store(manager.store)
