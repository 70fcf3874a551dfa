"""
UI service - Streamlit screens for authentication and the console.
"""

from .auth_views import get_session_manager, render_auth_page, render_user_menu, sync_session_store
from .console_views import SCREENS, get_console_state

__all__ = [
    'SCREENS',
    'get_console_state',
    'get_session_manager',
    'render_auth_page',
    'render_user_menu',
    'sync_session_store'
]
