import streamlit as st

from config.app_config import get_config
from services.ui_service import (
    SCREENS, get_session_manager, render_auth_page, render_user_menu, sync_session_store
)
from utils.logging_config import initialize_logging, get_logger, log_user_interaction

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

# Get configuration
config = get_config()

st.set_page_config(page_title=config.ui.app_title, page_icon=config.ui.page_icon, layout="wide")


def main_app():
    """Console content (protected by authentication when enabled)"""
    st.title(config.ui.app_title)

    screen_names = [name for name in config.ui.screens if name in SCREENS]
    selected = st.sidebar.radio("📂 Screens", screen_names, key="selected_screen")
    if st.session_state.get("last_screen") != selected:
        st.session_state.last_screen = selected
        log_user_interaction(logger, "screen_view", screen=selected)

    try:
        SCREENS[selected]()
    except Exception as e:
        error_tracker.track_error(e, "render_screen", screen=selected)
        st.error("🔧 **Unexpected error** - The screen could not be rendered. Please refresh the page.")


if config.auth.enabled:
    manager = get_session_manager()
    if manager.is_authenticated:
        render_user_menu(manager)
        main_app()
    else:
        render_auth_page(manager)
    sync_session_store(manager)
else:
    # Authentication disabled, run the console directly
    main_app()
