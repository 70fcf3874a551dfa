"""
Key-value stores used to persist the authenticated session.

The session manager only ever calls ``get``/``set``/``remove``. Which store
backs it is decided once, at startup, by ``get_default_store``: outside a
live Streamlit runtime there is no store at all and persistence is skipped.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote, unquote

import streamlit as st
from streamlit import runtime

from config.app_config import AuthConfig, get_config
from utils.logging_config import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """String-to-string store contract"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    """Dict-backed store"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SessionStateStore(KeyValueStore):
    """
    Store backed by ``st.session_state``

    Lives only as long as the browser session, so nothing survives a reload.
    Keys are namespaced so they never collide with widget state.
    """

    PREFIX = "persisted::"

    def _key(self, key: str) -> str:
        return f"{self.PREFIX}{key}"

    def get(self, key: str) -> Optional[str]:
        return st.session_state.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        st.session_state[self._key(key)] = value

    def remove(self, key: str) -> None:
        if self._key(key) in st.session_state:
            del st.session_state[self._key(key)]


class BrowserCookieStore(KeyValueStore):
    """
    Store kept in the visitor's browser cookies

    Reads come from the cookies the browser sent when the Streamlit session
    connected, so a reload or a new tab sees what an earlier session wrote.
    Writes are applied to session state at once and queued; ``flush()``
    emits them as a cookie script and must run once per script run.
    """

    PREFIX = "rpa_console_"
    OVERLAY_KEY = "_browser_store_overlay"
    PENDING_KEY = "_browser_store_pending"

    def __init__(self, max_age_days: int = 7):
        self.max_age_seconds = max_age_days * 24 * 60 * 60

    def cookie_name(self, key: str) -> str:
        return f"{self.PREFIX}{key}"

    def _state(self, name: str) -> Dict[str, Optional[str]]:
        if name not in st.session_state:
            st.session_state[name] = {}
        return st.session_state[name]

    def get(self, key: str) -> Optional[str]:
        overlay = self._state(self.OVERLAY_KEY)
        if key in overlay:
            return overlay[key]
        raw = st.context.cookies.get(self.cookie_name(key))
        return unquote(raw) if raw else None

    def set(self, key: str, value: str) -> None:
        self._state(self.OVERLAY_KEY)[key] = value
        self._state(self.PENDING_KEY)[key] = value

    def remove(self, key: str) -> None:
        self._state(self.OVERLAY_KEY)[key] = None
        self._state(self.PENDING_KEY)[key] = None

    def _cookie_statement(self, key: str, value: Optional[str]) -> str:
        name = self.cookie_name(key)
        if value is None:
            return f'document.cookie = "{name}=; path=/; max-age=0; SameSite=Strict";'
        return (f'document.cookie = "{name}={quote(value, safe="")}; path=/; '
                f'max-age={self.max_age_seconds}; SameSite=Strict";')

    def flush(self) -> Dict[str, Optional[str]]:
        """
        Write queued changes to the browser

        Returns:
            The applied changes, key to value (None for a removal)
        """
        pending = self._state(self.PENDING_KEY)
        if not pending:
            return {}

        applied = dict(pending)
        statements = "\n".join(self._cookie_statement(k, v) for k, v in applied.items())
        script = f"""
        <script>
            try {{
                {statements}
            }} catch (e) {{
                console.error("Failed to update session cookies:", e);
            }}
        </script>
        """
        st.components.v1.html(script, height=0)
        pending.clear()
        logger.debug(f"Flushed {len(applied)} session cookie change(s)")
        return applied


class JsonFileStore(KeyValueStore):
    """
    Durable store kept in a single JSON file

    Every write replaces the file atomically. An unreadable file is treated
    as empty so a corrupt store never blocks startup.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


def get_default_store(auth_config: Optional[AuthConfig] = None) -> Optional[KeyValueStore]:
    """
    Pick the store for the current execution context

    Returns:
        None when no Streamlit runtime is running (bare scripts, tests,
        headless imports); otherwise the backend named in the auth config.
    """
    if not runtime.exists():
        logger.debug("No Streamlit runtime; session persistence disabled")
        return None

    auth_config = auth_config or get_config().auth
    if auth_config.session_store_backend == "file":
        return JsonFileStore(auth_config.session_store_path)
    if auth_config.session_store_backend == "session_state":
        logger.warning("Session state store selected; sessions will not survive a reload")
        return SessionStateStore()
    return BrowserCookieStore(auth_config.session_cookie_max_age_days)


def flush_store(store: Optional[KeyValueStore]) -> None:
    """Push queued writes of stores that need it; a no-op for the others"""
    if isinstance(store, BrowserCookieStore):
        store.flush()
