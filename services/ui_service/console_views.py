"""
Streamlit rendering of the console list screens
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import streamlit as st

from services.collection_view import ListScreen
from services.console_service import (
    BusinessUnitService, business_processes_screen, business_units_screen, rpa_bots_screen
)
from services.console_service import bot_controls
from services.console_service.formatting import (
    efficiency_class, format_duration, format_number, format_relative_time, format_savings, success_rate
)
from services.console_service.models import (
    BusinessUnitStatus, ProcessCategory, ProcessPriority, ProcessStatus, RpaStatus, RpaTechnology
)
from services.console_service.sample_data import (
    sample_business_processes, sample_business_units, sample_rpa_bots
)
from utils.logging_config import get_logger, log_user_interaction

logger = get_logger(__name__)

CONSOLE_STATE_KEY = "console_state"
ALL = "All"


def get_console_state() -> Dict[str, Any]:
    """Catalog data and list screens, kept for the browser session"""
    if CONSOLE_STATE_KEY not in st.session_state:
        unit_service = BusinessUnitService()
        unit_service.load(sample_business_units)
        bots = sample_rpa_bots()
        processes = sample_business_processes()
        st.session_state[CONSOLE_STATE_KEY] = {
            "unit_service": unit_service,
            "bots": bots,
            "processes": processes,
            "screens": {
                "units": business_units_screen(unit_service.units),
                "bots": rpa_bots_screen(bots),
                "processes": business_processes_screen(processes),
            },
        }
        logger.info("Console state initialized")
    return st.session_state[CONSOLE_STATE_KEY]


def _render_stats(stats: Dict[str, Any], labels: Dict[str, str],
                  formatters: Optional[Dict[str, Callable[[Any], str]]] = None):
    formatters = formatters or {}
    columns = st.columns(len(labels))
    for column, (key, label) in zip(columns, labels.items()):
        value = stats.get(key, 0)
        column.metric(label, formatters.get(key, str)(value))


def _render_controls(screen: ListScreen, filters: Dict[str, Sequence[str]], sort_fields: Dict[str, str]):
    """Search box, filter selects and sort picker wired to the screen"""
    search_key = f"{screen.name}_search"

    def on_search():
        screen.set_search(st.session_state[search_key])
        log_user_interaction(logger, "search", screen=screen.name)

    columns = st.columns(2 + len(filters))
    columns[0].text_input("🔍 Search", key=search_key, on_change=on_search)

    for column, (field_name, options) in zip(columns[1:], filters.items()):
        filter_key = f"{screen.name}_filter_{field_name}"

        def on_filter(field_name=field_name, filter_key=filter_key):
            value = st.session_state[filter_key]
            screen.set_filter(field_name, None if value == ALL else value)
            log_user_interaction(logger, "filter", screen=screen.name, field=field_name)

        column.selectbox(field_name.replace("_", " ").title(), [ALL, *options],
                         key=filter_key, on_change=on_filter)

    sort_labels = list(sort_fields)
    sort_key = f"{screen.name}_sort"

    def on_sort():
        label = st.session_state[sort_key]
        if label is None:
            return
        screen.sort_by(sort_fields[label])
        log_user_interaction(logger, "sort", screen=screen.name)

    with columns[-1]:
        st.selectbox("Sort by", sort_labels, key=sort_key, index=None, on_change=on_sort)
        direction = screen.criteria.sort_direction
        if screen.criteria.sort_field and st.button(f"↕️ {direction.value.upper()}", key=f"{sort_key}_toggle"):
            screen.sort_by(screen.criteria.sort_field)
            st.rerun()


def _render_pagination(screen: ListScreen):
    result = screen.result()
    if result.filtered_count == 0:
        st.info("No records match the current search and filters.")
        return

    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("⬅️ Previous", key=f"{screen.name}_prev", disabled=not result.has_previous):
            screen.previous_page()
            st.rerun()
    with col2:
        st.caption(
            f"Showing {result.start_index}-{result.end_index} of {result.filtered_count} "
            f"(page {result.page} of {result.total_pages})"
        )
    with col3:
        if st.button("Next ➡️", key=f"{screen.name}_next", disabled=not result.has_next):
            screen.next_page()
            st.rerun()


def _values(enum_type) -> List[str]:
    return [member.value for member in enum_type]


def render_business_units():
    state = get_console_state()
    screen: ListScreen = state["screens"]["units"]
    unit_service: BusinessUnitService = state["unit_service"]

    st.header("🏢 Business Units")
    result = screen.result()
    _render_stats(result.stats, {
        "total_units": "Units",
        "active_units": "Active",
        "total_processes": "Processes",
        "total_savings": "Monthly savings",
    }, {"total_savings": format_savings})

    _render_controls(screen, {"status": _values(BusinessUnitStatus)}, {
        "Name": "name", "Code": "code", "Efficiency": "metrics.efficiency", "Savings": "metrics.monthly_savings",
    })

    rows = [{
        "Code": unit.code,
        "Name": unit.name,
        "Manager": unit.manager.full_name if unit.manager else "",
        "Status": unit.status.value,
        "Processes": unit.metrics.total_processes,
        "Savings": format_savings(unit.metrics.monthly_savings),
        "Efficiency": f"{unit.metrics.efficiency}% ({efficiency_class(unit.metrics.efficiency)})",
    } for unit in result.items]
    st.dataframe(rows, use_container_width=True, hide_index=True)
    _render_pagination(screen)

    with st.expander("🗄️ Archive a unit"):
        active = [u for u in unit_service.units if u.status != BusinessUnitStatus.ARCHIVED]
        choice = st.selectbox("Unit", [u.id for u in active],
                              format_func=lambda uid: unit_service.get_by_id(uid).name)
        if choice and st.button("Archive", key="archive_unit"):
            unit_service.archive_unit(choice)
            screen.set_source(unit_service.units)
            log_user_interaction(logger, "archive_unit", unit_id=choice)
            st.rerun()
    if unit_service.error:
        st.error(unit_service.error)


def _replace_bots(state: Dict[str, Any], bots) -> None:
    state["bots"] = bots
    state["screens"]["bots"].set_source(bots)


def render_rpa_bots():
    state = get_console_state()
    screen: ListScreen = state["screens"]["bots"]

    st.header("🤖 RPA Bots")
    result = screen.result()
    _render_stats(result.stats, {
        "running_bots": "Running",
        "idle_bots": "Idle",
        "failed_bots": "Failed",
        "today_executions": "Ran today",
    })

    col1, col2, col3 = st.columns(3)
    for column, label, command in (
        (col1, "▶️ Start all idle", bot_controls.start_all_idle),
        (col2, "⏹️ Stop all running", bot_controls.stop_all_running),
        (col3, "🔄 Restart failed", bot_controls.restart_failed),
    ):
        if column.button(label, use_container_width=True):
            _replace_bots(state, command(state["bots"]))
            log_user_interaction(logger, "bot_bulk_command", command=command.__name__)
            st.rerun()

    _render_controls(screen, {
        "status": _values(RpaStatus),
        "technology": _values(RpaTechnology),
    }, {"Name": "name", "Code": "code", "Executions": "metrics.total_executions"})

    rows = [{
        "Code": bot.code,
        "Name": bot.name,
        "Technology": bot.technology_label,
        "Status": bot.status.value,
        "Success rate": f"{success_rate(bot)}%",
        "Executions": format_number(bot.metrics.total_executions),
        "Avg time": format_duration(bot.metrics.avg_execution_time),
        "Last run": format_relative_time(bot.metrics.last_execution_at)
        if bot.metrics.last_execution_at else "never",
    } for bot in result.items]
    st.dataframe(rows, use_container_width=True, hide_index=True)
    _render_pagination(screen)


def render_business_processes():
    state = get_console_state()
    screen: ListScreen = state["screens"]["processes"]

    st.header("⚙️ Business Processes")
    result = screen.result()
    _render_stats(result.stats, {
        "total_processes": "Processes",
        "active_processes": "Active",
        "average_efficiency": "Avg success rate",
    }, {"average_efficiency": lambda value: f"{value}%"})

    _render_controls(screen, {
        "status": _values(ProcessStatus),
        "category": _values(ProcessCategory),
        "priority": _values(ProcessPriority),
    }, {"Name": "name", "Success rate": "metrics.success_rate", "Savings": "metrics.cost_savings"})

    rows = [{
        "Code": process.code,
        "Name": process.name,
        "Category": process.category.value,
        "Priority": process.priority.value,
        "Status": process.status.value,
        "Success rate": f"{process.metrics.success_rate:g}%",
        "Monthly runs": format_number(process.metrics.monthly_executions),
        "Savings": format_savings(process.metrics.cost_savings),
    } for process in result.items]
    st.dataframe(rows, use_container_width=True, hide_index=True)
    _render_pagination(screen)


SCREENS = {
    "Business Units": render_business_units,
    "Business Processes": render_business_processes,
    "RPA Bots": render_rpa_bots,
}
