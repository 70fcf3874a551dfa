"""
Collection view presets for the console list screens.

Each factory wires a CollectionView with the screen's search fields, page
size, default sort and whole-collection statistics.
"""

from datetime import date
from typing import Callable, Dict, Optional, Sequence

from config.app_config import ConsoleConfig, get_config
from services.collection_view.engine import CollectionView, StatFunction, ViewCriteria
from services.collection_view.list_screen import ListScreen
from services.console_service.models import (
    BusinessProcess, BusinessUnit, BusinessUnitStatus, ProcessStatus, RpaBot, RpaStatus
)
from services.auth_service.models import utc_now

BUSINESS_UNIT_SEARCH_FIELDS = ("name", "code", "description", "manager.full_name")
RPA_BOT_SEARCH_FIELDS = ("name", "code", "description", "technology")
BUSINESS_PROCESS_SEARCH_FIELDS = ("name", "description")


def count_where(predicate: Callable) -> StatFunction:
    return lambda records: sum(1 for record in records if predicate(record))


def business_unit_stats() -> Dict[str, StatFunction]:
    return {
        "total_units": len,
        "active_units": count_where(lambda u: u.status == BusinessUnitStatus.ACTIVE),
        "total_processes": lambda units: sum(u.metrics.total_processes for u in units),
        "total_savings": lambda units: sum(u.metrics.monthly_savings for u in units),
    }


def rpa_bot_stats(today: Optional[Callable[[], date]] = None) -> Dict[str, StatFunction]:
    today = today or (lambda: utc_now().date())

    def executed_today(bot: RpaBot) -> bool:
        last = bot.metrics.last_execution_at
        return last is not None and last.date() == today()

    return {
        "running_bots": count_where(lambda b: b.status == RpaStatus.RUNNING),
        "idle_bots": count_where(lambda b: b.status == RpaStatus.IDLE),
        "failed_bots": count_where(lambda b: b.status == RpaStatus.FAILED),
        "today_executions": count_where(executed_today),
    }


def _average_active_success_rate(processes: Sequence[BusinessProcess]) -> int:
    active = [p for p in processes if p.status == ProcessStatus.ACTIVE]
    if not active:
        return 0
    return round(sum(p.metrics.success_rate for p in active) / len(active))


def business_process_stats() -> Dict[str, StatFunction]:
    return {
        "total_processes": len,
        "active_processes": count_where(lambda p: p.status == ProcessStatus.ACTIVE),
        "average_efficiency": _average_active_success_rate,
    }


def business_units_screen(units: Sequence[BusinessUnit],
                          console_config: Optional[ConsoleConfig] = None) -> ListScreen[BusinessUnit]:
    console_config = console_config or get_config().console
    view = CollectionView(
        units,
        search_fields=BUSINESS_UNIT_SEARCH_FIELDS,
        page_size=console_config.business_units_page_size,
        stats=business_unit_stats(),
        criteria=ViewCriteria(sort_field="name"),
    )
    return ListScreen(view, name="business_units")


def rpa_bots_screen(bots: Sequence[RpaBot],
                    console_config: Optional[ConsoleConfig] = None,
                    today: Optional[Callable[[], date]] = None) -> ListScreen[RpaBot]:
    console_config = console_config or get_config().console
    view = CollectionView(
        bots,
        search_fields=RPA_BOT_SEARCH_FIELDS,
        page_size=console_config.rpa_bots_page_size,
        stats=rpa_bot_stats(today),
    )
    return ListScreen(view, name="rpa_bots")


def business_processes_screen(processes: Sequence[BusinessProcess],
                              console_config: Optional[ConsoleConfig] = None) -> ListScreen[BusinessProcess]:
    console_config = console_config or get_config().console
    view = CollectionView(
        processes,
        search_fields=BUSINESS_PROCESS_SEARCH_FIELDS,
        page_size=console_config.business_processes_page_size,
        stats=business_process_stats(),
    )
    return ListScreen(view, name="business_processes")
