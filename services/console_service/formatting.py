"""
Display helpers shared by the console list screens.
"""

from datetime import datetime
from typing import Optional, Union

from services.auth_service.models import utc_now
from services.console_service.models import RpaBot

Number = Union[int, float]


def format_number(value: Number) -> str:
    """Abbreviate with K/M and one decimal"""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:g}"


def format_savings(amount: Number) -> str:
    return "$" + format_number(amount)


def efficiency_class(efficiency: Number) -> str:
    if efficiency >= 90:
        return "excellent"
    if efficiency >= 75:
        return "good"
    if efficiency >= 60:
        return "fair"
    return "poor"


def success_rate(bot: RpaBot) -> int:
    """Percentage of successful executions, 0 for a bot that never ran"""
    if bot.metrics.total_executions == 0:
        return 0
    return round(bot.metrics.successful_executions / bot.metrics.total_executions * 100)


def format_duration(seconds: Number) -> str:
    """``45s``, ``2m``, ``2m 5s``"""
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, remainder = divmod(seconds, 60)
    return f"{minutes}m {remainder}s" if remainder else f"{minutes}m"


def format_relative_time(moment: datetime, now: Optional[datetime] = None) -> str:
    """``12m ago`` within the hour, ``3h ago`` within the day, else the date"""
    now = now or utc_now()
    minutes = int((now - moment).total_seconds() // 60)
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 1440:
        return f"{minutes // 60}h ago"
    return moment.date().isoformat()
