"""
Bot control commands.

Each command returns a new bot list; the list passed in is left alone.
"""

from dataclasses import replace
from typing import List, Sequence

from services.auth_service.models import utc_now
from services.console_service.models import RpaBot, RpaStatus
from utils.logging_config import get_logger

logger = get_logger(__name__)


def set_bot_status(bots: Sequence[RpaBot], bot_id: str, status: RpaStatus) -> List[RpaBot]:
    status = RpaStatus(status)
    result = []
    for bot in bots:
        if bot.id == bot_id:
            logger.info(f"Bot {bot.code}: {bot.status.value} -> {status.value}")
            bot = replace(bot, status=status, updated_at=utc_now())
        result.append(bot)
    return result


def start_bot(bots: Sequence[RpaBot], bot_id: str) -> List[RpaBot]:
    return set_bot_status(bots, bot_id, RpaStatus.RUNNING)


def stop_bot(bots: Sequence[RpaBot], bot_id: str) -> List[RpaBot]:
    return set_bot_status(bots, bot_id, RpaStatus.IDLE)


def restart_bot(bots: Sequence[RpaBot], bot_id: str) -> List[RpaBot]:
    return set_bot_status(bots, bot_id, RpaStatus.RUNNING)


def resume_bot(bots: Sequence[RpaBot], bot_id: str) -> List[RpaBot]:
    return set_bot_status(bots, bot_id, RpaStatus.RUNNING)


def _transition_all(bots: Sequence[RpaBot], from_status: RpaStatus, to_status: RpaStatus) -> List[RpaBot]:
    now = utc_now()
    changed = 0
    result = []
    for bot in bots:
        if bot.status == from_status:
            bot = replace(bot, status=to_status, updated_at=now)
            changed += 1
        result.append(bot)
    logger.info(f"Moved {changed} bots from {from_status.value} to {to_status.value}")
    return result


def start_all_idle(bots: Sequence[RpaBot]) -> List[RpaBot]:
    return _transition_all(bots, RpaStatus.IDLE, RpaStatus.RUNNING)


def stop_all_running(bots: Sequence[RpaBot]) -> List[RpaBot]:
    return _transition_all(bots, RpaStatus.RUNNING, RpaStatus.IDLE)


def restart_failed(bots: Sequence[RpaBot]) -> List[RpaBot]:
    return _transition_all(bots, RpaStatus.FAILED, RpaStatus.RUNNING)
