"""
Business unit service - in-memory business unit catalog.

Every mutation publishes a new list so views built over the previous list
are never changed underneath their caller.
"""

import uuid
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from services.auth_service.models import utc_now
from services.console_service.models import BusinessUnit, BusinessUnitStatus
from services.console_service.views import business_unit_stats
from services.collection_view.engine import compute_stats
from utils.logging_config import get_logger, log_execution_time

LOAD_FAILED_MESSAGE = "Failed to load business units"

# Fields callers may not overwrite through update_unit
_PROTECTED_FIELDS = {"id", "created_at", "updated_at"}


class BusinessUnitNotFoundError(LookupError):
    """No business unit with the requested id"""


class BusinessUnitService:
    """
    Holds the business unit list plus loading and error state
    """

    def __init__(self, units: Optional[Sequence[BusinessUnit]] = None):
        self.logger = get_logger(__name__)
        self._units: List[BusinessUnit] = list(units or [])
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def units(self) -> List[BusinessUnit]:
        return self._units

    @contextmanager
    def _working(self):
        self.is_loading = True
        self.error = None
        try:
            yield
        finally:
            self.is_loading = False

    def load(self, fetch: Callable[[], Sequence[BusinessUnit]]) -> List[BusinessUnit]:
        """
        Replace the catalog with what ``fetch`` returns

        ``is_loading`` stays True while ``fetch`` runs. A failing fetch keeps
        the previous list, sets ``error`` and re-raises.
        """
        with self._working():
            try:
                with log_execution_time(self.logger, "load business units"):
                    units = list(fetch())
            except Exception:
                self.error = LOAD_FAILED_MESSAGE
                raise
            self._units = units
        self.logger.info(f"Loaded {len(self._units)} business units")
        return self._units

    def get_by_id(self, unit_id: str) -> Optional[BusinessUnit]:
        return next((u for u in self._units if u.id == unit_id), None)

    def create_unit(self, **fields: Any) -> BusinessUnit:
        """Create a unit with a generated id and fresh timestamps"""
        with self._working():
            now = utc_now()
            fields = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS}
            unit = BusinessUnit(id=f"bu_{uuid.uuid4().hex[:12]}", created_at=now, updated_at=now, **fields)
            self._units = self._units + [unit]
        self.logger.info(f"Created business unit {unit.id} ({unit.code})")
        return unit

    def update_unit(self, unit_id: str, changes: Dict[str, Any]) -> BusinessUnit:
        """
        Merge ``changes`` into a unit and bump ``updated_at``

        Raises:
            BusinessUnitNotFoundError: unknown id (also recorded in ``error``)
        """
        with self._working():
            existing = self.get_by_id(unit_id)
            if existing is None:
                self.error = f"Business unit not found: {unit_id}"
                self.logger.warning(self.error)
                raise BusinessUnitNotFoundError(unit_id)

            allowed = {k: v for k, v in changes.items() if k not in _PROTECTED_FIELDS}
            updated = replace(existing, **allowed, updated_at=utc_now())
            self._units = [updated if u.id == unit_id else u for u in self._units]
        self.logger.info(f"Updated business unit {unit_id}: {sorted(allowed)}")
        return updated

    def archive_unit(self, unit_id: str) -> BusinessUnit:
        """Soft delete"""
        return self.update_unit(unit_id, {"status": BusinessUnitStatus.ARCHIVED})

    def delete_unit(self, unit_id: str) -> None:
        """Hard delete; unknown ids are ignored"""
        with self._working():
            self._units = [u for u in self._units if u.id != unit_id]
        self.logger.info(f"Deleted business unit {unit_id}")

    def get_stats(self) -> Dict[str, Any]:
        return compute_stats(self._units, business_unit_stats())

    def clear_error(self) -> None:
        self.error = None
