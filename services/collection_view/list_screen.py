"""
List screen state - the interactive wrapper around a CollectionView.

Owns the screen-level policies the engine leaves to its caller: returning
to page 1 whenever search or filters change, toggling the sort direction
when the same column is picked twice, and bounded next/previous paging.
"""

from typing import Any, Dict, Generic, Optional, Sequence

from services.collection_view.engine import (
    CollectionView, SortDirection, ViewResult, T
)
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ListScreen(Generic[T]):
    """Criteria commands for one list screen"""

    def __init__(self, view: CollectionView[T], name: str = "list"):
        self.view = view
        self.name = name

    @property
    def criteria(self):
        return self.view.criteria

    def result(self) -> ViewResult[T]:
        return self.view.result()

    def set_source(self, source: Sequence[T]) -> None:
        """Swap in a freshly fetched collection; criteria are kept"""
        self.view.set_source(source)

    def set_search(self, term: str) -> None:
        self.view.criteria = self.criteria.copy(search=term or "", page=1)

    def set_filter(self, field_name: str, value: Optional[Any]) -> None:
        """Set or, with an empty value, clear the filter on ``field_name``"""
        filters: Dict[str, Any] = dict(self.criteria.filters)
        if value is None or value == "":
            filters.pop(field_name, None)
        else:
            filters[field_name] = value
        self.view.criteria = self.criteria.copy(filters=filters, page=1)

    def reset_filters(self) -> None:
        self.view.criteria = self.criteria.copy(search="", filters={}, page=1)

    def sort_by(self, field_name: str) -> None:
        """Same column flips the direction; a new column starts ascending"""
        if self.criteria.sort_field == field_name:
            direction = SortDirection(self.criteria.sort_direction).toggled()
        else:
            direction = SortDirection.ASC
        self.view.criteria = self.criteria.copy(sort_field=field_name, sort_direction=direction)
        logger.debug(f"{self.name}: sort by {field_name} {direction.value}")

    def go_to_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be at least 1, got {page}")
        self.view.criteria = self.criteria.copy(page=page)

    def next_page(self) -> bool:
        """Advance unless already on the last page"""
        if self.criteria.page < self.result().total_pages:
            self.view.criteria = self.criteria.copy(page=self.criteria.page + 1)
            return True
        return False

    def previous_page(self) -> bool:
        if self.criteria.page > 1:
            self.view.criteria = self.criteria.copy(page=self.criteria.page - 1)
            return True
        return False
