"""
Collection view engine - derives a searched, filtered, sorted and paginated
view from a raw list of records.

Every step is a pure function. ``CollectionView.result()`` runs the whole
pipeline (search -> filters -> sort -> paginate) on each call and computes
aggregate statistics over the untouched source list.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")

StatFunction = Callable[[Sequence[Any]], Any]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> 'SortDirection':
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def _plain(value: Any) -> Any:
    """Enum members compare and search by their value"""
    return value.value if isinstance(value, Enum) else value


def resolve_field(record: Any, path: str) -> Any:
    """
    Read a possibly dotted field from a record

    Works on mappings and plain objects; ``"manager.full_name"`` reaches
    into a nested object. Anything missing along the way resolves to None.
    """
    value = record
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part, None)
        else:
            value = getattr(value, part, None)
    return _plain(value)


def search_records(records: Sequence[T], query: str, fields: Sequence[str]) -> List[T]:
    """Case-insensitive substring match on any of ``fields``"""
    if not query:
        return list(records)

    needle = query.lower()
    matches = []
    for record in records:
        for path in fields:
            value = resolve_field(record, path)
            if value is not None and needle in str(value).lower():
                matches.append(record)
                break
    return matches


def filter_records(records: Sequence[T], filters: Mapping[str, Any]) -> List[T]:
    """AND of exact-equality predicates; empty or None values are ignored"""
    active = {
        path: _plain(expected)
        for path, expected in filters.items()
        if expected is not None and expected != ""
    }
    if not active:
        return list(records)

    return [
        record for record in records
        if all(resolve_field(record, path) == expected for path, expected in active.items())
    ]


def _sort_key(path: str) -> Callable[[Any], Any]:
    def key(record: Any) -> Any:
        value = resolve_field(record, path)
        if isinstance(value, str):
            value = value.lower()
        # None sorts after every real value in ascending order
        return (value is None, value if value is not None else 0)
    return key


def sort_records(records: Sequence[T], sort_field: Optional[str],
                 direction: SortDirection = SortDirection.ASC) -> List[T]:
    """
    Stable single-key sort

    Equal keys keep their prior relative order in both directions.
    """
    if not sort_field:
        return list(records)
    return sorted(records, key=_sort_key(sort_field),
                  reverse=SortDirection(direction) is SortDirection.DESC)


def paginate(records: Sequence[T], page: int, page_size: int) -> List[T]:
    """
    1-based page slice; pages past the end are empty

    Raises:
        ValueError: page or page_size below 1
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")
    start = (page - 1) * page_size
    return list(records[start:start + page_size])


def count_pages(item_count: int, page_size: int) -> int:
    """ceil(item_count / page_size); 0 for an empty collection"""
    if item_count <= 0:
        return 0
    return math.ceil(item_count / page_size)


@dataclass
class ViewCriteria:
    """User-chosen view criteria for one list screen"""
    search: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)
    sort_field: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1

    def copy(self, **changes: Any) -> 'ViewCriteria':
        """Copy with a fresh filters dict"""
        changes.setdefault("filters", dict(self.filters))
        return replace(self, **changes)


@dataclass(frozen=True)
class ViewResult(Generic[T]):
    """One derived view of a collection"""
    items: List[T]
    filtered_count: int
    total_count: int
    total_pages: int
    page: int
    page_size: int
    stats: Dict[str, Any]

    @property
    def start_index(self) -> int:
        """1-based position of the first item shown, 0 when nothing is"""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.items:
            return 0
        return self.start_index + len(self.items) - 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def compute_stats(records: Sequence[Any], stats: Mapping[str, StatFunction]) -> Dict[str, Any]:
    return {name: fn(records) for name, fn in stats.items()}


def derive_view(source: Sequence[T],
                criteria: ViewCriteria,
                search_fields: Sequence[str],
                page_size: int,
                stats: Optional[Mapping[str, StatFunction]] = None) -> ViewResult[T]:
    """Run the full pipeline once; ``source`` is never modified"""
    matched = search_records(source, criteria.search, search_fields)
    matched = filter_records(matched, criteria.filters)
    ordered = sort_records(matched, criteria.sort_field, criteria.sort_direction)

    return ViewResult(
        items=paginate(ordered, criteria.page, page_size),
        filtered_count=len(ordered),
        total_count=len(source),
        total_pages=count_pages(len(ordered), page_size),
        page=criteria.page,
        page_size=page_size,
        stats=compute_stats(source, stats or {}),
    )


class CollectionView(Generic[T]):
    """
    Reusable view over one collection

    Holds the source reference, the configured search fields, the page
    size and the statistics; ``result()`` recomputes from scratch.
    """

    def __init__(self,
                 source: Sequence[T],
                 search_fields: Sequence[str],
                 page_size: int,
                 stats: Optional[Mapping[str, StatFunction]] = None,
                 criteria: Optional[ViewCriteria] = None):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self._source = source
        self.search_fields = tuple(search_fields)
        self.page_size = page_size
        self.stats = dict(stats or {})
        self.criteria = criteria or ViewCriteria()

    @property
    def source(self) -> Sequence[T]:
        return self._source

    def set_source(self, source: Sequence[T]) -> None:
        self._source = source

    def result(self) -> ViewResult[T]:
        return derive_view(self._source, self.criteria, self.search_fields,
                           self.page_size, self.stats)

    def statistics(self) -> Dict[str, Any]:
        """Aggregates over the whole source, independent of the criteria"""
        return compute_stats(self._source, self.stats)
