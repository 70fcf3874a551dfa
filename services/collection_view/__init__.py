"""
Collection view service - search, filter, sort and paginate in-memory lists.
"""

from .engine import (
    CollectionView,
    SortDirection,
    ViewCriteria,
    ViewResult,
    derive_view,
    resolve_field,
)
from .list_screen import ListScreen

__all__ = [
    'CollectionView',
    'SortDirection',
    'ViewCriteria',
    'ViewResult',
    'derive_view',
    'resolve_field',
    'ListScreen'
]
