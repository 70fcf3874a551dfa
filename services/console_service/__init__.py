"""
Console service - RPA console entities, list screen presets and commands.
"""

from .business_service import BusinessUnitNotFoundError, BusinessUnitService
from .views import business_processes_screen, business_units_screen, rpa_bots_screen

__all__ = [
    'BusinessUnitNotFoundError',
    'BusinessUnitService',
    'business_processes_screen',
    'business_units_screen',
    'rpa_bots_screen'
]
