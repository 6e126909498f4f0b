"""
Repository Module.

Provides specialized repository classes for the stored record types.
Each repository encapsulates CRUD operations for one table.
"""

from src.services.repositories.flight_repository import FlightRepository
from src.services.repositories.work_package_repository import WorkPackageRepository

__all__ = [
    "FlightRepository",
    "WorkPackageRepository",
]
