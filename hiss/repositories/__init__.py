# Repositories package init
"""
HISS Backend — Repositories
============================

What:  Persistence gateways. Each one receives an AsyncSession in its
       constructor and owns the SQL for its tables.

Inventory:
    - FeatureRepository: CRUD for one feature kind (stroke, angio, degenerative)
    - ReportRepository:  paged report listing, counts, features of a report
"""

from hiss.repositories.feature_repository import FeatureRepository
from hiss.repositories.report_repository import ReportRepository

__all__ = ["FeatureRepository", "ReportRepository"]
