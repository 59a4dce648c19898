"""
StudyHub Backend — Services Package
====================================

Business logic layer, independent of HTTP:
    - subject_service: subject CRUD, listing, resource_count adjustment
    - resource_service: resource CRUD, paginated listing, view/download counters
    - stats_service: site-wide totals

Every service method takes the request's AsyncSession as its first argument.
"""

from studyhub.services.resource_service import ResourceService, resource_service
from studyhub.services.stats_service import StatsService, stats_service
from studyhub.services.subject_service import SubjectService, subject_service

__all__ = [
    "ResourceService",
    "StatsService",
    "SubjectService",
    "resource_service",
    "stats_service",
    "subject_service",
]
