"""ORM models. Importing this package registers every table on Base.metadata."""

from studyhub.models.resource import RESOURCE_TYPES, Resource
from studyhub.models.subject import Subject

__all__ = ["RESOURCE_TYPES", "Resource", "Subject"]
