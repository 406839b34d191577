"""Pydantic schemas for platform API payloads."""

from .base import SchemaBase
from .project import Project, ProjectsOrg, ProjectsPage
from .target import (
    Relationship,
    RelationshipData,
    Target,
    TargetAttributes,
    TargetFilters,
    TargetRelationships,
    TargetsPage,
)

__all__ = [
    # Base
    "SchemaBase",
    # Projects
    "Project",
    "ProjectsOrg",
    "ProjectsPage",
    # Targets
    "Relationship",
    "RelationshipData",
    "Target",
    "TargetAttributes",
    "TargetFilters",
    "TargetRelationships",
    "TargetsPage",
]
