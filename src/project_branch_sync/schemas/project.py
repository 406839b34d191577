"""Schemas for platform projects.

Maps to: POST /org/{org_id}/projects (v1 API)
"""

from datetime import datetime

from pydantic import Field

from .base import SchemaBase


class Project(SchemaBase):
    """A manifest tracked under a target."""

    id: str = Field(description="Project public id")
    name: str = Field(description="Project name (e.g. owner/repo:package.json)")
    origin: str = Field(description="Source-control provider tag")
    type: str = Field(description="Ecosystem / package manager")
    created: datetime | None = Field(default=None, description="Creation timestamp")
    branch: str | None = Field(default=None, description="Currently recorded branch")


class ProjectsOrg(SchemaBase):
    """Organization reference included in project listings."""

    id: str
    name: str | None = None


class ProjectsPage(SchemaBase):
    """Projects returned for an org (optionally filtered to one target)."""

    org: ProjectsOrg | None = None
    projects: list[Project] = Field(default_factory=list)
