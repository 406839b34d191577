"""Schemas for platform targets (tracked repositories).

Maps to: GET /orgs/{org_id}/targets (REST API)
"""

from typing import Any

from pydantic import Field

from .base import SchemaBase


class TargetAttributes(SchemaBase):
    """Attributes of a target resource."""

    display_name: str = Field(description="Display name (owner/repo for GitHub)")
    is_private: bool = Field(default=False, description="Repository visibility")
    origin: str = Field(description="Source-control provider tag (e.g. github)")
    remote_url: str | None = Field(default=None, description="Remote URL if known")


class RelationshipData(SchemaBase):
    """Identifier of a related resource."""

    id: str
    type: str


class Relationship(SchemaBase):
    """A JSON:API relationship entry."""

    data: RelationshipData
    links: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] = Field(default_factory=dict)


class TargetRelationships(SchemaBase):
    """Relationships of a target resource."""

    org: Relationship | None = Field(default=None, description="Owning organization")


class Target(SchemaBase):
    """A tracked repository under an organization."""

    id: str = Field(description="Opaque target id")
    type: str = Field(default="target")
    attributes: TargetAttributes
    relationships: TargetRelationships | None = None

    @property
    def display_name(self) -> str:
        """Display name of the target."""
        return self.attributes.display_name

    @property
    def origin(self) -> str:
        """Source-control provider tag."""
        return self.attributes.origin


class TargetFilters(SchemaBase):
    """Filters applied when listing targets."""

    limit: int = Field(default=100, ge=1, le=100, description="Page size")
    origin: str | None = Field(default=None, description="Only targets of this origin")
    exclude_empty: bool = Field(default=True, description="Skip targets with no projects")


class TargetsPage(SchemaBase):
    """All targets returned for a listing (pages already followed)."""

    targets: list[Target] = Field(default_factory=list)
