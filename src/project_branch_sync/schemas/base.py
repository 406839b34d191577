"""Base schema class for platform API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    """Base class for platform API schemas.

    The platform speaks camelCase JSON; fields are snake_case in Python and
    accept either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize back to the platform's camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
