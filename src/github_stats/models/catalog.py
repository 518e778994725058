"""Port catalog entity models."""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

# Values a catalog property may hold. Scalars are what this tool writes;
# lists, mappings and None are what the catalog may already store and
# must survive a merge untouched.
PropertyValue = Union[bool, int, float, datetime, str, None, list[Any], dict[str, Any]]

Properties = dict[str, PropertyValue]


class CatalogUser(BaseModel):
    """A user entity as stored in the Port catalog."""

    identifier: str
    title: Optional[str] = None
    properties: Properties = Field(default_factory=dict)
    relations: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CatalogUser":
        """Create from a Port entity payload."""
        return cls(
            identifier=data.get("identifier", ""),
            title=data.get("title"),
            properties=data.get("properties") or {},
            relations=data.get("relations") or {},
        )


def merge_properties(existing: Properties, fragment: Properties) -> Properties:
    """Overlay new facts on an existing property set.

    Keys from ``fragment`` win; every other existing key is kept, in its
    original order.
    """
    return {**existing, **fragment}
