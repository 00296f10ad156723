"""Lookup result model: the flattened, fully resolved capability set."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from uacaps.core.types import PropertyValue
from uacaps.models.entry import FrozenProperties

IS_MOBILE_KEY = "isMobile"
IS_TABLET_KEY = "isTablet"


class Capabilities(BaseModel):
    """Resolved properties for one user-agent string.

    ``properties`` holds one value per property column of the dataset, in
    header order; unresolved properties carry the engine's unknown marker.
    Instances are immutable: ``properties`` is a read-only mapping.
    """

    user_agent: str
    matched_pattern: str
    properties: FrozenProperties = Field(default_factory=dict, validate_default=True)
    is_mobile: bool = False
    is_tablet: bool = False

    model_config = {"frozen": True}

    def __getitem__(self, name: str) -> PropertyValue:
        return self.properties[name]

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def to_dict(self) -> dict[str, PropertyValue]:
        """Flat dict of property columns plus the derived isMobile/isTablet flags."""
        out: dict[str, PropertyValue] = dict(self.properties)
        out[IS_MOBILE_KEY] = self.is_mobile
        out[IS_TABLET_KEY] = self.is_tablet
        return out
