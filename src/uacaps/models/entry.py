"""Dataset entry model: one row of the pattern dataset."""

from __future__ import annotations

from types import MappingProxyType
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer

from uacaps.core.types import PropertyMap, ReadOnlyPropertyMap

# Property maps are copied into a read-only view on validation and dumped as
# plain dicts.
FrozenProperties = Annotated[
    ReadOnlyPropertyMap,
    AfterValidator(lambda value: MappingProxyType(dict(value))),
    PlainSerializer(dict, return_type=PropertyMap),
]


class Entry(BaseModel):
    """A wildcard pattern, its parent reference and its declared properties.

    Only properties with a non-empty cell in the source row are present in
    ``properties``; everything else is inherited through ``parent``. Entries
    are shared by every lookup, so ``properties`` is read-only.
    """

    pattern: str
    parent: Optional[str] = None  # None for root entries
    properties: FrozenProperties = Field(default_factory=dict, validate_default=True)
    ordinal: int = 0  # position in the source file, earlier wins ties
    line_number: int = 0

    model_config = {"frozen": True}

    @property
    def is_root(self) -> bool:
        return self.parent is None


class DatasetSchema(BaseModel):
    """Column layout of a loaded dataset."""

    pattern_column: str = "Pattern"
    parent_column: str = "Parent"
    property_names: tuple[str, ...] = ()

    model_config = {"frozen": True}
