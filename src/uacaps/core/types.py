"""Type aliases used across uacaps."""

from __future__ import annotations

from collections.abc import Mapping

PropertyValue = str | bool
PropertyMap = dict[str, PropertyValue]
ReadOnlyPropertyMap = Mapping[str, PropertyValue]
