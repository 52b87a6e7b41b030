"""Vector collection schema models."""
from dataclasses import dataclass
from enum import Enum


class PropertyType(Enum):
    """Storage type of a collection property."""
    TEXT = "text"
    INT = "int"


@dataclass(frozen=True)
class PropertySpec:
    name: str
    data_type: PropertyType


@dataclass(frozen=True)
class CollectionSchema:
    """Fixed property layout of a collection."""
    properties: tuple[PropertySpec, ...]

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.properties]
