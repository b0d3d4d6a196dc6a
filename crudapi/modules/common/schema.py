"""Column whitelists binding public field names to record attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from .exceptions import ValidationFailedError

T = TypeVar("T")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """A queryable column.

    ``name`` is what HTTP clients send (``createdAt``); ``attribute`` is the
    record key (``created_at``). ``searchable`` columns may take part in the
    free-text ``filter``/``fields`` search.
    """

    name: str
    attribute: str
    type: type = str
    searchable: bool = False

    def coerce(self, raw: Any) -> Any:
        if raw is None:
            return None
        if isinstance(raw, self.type) and (self.type is bool or not isinstance(raw, bool)):
            return raw
        text = str(raw).strip()
        try:
            if self.type is bool:
                lowered = text.lower()
                if lowered in _TRUE_VALUES:
                    return True
                if lowered in _FALSE_VALUES:
                    return False
                raise ValueError(text)
            if self.type is int:
                return int(text)
            if self.type is float:
                return float(text)
            if self.type is datetime:
                return datetime.fromisoformat(text)
            return self.type(text)
        except ValueError as exc:
            raise ValidationFailedError("ERROR_WITH_FILTER") from exc


def column(name: str, attribute: Optional[str] = None, type: type = str, searchable: bool = False) -> ColumnSpec:
    return ColumnSpec(name=name, attribute=attribute or name, type=type, searchable=searchable)


@dataclass(frozen=True)
class EntitySchema(Generic[T]):
    """Describes one table/collection for the generic helpers."""

    name: str
    columns: tuple[ColumnSpec, ...]
    factory: Callable[[Mapping[str, Any]], T]
    id_attribute: str = "id"
    default_sort: str = "createdAt"
    _lookup: dict[str, ColumnSpec] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        lookup: dict[str, ColumnSpec] = {}
        for spec in self.columns:
            lookup[spec.attribute] = spec
            lookup[spec.name] = spec
        object.__setattr__(self, "_lookup", lookup)

    def resolve(self, name: str) -> ColumnSpec | None:
        """Return the column for a public name or attribute, ``None`` if unknown."""
        return self._lookup.get(name)

    def has_attribute(self, attribute: str) -> bool:
        spec = self._lookup.get(attribute)
        return spec is not None and spec.attribute == attribute

    @property
    def attributes(self) -> tuple[str, ...]:
        return tuple(spec.attribute for spec in self.columns)

    def default_sort_attribute(self) -> str:
        spec = self.resolve(self.default_sort)
        return spec.attribute if spec else self.id_attribute

    def build(self, record: Mapping[str, Any]) -> T:
        return self.factory(record)


__all__ = ["ColumnSpec", "EntitySchema", "column"]
