"""Backend-agnostic filter expressions over record attributes.

Gateways translate these into their own query language; ``matches`` is the
reference evaluation used by the in-memory backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True, slots=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class Ne:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class Contains:
    """Case-insensitive substring match."""

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class And:
    terms: tuple["Predicate", ...]


@dataclass(frozen=True, slots=True)
class Or:
    terms: tuple["Predicate", ...]


Predicate = Union[Eq, Ne, Contains, And, Or]


def and_(*terms: Predicate | None) -> Predicate | None:
    """Conjoin the given terms, dropping ``None`` and collapsing singletons."""
    kept = tuple(term for term in terms if term is not None)
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return And(kept)


def or_(*terms: Predicate | None) -> Predicate | None:
    kept = tuple(term for term in terms if term is not None)
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return Or(kept)


def fields_of(predicate: Predicate | None) -> set[str]:
    """Return every attribute name referenced by ``predicate``."""
    if predicate is None:
        return set()
    if isinstance(predicate, (And, Or)):
        names: set[str] = set()
        for term in predicate.terms:
            names |= fields_of(term)
        return names
    return {predicate.field}


def matches(predicate: Predicate | None, record: Mapping[str, Any]) -> bool:
    """Evaluate ``predicate`` against a plain record. ``None`` matches everything."""
    if predicate is None:
        return True
    if isinstance(predicate, Eq):
        return record.get(predicate.field) == predicate.value
    if isinstance(predicate, Ne):
        return record.get(predicate.field) != predicate.value
    if isinstance(predicate, Contains):
        value = record.get(predicate.field)
        if value is None:
            return False
        return predicate.value.casefold() in str(value).casefold()
    if isinstance(predicate, And):
        return all(matches(term, record) for term in predicate.terms)
    if isinstance(predicate, Or):
        return any(matches(term, record) for term in predicate.terms)
    raise TypeError(f"Unsupported predicate: {predicate!r}")


__all__ = ["Eq", "Ne", "Contains", "And", "Or", "Predicate", "and_", "or_", "fields_of", "matches"]
