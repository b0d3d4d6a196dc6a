"""Domain model for bots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from crudapi.modules.common.schema import EntitySchema, column


@dataclass(slots=True)
class Bot:
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Bot":
        return cls(
            id=record["id"],
            name=record["name"],
            description=record.get("description"),
            is_active=bool(record.get("is_active", True)),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


BOT_SCHEMA: EntitySchema[Bot] = EntitySchema(
    name="bots",
    columns=(
        column("id", type=int),
        column("name", searchable=True),
        column("description", searchable=True),
        column("isActive", "is_active", type=bool),
        column("createdAt", "created_at", type=datetime),
        column("updatedAt", "updated_at", type=datetime),
    ),
    factory=Bot.from_record,
)
