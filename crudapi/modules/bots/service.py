"""Bot use cases."""

from __future__ import annotations

from crudapi.modules.common.crud import CrudService
from crudapi.modules.common.gateway import TableGateway

from .models import BOT_SCHEMA, Bot

UNIQUE_FIELDS = ("name",)


class BotService(CrudService[Bot]):
    @classmethod
    def with_gateway(cls, gateway: TableGateway) -> "BotService":
        return cls(gateway, BOT_SCHEMA, UNIQUE_FIELDS)
