"""Bots: a plain entity served by the generic CRUD helpers."""

from .models import BOT_SCHEMA, Bot
from .service import BotService

__all__ = ["BOT_SCHEMA", "Bot", "BotService"]
