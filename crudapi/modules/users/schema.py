"""Queryable columns of the ``users`` table.

Password hashes, verification ids and lockout counters are deliberately
absent, so list filters can never match on them.
"""

from datetime import datetime

from crudapi.modules.accounts.models import Account
from crudapi.modules.common.schema import EntitySchema, column

USER_SCHEMA: EntitySchema[Account] = EntitySchema(
    name="users",
    columns=(
        column("id", type=int),
        column("firstName", "first_name", searchable=True),
        column("lastName", "last_name", searchable=True),
        column("email", searchable=True),
        column("role", searchable=True),
        column("verified", type=bool),
        column("phone", searchable=True),
        column("city", searchable=True),
        column("country", searchable=True),
        column("createdAt", "created_at", type=datetime),
        column("updatedAt", "updated_at", type=datetime),
    ),
    factory=Account.from_record,
)
