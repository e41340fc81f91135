"""In-memory operator directory.

Stands in for the user store: the fan-out only ever asks it for the current
admin roster.
"""

from typing import Optional

from alerto_triage.data_management.base_store import InMemoryStore
from alerto_triage.data_management.repositories import OperatorDirectory
from alerto_triage.data_management.schemas import Operator


class OperatorStore(InMemoryStore[Operator], OperatorDirectory):
    record_type = Operator

    async def add_operator(self, operator: Operator) -> None:
        async with self._lock:
            self._commit(operator.user_id, operator.model_copy())

    async def remove_operator(self, user_id: str) -> bool:
        async with self._lock:
            return self._discard(user_id)

    async def get_operator(self, user_id: str) -> Optional[Operator]:
        async with self._lock:
            operator = self._records.get(user_id)
            return operator.model_copy() if operator else None

    async def list_admins(self) -> list[Operator]:
        async with self._lock:
            return [o.model_copy() for o in self._records.values() if o.is_admin]
