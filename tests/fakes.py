"""In-memory stand-in for LedgerStore used to test the ledger workflows."""

import uuid
from decimal import Decimal

from dailyledger.core.errors import DatabaseError
from dailyledger.core.reconciliation import entry_from_line_items


class FakeStore:
    """Records every call and can fail on a named method.

    ``fail_on`` names a method that raises DatabaseError with ``error_message``;
    ``audit_fails`` makes append_audit_entry report failure the way the real
    store does (returns False, never raises).
    """

    def __init__(
        self,
        petty_cash: dict | None = None,
        fail_on: str | None = None,
        error_message: str = "connection reset by peer",
        audit_fails: bool = False,
    ):
        self.petty_cash = petty_cash or {}
        self.fail_on = fail_on
        self.error_message = error_message
        self.audit_fails = audit_fails

        self.calls: list[str] = []
        self.records: dict[uuid.UUID, dict] = {}
        self.audit: list[dict] = []
        self.committed = False
        self.rolled_back = False

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise DatabaseError(self.error_message)

    @property
    def writes(self) -> list[str]:
        reads = {"query_petty_cash_sum", "record_exists_for_date", "load_entry"}
        return [c for c in self.calls if c not in reads]

    async def insert_daily_record(self, entry_date, day_name, actor, petty_cash_computed_at=None):
        self._call("insert_daily_record")
        record_id = uuid.uuid4()
        self.records[record_id] = {
            "date": entry_date,
            "day_name": day_name,
            "created_by": actor,
            "petty_cash_computed_at": petty_cash_computed_at,
            "items": {},
        }
        return record_id

    async def insert_line_items(self, record_id, items):
        self._call("insert_line_items")
        for item in items:
            self.records[record_id]["items"][(item.kind, item.key)] = item

    async def update_line_item(self, record_id, item):
        self._call("update_line_item")
        self.records[record_id]["items"][(item.kind, item.key)] = item

    async def update_record_date(self, record_id, entry_date, day_name):
        self._call("update_record_date")
        self.records[record_id]["date"] = entry_date
        self.records[record_id]["day_name"] = day_name

    async def mark_saved(self, record_id, actor, petty_cash_computed_at):
        self._call("mark_saved")
        self.records[record_id]["last_modified_by"] = actor
        self.records[record_id]["petty_cash_computed_at"] = petty_cash_computed_at

    async def delete_record(self, record_id):
        self._call("delete_record")
        del self.records[record_id]
        self.audit = [a for a in self.audit if a["record_id"] != record_id]

    async def query_petty_cash_sum(self, entry_date) -> Decimal:
        self._call("query_petty_cash_sum")
        return self.petty_cash.get(entry_date, Decimal("0"))

    async def record_exists_for_date(self, entry_date, exclude_id=None) -> bool:
        self._call("record_exists_for_date")
        return any(
            r["date"] == entry_date for rid, r in self.records.items() if rid != exclude_id
        )

    async def load_entry(self, record_id):
        self._call("load_entry")
        record = self.records.get(record_id)
        if record is None:
            return None
        return entry_from_line_items(record["date"], record["items"].values())

    async def append_audit_entry(self, record_id, actor, action, changes) -> bool:
        self.calls.append("append_audit_entry")
        if self.audit_fails:
            return False
        self.audit.append(
            {"record_id": record_id, "actor": actor, "action": action, "changes": changes}
        )
        return True

    async def commit(self):
        self._call("commit")
        self.committed = True

    async def rollback(self):
        self.calls.append("rollback")
        self.rolled_back = True
