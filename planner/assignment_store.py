"""
Assignment Store - persistence for task assignments.

An assignment puts one task into one slot: (employee, date, half-day).
The layout engine computes column_start/hours; this store only records them.
Rows are soft-deleted (is_active = 0) so history stays queryable.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path

from planner import db as db_module
from planner import safe_sql
from planner.slot_layout.models import HalfDay, SlotKey

logger = logging.getLogger(__name__)

TABLE = "assignments"
_UPDATABLE = (
    "column_start",
    "hours",
    "slot_order",
    "notes",
    "employee_id",
    "assigned_date",
    "half_day",
)
_SLOT_WHERE = "is_active = 1 AND employee_id = ? AND assigned_date = ? AND half_day = ?"


def _slot_params(slot_key: SlotKey) -> list:
    return [str(slot_key.employee_id), slot_key.date.isoformat(), int(slot_key.half_day)]


class AssignmentStore:
    """
    SQLite-backed assignment store.

    Each operation opens and commits its own connection, unless it runs
    inside transaction(): then it joins that block's connection and nothing
    is committed until the block exits cleanly.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = str(db_path or db_module.get_db_path())
        db_module.ensure_schema(self.db_path)
        self._local = threading.local()
        logger.info("AssignmentStore ready, DB path: %s", self.db_path)

    @contextmanager
    def transaction(self):
        """
        Group several operations into one commit. Any exception rolls back
        every write made in the block. Nested blocks join the outer one.
        """
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return

        with db_module.get_connection(self.db_path) as conn:
            self._local.conn = conn
            try:
                yield conn
            finally:
                self._local.conn = None

    def _conn(self):
        return self.transaction()

    # ==================== Reads ====================

    def get_assignment(self, assignment_id: int) -> dict | None:
        """Get a single active assignment by ID."""
        with self._conn() as conn:
            sql = safe_sql.select(TABLE, where="id = ? AND is_active = 1")
            row = conn.execute(sql, [assignment_id]).fetchone()
            return dict(row) if row else None

    def get_slot(self, slot_key: SlotKey) -> list[dict]:
        """Active assignments in a slot, leftmost placement first."""
        with self._conn() as conn:
            sql = safe_sql.select(TABLE, where=_SLOT_WHERE, order_by="slot_order, created_at, id")
            rows = conn.execute(sql, _slot_params(slot_key)).fetchall()
            return [dict(row) for row in rows]

    def count_slot(self, slot_key: SlotKey) -> int:
        with self._conn() as conn:
            sql = safe_sql.select(TABLE, columns="COUNT(*) AS c", where=_SLOT_WHERE)
            return conn.execute(sql, _slot_params(slot_key)).fetchone()["c"]

    def list_assignments(
        self, start_date: date, end_date: date, employee_id: str | None = None
    ) -> list[dict]:
        """Active assignments with assigned_date in [start_date, end_date]."""
        where = "is_active = 1 AND assigned_date >= ? AND assigned_date <= ?"
        params: list = [start_date.isoformat(), end_date.isoformat()]
        if employee_id is not None:
            where += " AND employee_id = ?"
            params.append(str(employee_id))

        with self._conn() as conn:
            sql = safe_sql.select(
                TABLE,
                where=where,
                order_by="assigned_date, employee_id, half_day, slot_order, created_at",
            )
            return [dict(row) for row in conn.execute(sql, params).fetchall()]

    # ==================== Writes ====================

    def create_assignment(
        self,
        employee_id: str,
        assigned_date: date,
        half_day: HalfDay | int,
        task_id: str,
        title: str = "",
        column_start: float | None = None,
        width: float | None = None,
        notes: str | None = None,
    ) -> dict:
        """
        Insert an assignment. New rows go to the right of the slot
        (slot_order = current max + 1).
        """
        key = SlotKey(str(employee_id), assigned_date, HalfDay.parse(half_day))
        now = datetime.now().isoformat()

        with self._conn() as conn:
            max_sql = safe_sql.select_max(TABLE, "slot_order", where=_SLOT_WHERE)
            current_max = conn.execute(max_sql, _slot_params(key)).fetchone()["m"]
            data = {
                "task_id": str(task_id),
                "employee_id": key.employee_id,
                "assigned_date": key.date.isoformat(),
                "half_day": int(key.half_day),
                "title": title or "",
                "notes": notes,
                "hours": width,
                "column_start": column_start,
                "slot_order": 0 if current_max is None else current_max + 1,
                "is_active": 1,
                "created_at": now,
                "updated_at": now,
            }
            cursor = conn.execute(safe_sql.insert(TABLE, list(data)), list(data.values()))
            data["id"] = cursor.lastrowid

        logger.info("Created assignment %s in %s", data["id"], key.label)
        return data

    def update_assignment(self, assignment_id: int, **fields) -> bool:
        """
        Update layout fields of an assignment.

        Accepts column_start, width (stored as hours), slot_order, notes and
        the slot fields employee_id / assigned_date / half_day. None values
        are skipped.
        """
        if "width" in fields:
            fields["hours"] = fields.pop("width")
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update assignment fields: {sorted(unknown)}")

        data = {k: v for k, v in fields.items() if v is not None}
        if not data:
            return False
        if isinstance(data.get("assigned_date"), date):
            data["assigned_date"] = data["assigned_date"].isoformat()
        if "half_day" in data:
            data["half_day"] = int(HalfDay.parse(data["half_day"]))
        if "employee_id" in data:
            data["employee_id"] = str(data["employee_id"])
        data["updated_at"] = datetime.now().isoformat()

        with self._conn() as conn:
            sql = safe_sql.update(TABLE, list(data), where="id = ? AND is_active = 1")
            result = conn.execute(sql, [*data.values(), assignment_id])
            return result.rowcount > 0

    def delete_assignment(self, assignment_id: int) -> bool:
        """Soft-delete an assignment."""
        with self._conn() as conn:
            sql = safe_sql.update(
                TABLE, ["is_active", "updated_at"], where="id = ? AND is_active = 1"
            )
            result = conn.execute(sql, [0, datetime.now().isoformat(), assignment_id])
            deleted = result.rowcount > 0

        if deleted:
            logger.info("Deleted assignment %s", assignment_id)
        return deleted


# Process-wide accessor
_store: AssignmentStore | None = None
_lock = threading.Lock()


def get_store(db_path: str | Path | None = None) -> AssignmentStore:
    """Get the shared assignment store."""
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = AssignmentStore(db_path)
    return _store


def reset_store() -> None:
    """Drop the shared store so the next get_store() re-resolves the DB path."""
    global _store
    with _lock:
        _store = None
