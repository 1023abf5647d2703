"""
Record store clients.

Both stores expose the same per-collection operations:

    list(filters, order_by, ascending, limit, since) -> rows
    insert(row) -> row
    update(record_id, row) -> row
    delete(record_id) -> None

``SupabaseStore`` passes them through to the hosted tables. ``LocalStore``
keeps rows in memory (optionally mirrored to a JSON file) for guest and demo
sessions. Failures raise StoreError.
"""
from __future__ import annotations

import json
import logging
import os
import uuid
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from supabase import Client, create_client

from .errors import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, object]


def connect_supabase(url: str, key: str) -> Client:
    return create_client(url, key)


def _describe(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


# -------------------------------
# Supabase
# -------------------------------

class SupabaseCollection:
    def __init__(self, client: Client, table: str):
        self.client = client
        self.table = table

    def list(
        self,
        filters: Optional[Dict[str, object]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        since: Optional[Tuple[str, object]] = None,
        columns: str = "*",
    ) -> List[Row]:
        try:
            query = self.client.table(self.table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, str(value))
            if since is not None:
                query = query.gte(since[0], str(since[1]))
            if order_by:
                query = query.order(order_by, desc=not ascending)
            if limit:
                query = query.limit(limit)
            response = query.execute()
        except Exception as e:
            raise StoreError(f"Failed to load {self.table}: {_describe(e)}", self.table) from e
        return list(response.data or [])

    def insert(self, row: Row) -> Row:
        try:
            response = self.client.table(self.table).insert(row).execute()
        except Exception as e:
            raise StoreError(f"Failed to insert into {self.table}: {_describe(e)}", self.table) from e
        return response.data[0] if response.data else dict(row)

    def update(self, record_id: str, row: Row) -> Row:
        payload = {k: v for k, v in row.items() if k != "id"}
        try:
            response = self.client.table(self.table).update(payload).eq("id", record_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to update {self.table}: {_describe(e)}", self.table) from e
        return response.data[0] if response.data else dict(payload, id=record_id)

    def delete(self, record_id: str) -> None:
        try:
            self.client.table(self.table).delete().eq("id", record_id).execute()
        except Exception as e:
            raise StoreError(f"Failed to delete from {self.table}: {_describe(e)}", self.table) from e


class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    def collection(self, table: str) -> SupabaseCollection:
        return SupabaseCollection(self.client, table)


# -------------------------------
# Local (guest / demo)
# -------------------------------

def _sort_key(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return "" if value is None else str(value)


class LocalCollection:
    def __init__(self, store: "LocalStore", table: str):
        self.store = store
        self.table = table

    @property
    def _rows(self) -> List[Row]:
        return self.store.tables.setdefault(self.table, [])

    def list(
        self,
        filters: Optional[Dict[str, object]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        since: Optional[Tuple[str, object]] = None,
        columns: str = "*",
    ) -> List[Row]:
        rows = [dict(r) for r in self._rows]
        for column, value in (filters or {}).items():
            rows = [r for r in rows if _sort_key(r.get(column)) == _sort_key(value)]
        if since is not None:
            column, value = since
            rows = [r for r in rows if _sort_key(r.get(column)) >= _sort_key(value)]
        if order_by:
            rows = sorted(rows, key=lambda r: _sort_key(r.get(order_by)), reverse=not ascending)
        if limit:
            rows = rows[:limit]
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return rows

    def insert(self, row: Row) -> Row:
        stored = dict(row)
        stored["id"] = str(uuid.uuid4())
        stored["created_at"] = datetime.now(timezone.utc).isoformat()
        self._rows.append(stored)
        self.store.save()
        return dict(stored)

    def update(self, record_id: str, row: Row) -> Row:
        for stored in self._rows:
            if stored.get("id") == record_id:
                stored.update({k: v for k, v in row.items() if k not in ("id", "created_at")})
                self.store.save()
                return dict(stored)
        raise StoreError(f"No {self.table} record with id {record_id}", self.table)

    def delete(self, record_id: str) -> None:
        rows = self._rows
        remaining = [r for r in rows if r.get("id") != record_id]
        if len(remaining) == len(rows):
            raise StoreError(f"No {self.table} record with id {record_id}", self.table)
        rows[:] = remaining
        self.store.save()


class LocalStore:
    """In-memory tables, mirrored to ``path`` as JSON when one is given."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.tables: Dict[str, List[Row]] = {}
        if path:
            self.load()

    def collection(self, table: str) -> LocalCollection:
        return LocalCollection(self, table)

    def load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable guest store %s: %s", self.path, e)
            return
        self.tables = {name: list(rows) for name, rows in obj.get("tables", {}).items()}

    def save(self) -> None:
        if not self.path:
            return
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"tables": self.tables, "saved_at": datetime.now().isoformat()}, f, indent=2, default=str)
        except OSError as e:
            raise StoreError(f"Failed to write guest data: {e}") from e
