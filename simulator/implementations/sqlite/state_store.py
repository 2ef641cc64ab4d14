"""
SQLite State Store

Durable storage for elevator records, the audit event log and the read log.
Tables mirror the layout served by the HTTP API:
  elevators(id, current_floor, state, direction, job_queue)
  event_logs(id, timestamp, elevator_id, event_type, details)
  sql_logs(id, timestamp, query_text, who, where_from, what)
job_queue and details are stored as JSON text.

Timestamps are simulation seconds. Each process starts its clock at 0, so
the store adds the latest timestamp already on disk to keep both logs
non-decreasing across restarts.
"""

import contextlib
import json
import sqlite3
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ...core.elevator import (
    ElevatorRecord, EventRecord, SqlLogRecord, Job, IDLE, NO_DIRECTION,
    EVENT_STATE_UPDATE, read_query,
)
from ...exceptions import NotFound, StoreError
from ...interfaces.state_store import IStateStore


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS elevators (
        id INTEGER PRIMARY KEY,
        current_floor INTEGER NOT NULL,
        state TEXT NOT NULL,
        direction TEXT NOT NULL,
        job_queue TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS event_logs (
        id TEXT PRIMARY KEY,
        timestamp REAL NOT NULL,
        elevator_id INTEGER NOT NULL,
        event_type TEXT NOT NULL,
        details TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sql_logs (
        id TEXT PRIMARY KEY,
        timestamp REAL NOT NULL,
        query_text TEXT NOT NULL,
        who TEXT NOT NULL,
        where_from TEXT,
        what TEXT
    )
    """,
)


class SQLiteStateStore(IStateStore):
    """
    sqlite3-backed state store

    One connection is shared by every caller; an internal lock serialises
    access so the store can be used from the Flask worker threads and the
    clock thread alike.
    """

    def __init__(self, clock: Callable[[], float], db_path: Union[str, Path] = "./elevator.db"):
        """
        Args:
            clock: Returns the current simulation time
            db_path: SQLite file path (":memory:" for a private in-memory database)
        """
        self.clock = clock
        self.db_path = str(db_path)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            for statement in SCHEMA:
                self._conn.execute(statement)
            self._conn.commit()
            # Latest stored timestamp; this process's clock continues from it
            self.time_offset = self._conn.execute(
                "SELECT MAX(timestamp) FROM "
                "(SELECT timestamp FROM event_logs UNION ALL SELECT timestamp FROM sql_logs)"
            ).fetchone()[0] or 0.0
        except sqlite3.Error as e:
            raise StoreError(f"Error opening database {self.db_path}: {e}") from e

    @contextlib.contextmanager
    def _transaction(self):
        """Run a block under the store lock, committing on success"""
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                with contextlib.suppress(sqlite3.Error):
                    self._conn.rollback()
                raise StoreError(str(e)) from e

    def close(self):
        with self._lock:
            self._conn.close()

    def now(self) -> float:
        """Timestamp for new log rows"""
        return self.time_offset + self.clock()

    @staticmethod
    def _row_to_record(row) -> ElevatorRecord:
        elevator_id, current_floor, state, direction, job_queue = row
        jobs = json.loads(job_queue)
        return ElevatorRecord(
            id=elevator_id,
            current_floor=current_floor,
            state=state,
            direction=direction,
            active_job=Job.from_dict(jobs[0]) if jobs else None,
        )

    def _log_read(self, conn, elevator_id: Optional[int] = None):
        conn.execute(
            "INSERT INTO sql_logs (id, timestamp, query_text, who, where_from, what) VALUES (?, ?, ?, ?, ?, ?)",
            (str(uuid.uuid4()), self.now(), read_query(elevator_id), "system", None, None),
        )

    def initialize(self, num_elevators: int, home_floor: int = 1) -> None:
        with self._transaction() as conn:
            count = conn.execute("SELECT COUNT(*) FROM elevators").fetchone()[0]
            if not count:
                conn.executemany(
                    "INSERT INTO elevators (id, current_floor, state, direction, job_queue) VALUES (?, ?, ?, ?, ?)",
                    [(i, home_floor, IDLE, NO_DIRECTION, "[]") for i in range(1, num_elevators + 1)],
                )
        if not count:
            print(f"{self.now():.2f} [Store] Initialized {num_elevators} elevators.")
            return

        print(f"{self.now():.2f} [Store] Elevators already exist. Not re-initializing.")
        self._reset_busy_elevators()

    def _reset_busy_elevators(self):
        """Return elevators left busy by a previous process to Idle"""
        with self._transaction() as conn:
            stranded = conn.execute(
                "SELECT id, state, current_floor FROM elevators WHERE state != ? ORDER BY id", (IDLE,)
            ).fetchall()
            for elevator_id, state, current_floor in stranded:
                conn.execute(
                    "UPDATE elevators SET state = ?, direction = ?, job_queue = ? WHERE id = ?",
                    (IDLE, NO_DIRECTION, "[]", elevator_id),
                )
        for elevator_id, state, current_floor in stranded:
            print(f"{self.now():.2f} [Store] Elevator {elevator_id} was {state} at floor {current_floor}; reset to {IDLE}")
            self.append_event(elevator_id, EVENT_STATE_UPDATE, {
                'state': IDLE,
                'direction': NO_DIRECTION,
                'current_floor': current_floor,
            })

    def list_elevators(self) -> List[ElevatorRecord]:
        with self._transaction() as conn:
            self._log_read(conn)
            rows = conn.execute(
                "SELECT id, current_floor, state, direction, job_queue FROM elevators ORDER BY id"
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def get_elevator(self, elevator_id: int) -> ElevatorRecord:
        with self._transaction() as conn:
            self._log_read(conn, elevator_id)
            row = conn.execute(
                "SELECT id, current_floor, state, direction, job_queue FROM elevators WHERE id = ?",
                (elevator_id,),
            ).fetchone()
        if row is None:
            raise NotFound(elevator_id)
        return self._row_to_record(row)

    def update_elevator(self, elevator_id: int, partial: Dict[str, Any]) -> ElevatorRecord:
        # Read and write under one lock hold so the merge is atomic
        with self._lock:
            merged = self.get_elevator(elevator_id).merged(partial)
            with self._transaction() as conn:
                conn.execute(
                    "UPDATE elevators SET current_floor = ?, state = ?, direction = ?, job_queue = ? WHERE id = ?",
                    (merged.current_floor, merged.state, merged.direction,
                     json.dumps(merged.job_queue), elevator_id),
                )
        return merged

    def delete_elevator(self, elevator_id: int) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM elevators WHERE id = ?", (elevator_id,))
            deleted = cursor.rowcount
        if not deleted:
            raise NotFound(elevator_id)

    def append_event(self, elevator_id: int, event_type: str, details: Dict[str, Any]) -> EventRecord:
        event = EventRecord(
            id=str(uuid.uuid4()),
            timestamp=self.now(),
            elevator_id=elevator_id,
            event_type=event_type,
            details=dict(details),
        )
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO event_logs (id, timestamp, elevator_id, event_type, details) VALUES (?, ?, ?, ?, ?)",
                (event.id, event.timestamp, elevator_id, event_type, json.dumps(event.details)),
            )
        return event

    def list_events(self) -> List[EventRecord]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, timestamp, elevator_id, event_type, details FROM event_logs ORDER BY rowid"
            ).fetchall()
        return [
            EventRecord(id=row[0], timestamp=row[1], elevator_id=row[2],
                        event_type=row[3], details=json.loads(row[4]))
            for row in rows
        ]

    def list_sql_logs(self) -> List[SqlLogRecord]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, timestamp, query_text, who, where_from, what FROM sql_logs ORDER BY rowid"
            ).fetchall()
        return [
            SqlLogRecord(id=row[0], timestamp=row[1], query_text=row[2],
                         who=row[3], where_from=row[4], what=row[5])
            for row in rows
        ]
