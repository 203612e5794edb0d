"""Per-worker write serialization.

Writes for one worker run one at a time: an in-process lock covers threads of
this process and, on PostgreSQL, a transaction-scoped advisory lock covers
other processes. Reads never take these locks.

In-process locks come from a fixed table indexed by the worker id hash, so
memory stays flat however many workers are written. Two workers sharing a
slot only serialize with each other. A write holds one worker lock at a time.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

LOCK_SLOTS = 64

_slot_locks = tuple(threading.Lock() for _ in range(LOCK_SLOTS))


def advisory_key(worker_id: str) -> int:
    digest = hashlib.sha1(worker_id.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


def lock_slot(worker_id: str) -> int:
    return advisory_key(worker_id) % LOCK_SLOTS


@contextmanager
def worker_write_lock(db: Session, worker_id: str) -> Iterator[None]:
    with _slot_locks[lock_slot(worker_id)]:
        bind = db.get_bind()
        if bind.dialect.name == "postgresql":
            # Released automatically when the surrounding transaction ends.
            db.execute(select(func.pg_advisory_xact_lock(advisory_key(worker_id))))
        logger.debug("worker_lock_acquired worker_id=%s", worker_id)
        yield
