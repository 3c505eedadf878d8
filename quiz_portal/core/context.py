"""Explicit application context shared by every core service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import time
from typing import Callable
from uuid import uuid4

from quiz_portal.core.storage import KeyValueStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


@dataclass(slots=True)
class AppContext:
    """Store plus the clocks and id factory services must not reach for globally.

    Build one at process start and hand it to every service. Tests swap in a
    ``MemoryStore`` and deterministic callables.
    """

    store: KeyValueStore
    now: Callable[[], datetime] = field(default=_utc_now)
    monotonic: Callable[[], float] = field(default=time.monotonic)
    new_id: Callable[[], str] = field(default=_new_id)
