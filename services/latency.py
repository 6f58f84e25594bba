"""Simulated latency for the in-memory stores.

Every store call pauses for a fixed, operation-class-specific delay before it
touches data, so callers exercise real asynchronous states (loading
spinners, skeleton rows) against a purely in-memory backend.

The delay source is injected: production uses :meth:`LatencyProfile.from_settings`,
tests use :meth:`LatencyProfile.instant`.  An instant profile still yields to
the event loop once, so no call ever resolves synchronously.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable


SleepFunc = Callable[[float], Awaitable[Any]]


class LatencyKind(str, Enum):
    """Operation classes with distinct simulated delays."""

    READ = "read"  # single-record lookups, filtered queries, aggregates
    LIST = "list"  # whole-collection reads
    WRITE = "write"  # create / update / delete / roster changes
    BULK = "bulk"  # multi-record writes


@dataclass(frozen=True)
class LatencyProfile:
    """Delay in milliseconds per :class:`LatencyKind`."""

    read_ms: int = 200
    list_ms: int = 300
    write_ms: int = 400
    bulk_ms: int = 500

    @classmethod
    def instant(cls) -> LatencyProfile:
        return cls(read_ms=0, list_ms=0, write_ms=0, bulk_ms=0)

    @classmethod
    def from_settings(cls, settings: Any) -> LatencyProfile:
        """Build a profile from :class:`config.settings.Settings`."""
        if not settings.simulate_latency:
            return cls.instant()
        return cls(
            read_ms=settings.read_delay_ms,
            list_ms=settings.list_delay_ms,
            write_ms=settings.write_delay_ms,
            bulk_ms=settings.bulk_delay_ms,
        )

    def seconds(self, kind: LatencyKind) -> float:
        ms = {
            LatencyKind.READ: self.read_ms,
            LatencyKind.LIST: self.list_ms,
            LatencyKind.WRITE: self.write_ms,
            LatencyKind.BULK: self.bulk_ms,
        }[kind]
        return max(ms, 0) / 1000


class SimulatedLatency:
    """Awaitable delay shared by all stores of one :class:`SchoolDataStore`.

    ``sleep`` defaults to :func:`asyncio.sleep`; tests may pass a recorder to
    assert which operation class a call was charged to.
    """

    def __init__(
        self,
        profile: LatencyProfile | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        self.profile = profile or LatencyProfile()
        self._sleep = sleep or asyncio.sleep

    async def pause(self, kind: LatencyKind) -> None:
        await self._sleep(self.profile.seconds(kind))
