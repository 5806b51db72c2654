"""Test doubles and factories shared by the BadgeVault tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from badgevault.services.badge_models import (
    AnnotatedRecord,
    BadgeVariant,
    CacheEntry,
    CraftedInfo,
    EnrichmentRecord,
)
from badgevault.services.steam.badge_fetcher import FetchOutcome
from badgevault.shared.errors import ErrorCode, RemoteError
from badgevault.shared.protocols.services import BasePresenter, PlaceholderReason

FIXED_NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock returning a settable time."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class RecordingPresenter(BasePresenter):
    """Presenter that records every call as a tuple."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def present(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> None:
        self.calls.append(("present", item_id, list(records), fresh))

    def present_placeholder(self, item_id: int, reason: PlaceholderReason) -> None:
        self.calls.append(("placeholder", item_id, reason))

    def present_updating(self, item_id: int) -> None:
        self.calls.append(("updating", item_id))

    def of_kind(self, kind: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == kind]


def remote_failure(item_id: int) -> RemoteError:
    return RemoteError(code=ErrorCode.NETWORK_ERROR, message=f"boom for {item_id}")


class FakeFetcher:
    """Scripted fetcher that logs every call in order.

    ``records`` maps item ids to the badge list returned; ids listed in
    ``failing_enrichment`` return an empty list with a failure.
    """

    def __init__(self) -> None:
        self.records: dict[int, list[EnrichmentRecord]] = {}
        self.crafted: dict[tuple[int, BadgeVariant], int] = {}
        self.failing_enrichment: set[int] = set()
        self.failing_crafted: set[tuple[int, BadgeVariant]] = set()
        self.calls: list[tuple[str, int, BadgeVariant | None]] = []
        self.gate: asyncio.Event | None = None
        self.active = 0
        self.max_active = 0

    async def fetch_enrichment_outcome(
        self, item_id: int
    ) -> FetchOutcome[list[EnrichmentRecord]]:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            self.calls.append(("enrichment", item_id, None))
            if self.gate is not None:
                await self.gate.wait()
            if item_id in self.failing_enrichment:
                return FetchOutcome(payload=[], failure=remote_failure(item_id))
            return FetchOutcome(payload=list(self.records.get(item_id, [])))
        finally:
            self.active -= 1

    async def fetch_crafted_info_outcome(
        self, item_id: int, variant: BadgeVariant
    ) -> FetchOutcome[CraftedInfo]:
        self.calls.append(("crafted", item_id, variant))
        if (item_id, variant) in self.failing_crafted:
            return FetchOutcome(payload=CraftedInfo.none(), failure=remote_failure(item_id))
        return FetchOutcome(payload=CraftedInfo.from_level(self.crafted.get((item_id, variant), 0)))

    def enrichment_calls(self) -> list[int]:
        return [item_id for kind, item_id, _ in self.calls if kind == "enrichment"]


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def make_record(
    level: int,
    *,
    foil: bool = False,
    name: str | None = None,
    scarcity: str = "12345",
    first_completion: datetime | None = None,
) -> EnrichmentRecord:
    return EnrichmentRecord(
        name=name or (f"Foil {level}" if foil else f"Level {level}"),
        image_ref=f"badge_{'foil' if foil else 'normal'}_{level}.png",
        scarcity=scarcity,
        base_level=level,
        is_foil=foil,
        first_completion=first_completion,
    )


def make_entry(
    item_id: int,
    created_at: datetime,
    records: Sequence[EnrichmentRecord] = (),
    *,
    normal_level: int = 0,
    foil_level: int = 0,
    degraded: bool = False,
) -> CacheEntry:
    return CacheEntry(
        item_id=item_id,
        created_at=created_at,
        enrichment_records=tuple(records),
        crafted_normal=CraftedInfo.from_level(normal_level),
        crafted_foil=CraftedInfo.from_level(foil_level),
        degraded=degraded,
    )


async def wait_until(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")
