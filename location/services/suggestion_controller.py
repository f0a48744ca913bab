"""Debounced address suggestions with last-issued-wins ordering.

Per input session the controller moves ``IDLE -> PENDING -> FULFILLED |
FAILED`` and re-enters ``PENDING`` on every keystroke. Provider calls are
issued only once the input has been quiet for the debounce period, each
tagged with a sequence number; only the response for the current sequence
may update the visible candidates.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from config import (
    get_geocode_query_cooldown_seconds,
    get_suggestion_debounce_seconds,
    get_suggestion_min_query_length,
)
from core.exceptions import GeocodingError, ProviderUnavailable, StaleResponseDiscarded

if TYPE_CHECKING:
    from core.context import SessionContext
    from core.mapping.interfaces import Geocoder
    from core.mapping.models import AddressCandidate
    from location.services.location_state import LocationState

logger = logging.getLogger(__name__)


class SuggestionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SuggestionSnapshot:
    query: str = ""
    candidates: tuple[AddressCandidate, ...] = ()
    status: SuggestionStatus = SuggestionStatus.IDLE
    error: GeocodingError | None = None

    @property
    def loading(self) -> bool:
        return self.status is SuggestionStatus.PENDING


@dataclass(slots=True)
class _Outcome:
    issued_at: float
    candidates: tuple[AddressCandidate, ...] = ()
    error: GeocodingError | None = None
    done: bool = False


SnapshotListener = Callable[[SuggestionSnapshot], None]


class SuggestionController:
    def __init__(
        self,
        geocoder: Geocoder,
        location_state: LocationState,
        *,
        context: SessionContext | None = None,
        country_filter: str | None = None,
        debounce_seconds: float | None = None,
        min_query_length: int | None = None,
        cooldown_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._geocoder = geocoder
        self._location_state = location_state
        self._context = context
        self._country_filter = country_filter
        self._debounce = (
            debounce_seconds
            if debounce_seconds is not None
            else get_suggestion_debounce_seconds()
        )
        self._min_length = (
            min_query_length
            if min_query_length is not None
            else get_suggestion_min_query_length()
        )
        self._cooldown = (
            cooldown_seconds
            if cooldown_seconds is not None
            else get_geocode_query_cooldown_seconds()
        )
        self._clock = clock

        self._next_seq = 0
        self._current_seq: int | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: dict[int, asyncio.Task] = {}
        self._inflight: dict[str, int] = {}
        self._recent: dict[str, _Outcome] = {}
        self._snapshot = SuggestionSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._closed = False

    # --- Reads ---

    @property
    def snapshot(self) -> SuggestionSnapshot:
        return self._snapshot

    @property
    def current_sequence(self) -> int | None:
        return self._current_seq

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: SuggestionSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Suggestion listener failed")

    # --- Input ---

    def on_input(self, text: str) -> None:
        """Feed the latest raw text of the address field."""
        if self._closed:
            logger.debug("Ignoring input on closed suggestion controller")
            return

        query = text.strip()
        self._cancel_timer()

        if len(query) < self._min_length:
            self._invalidate()
            self._publish(SuggestionSnapshot(query=query))
            return

        self._publish(
            SuggestionSnapshot(
                query=query,
                candidates=self._snapshot.candidates,
                status=SuggestionStatus.PENDING,
            ),
        )
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._fire, query)

    def select(self, candidate: AddressCandidate) -> None:
        """Hand the chosen candidate to the location state and clear the list."""
        self._cancel_timer()
        self._invalidate()
        self._location_state.set_from_candidate(candidate)
        self._publish(SuggestionSnapshot(query=candidate.display_label))

    def manual_entry(self, text: str) -> None:
        """Keep typed text as the address without resolving it."""
        self._cancel_timer()
        self._invalidate()
        self._location_state.set_manual_address(text.strip())
        self._publish(SuggestionSnapshot(query=text.strip()))

    def close(self) -> None:
        """Cancel the debounce timer and every in-flight call."""
        if self._closed:
            return
        self._closed = True
        self._cancel_timer()
        self._invalidate()
        for task in list(self._tasks.values()):
            task.cancel()
        self._tasks.clear()
        self._inflight.clear()
        self._recent.clear()
        self._publish(SuggestionSnapshot())
        self._listeners.clear()

    async def wait_settled(self) -> SuggestionSnapshot:
        """Wait until no debounce timer is armed and no call is in flight."""
        loop = asyncio.get_running_loop()
        while self._timer is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*self._tasks.values(), return_exceptions=True)
            elif self._timer is not None:
                await asyncio.sleep(max(self._timer.when() - loop.time(), 0))
            # the timer callback and the done-callbacks run on the next ticks
            await asyncio.sleep(0)
        return self._snapshot

    # --- Internals ---

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        self._current_seq = None

    def _ensure_current(self, seq: int) -> None:
        if seq != self._current_seq:
            msg = "Suggestion response superseded"
            raise StaleResponseDiscarded(
                msg,
                {"sequence": seq, "current": self._current_seq},
            )

    def _prune_recent(self, now: float) -> None:
        expired = [
            key
            for key, outcome in self._recent.items()
            if outcome.done and now - outcome.issued_at >= self._cooldown
        ]
        for key in expired:
            del self._recent[key]

    def _fire(self, query: str) -> None:
        self._timer = None
        if self._closed:
            return

        key = query.casefold()
        now = self._clock()
        self._prune_recent(now)

        if key in self._inflight:
            # Same query already on the wire: adopt its response.
            self._current_seq = self._inflight[key]
            logger.debug("Reusing in-flight suggestion call for %r", query)
            return

        recent = self._recent.get(key)
        if recent is not None and recent.done:
            self._next_seq += 1
            self._current_seq = self._next_seq
            logger.debug("Reusing cached suggestions for %r (cooldown)", query)
            self._apply(self._current_seq, query, recent)
            return

        self._next_seq += 1
        seq = self._next_seq
        self._current_seq = seq
        self._inflight[key] = seq
        outcome = _Outcome(issued_at=now)
        self._recent[key] = outcome

        task = asyncio.get_running_loop().create_task(self._run(seq, key, query, outcome))
        self._tasks[seq] = task
        task.add_done_callback(lambda _t, s=seq: self._tasks.pop(s, None))

    async def _run(self, seq: int, key: str, query: str, outcome: _Outcome) -> None:
        try:
            candidates = await self._geocoder.search(
                query,
                self._country_filter,
                context=self._context,
            )
            outcome.candidates = tuple(candidates)
        except GeocodingError as exc:
            logger.warning("Address suggestions for %r failed: %s", query, exc.message)
            outcome.error = exc
        except Exception as exc:
            logger.exception("Unexpected error fetching suggestions for %r", query)
            outcome.error = ProviderUnavailable(
                "Address search is unavailable",
                {"error": type(exc).__name__},
            )
        finally:
            outcome.done = True
            if self._inflight.get(key) == seq:
                del self._inflight[key]

        self._apply(seq, query, outcome)

    def _apply(self, seq: int, query: str, outcome: _Outcome) -> None:
        try:
            self._ensure_current(seq)
        except StaleResponseDiscarded as exc:
            logger.debug("%s: %s", exc.message, exc.details)
            return

        if outcome.error is not None:
            self._publish(
                SuggestionSnapshot(
                    query=query,
                    status=SuggestionStatus.FAILED,
                    error=outcome.error,
                ),
            )
            return

        self._publish(
            SuggestionSnapshot(
                query=query,
                candidates=outcome.candidates,
                status=SuggestionStatus.FULFILLED,
            ),
        )
