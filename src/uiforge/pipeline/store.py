"""
FeedStore - the shared, ordered collection of Rounds.

Every mutation is a command applied through ``dispatch`` under one lock, so
concurrent settlements and user removals never interleave. Writers always
address a Round and Output by id. A lookup miss is a silent no-op: a
generation whose round was deleted simply has nowhere to write.
"""

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Union

from uiforge.core import get_logger
from uiforge.core.id import Prefix, is_valid
from uiforge.models import Output, Round

logger = get_logger(__name__)


# ============================================================================
# Commands
# ============================================================================


@dataclass(frozen=True)
class PrependRound:
    round: Round


@dataclass(frozen=True)
class RemoveRound:
    round_id: str


@dataclass(frozen=True)
class ResetFeed:
    pass


@dataclass(frozen=True)
class UpdateOutput:
    round_id: str
    output_id: str
    mutate: Callable[[Output], None]


@dataclass(frozen=True)
class UpdateRound:
    round_id: str
    mutate: Callable[[Round], None]


Command = Union[PrependRound, RemoveRound, ResetFeed, UpdateOutput, UpdateRound]


class FeedEventKind(str, Enum):
    ROUND_ADDED = "round_added"
    ROUND_REMOVED = "round_removed"
    FEED_RESET = "feed_reset"
    OUTPUT_UPDATED = "output_updated"
    ROUND_UPDATED = "round_updated"


@dataclass(frozen=True)
class FeedEvent:
    """Notification sent to subscribers after a command was applied."""

    kind: FeedEventKind
    round_id: str | None = None
    output_id: str | None = None


Listener = Callable[[FeedEvent], None]


class FeedStore:
    """Newest-first list of Rounds with id-addressed, serialized mutation."""

    def __init__(self) -> None:
        self._rounds: list[Round] = []
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def rounds(self) -> tuple[Round, ...]:
        """Snapshot of the feed, newest first."""
        with self._lock:
            return tuple(self._rounds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rounds)

    def __iter__(self) -> Iterator[Round]:
        return iter(self.rounds)

    def get_round(self, round_id: str) -> Round | None:
        with self._lock:
            return self._find_round(round_id)

    def get_output(self, round_id: str, output_id: str) -> Output | None:
        with self._lock:
            return self._find_output(round_id, output_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> bool:
        """
        Apply one command atomically.

        Returns:
            True if the command changed the feed, False on a lookup miss
        """
        with self._lock:
            event = self._apply(command)

        if event is None:
            return False
        self._notify(event)
        return True

    def prepend(self, round_: Round) -> None:
        self.dispatch(PrependRound(round_))

    def remove(self, round_id: str) -> bool:
        return self.dispatch(RemoveRound(round_id))

    def reset(self) -> None:
        self.dispatch(ResetFeed())

    def update_output(self, round_id: str, output_id: str, mutate: Callable[[Output], None]) -> bool:
        return self.dispatch(UpdateOutput(round_id, output_id, mutate))

    def update_round(self, round_id: str, mutate: Callable[[Round], None]) -> bool:
        return self.dispatch(UpdateRound(round_id, mutate))

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_round(self, round_id: str) -> Round | None:
        if not is_valid(round_id, Prefix.ROUND):
            return None
        for round_ in self._rounds:
            if round_.id == round_id:
                return round_
        return None

    def _find_output(self, round_id: str, output_id: str) -> Output | None:
        if not is_valid(output_id, Prefix.OUTPUT):
            return None
        round_ = self._find_round(round_id)
        return round_.find_output(output_id) if round_ else None

    def _apply(self, command: Command) -> FeedEvent | None:
        if isinstance(command, PrependRound):
            self._rounds.insert(0, command.round)
            return FeedEvent(FeedEventKind.ROUND_ADDED, round_id=command.round.id)

        if isinstance(command, RemoveRound):
            before = len(self._rounds)
            self._rounds = [r for r in self._rounds if r.id != command.round_id]
            if len(self._rounds) == before:
                return None
            return FeedEvent(FeedEventKind.ROUND_REMOVED, round_id=command.round_id)

        if isinstance(command, ResetFeed):
            self._rounds = []
            return FeedEvent(FeedEventKind.FEED_RESET)

        if isinstance(command, UpdateOutput):
            output = self._find_output(command.round_id, command.output_id)
            if output is None:
                logger.debug("output_missing", round_id=command.round_id, output_id=command.output_id)
                return None
            command.mutate(output)
            return FeedEvent(
                FeedEventKind.OUTPUT_UPDATED, round_id=command.round_id, output_id=command.output_id
            )

        if isinstance(command, UpdateRound):
            round_ = self._find_round(command.round_id)
            if round_ is None:
                logger.debug("round_missing", round_id=command.round_id)
                return None
            command.mutate(round_)
            return FeedEvent(FeedEventKind.ROUND_UPDATED, round_id=command.round_id)

        raise TypeError(f"Unknown command: {command!r}")

    def _notify(self, event: FeedEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error("listener_failed", kind=event.kind.value, error=str(e), exc_info=True)
