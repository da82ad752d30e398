"""
Feed records: Rounds and the Outputs they fan out to.

A Round's outputs are fixed at creation. Only an Output's content fields
change afterwards, through exactly one terminal transition.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from uiforge.core.errors import ErrorDetails, OutputStateError
from uiforge.core.id import OutputID, RoundID, new_output_id, new_round_id

from .modes import OutputMode


@dataclass(frozen=True)
class GroundingChunk:
    """Citation returned when the backend used retrieval."""

    uri: str
    title: str | None = None


@dataclass
class Output:
    """One model's generation attempt within a Round."""

    model: str
    output_mode: OutputMode
    is_batch: bool = False
    id: OutputID = field(default_factory=new_output_id)
    start_time: float = field(default_factory=time.time)
    total_time: float | None = None
    is_busy: bool = True
    output_data: str | None = None
    got_error: bool = False
    error_details: ErrorDetails | None = None
    grounding_chunks: list[GroundingChunk] | None = None

    # UI-local
    rating: int = 0
    is_favorite: bool = False
    comments: str = ""

    @property
    def is_pending(self) -> bool:
        return self.is_busy

    def succeed(
        self,
        text: str,
        grounding_chunks: list[GroundingChunk] | None = None,
        now: float | None = None,
    ) -> None:
        """Terminal transition: pending -> succeeded."""
        self._ensure_pending()
        self.output_data = text
        self.grounding_chunks = grounding_chunks
        self.is_busy = False
        self.total_time = (now if now is not None else time.time()) - self.start_time

    def fail(self, message: str, details: ErrorDetails, now: float | None = None) -> None:
        """Terminal transition: pending -> failed."""
        self._ensure_pending()
        self.output_data = message
        self.error_details = details
        self.got_error = True
        self.is_busy = False
        self.total_time = (now if now is not None else time.time()) - self.start_time

    def _ensure_pending(self) -> None:
        if not self.is_busy:
            raise OutputStateError(f"Output {self.id} already settled")


@dataclass
class Round:
    """One user submission and every output produced from it."""

    prompt: str
    system_instruction: str
    output_mode: OutputMode
    outputs: tuple[Output, ...]
    id: RoundID = field(default_factory=new_round_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.outputs = tuple(self.outputs)

    def find_output(self, output_id: str) -> Output | None:
        for output in self.outputs:
            if output.id == output_id:
                return output
        return None

    @property
    def is_settled(self) -> bool:
        return all(not output.is_busy for output in self.outputs)
