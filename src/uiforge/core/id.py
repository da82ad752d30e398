"""Identifiers for feed records.

Rounds and outputs are addressed by prefixed ULIDs (``round_*``, ``out_*``).
ULIDs sort by creation time, so ids alone order the feed's history, and the
prefix keeps log lines readable.
"""

from typing import NewType
from ulid import ULID

RoundID = NewType("RoundID", str)
"""User submission identifier"""

OutputID = NewType("OutputID", str)
"""Single model output identifier"""


class Prefix:
    """ID prefix constants."""

    ROUND = "round"
    OUTPUT = "out"


def _prefixed(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_round_id() -> RoundID:
    return RoundID(_prefixed(Prefix.ROUND))


def new_output_id() -> OutputID:
    return OutputID(_prefixed(Prefix.OUTPUT))


def _parse(id_str: str) -> ULID | None:
    """Parse the ULID part of an optionally prefixed id."""
    _, _, body = id_str.rpartition("_")
    if len(body) != 26:
        return None
    try:
        return ULID.from_str(body)
    except ValueError:
        return None


def extract_prefix(id_str: str) -> str | None:
    """Extract prefix from prefixed ID."""
    prefix, sep, _ = id_str.partition("_")
    return prefix if sep and prefix else None


def is_valid(id_str: str, prefix: str | None = None) -> bool:
    """
    Check if string is a valid ULID id.

    With ``prefix`` the id must also carry that type prefix.
    """
    if prefix is not None and extract_prefix(id_str) != prefix:
        return False
    return _parse(id_str) is not None
