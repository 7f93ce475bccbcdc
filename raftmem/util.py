"""Helpers for working with log entries and messages."""

from __future__ import annotations

from typing import Optional, Sequence, TypeVar

from raftmem.messages import Entry, Message

NO_LIMIT = 2**64 - 1
"""A size limit meaning that there is no limit."""

T = TypeVar("T")


def limit_size(entries: Sequence[T], max_size: Optional[int]) -> list[T]:
    """Return the longest prefix of ``entries`` whose encoded size fits ``max_size``.

    The first entry is always kept, so the result is never empty when
    ``entries`` is not. ``None`` or ``NO_LIMIT`` keeps everything.
    """
    entries = list(entries)
    if len(entries) <= 1 or max_size is None or max_size == NO_LIMIT:
        return entries

    size = entries[0].encoded_len()
    kept = 1
    for entry in entries[1:]:
        size += entry.encoded_len()
        if size > max_size:
            break
        kept += 1
    return entries[:kept]


def is_continuous_ents(msg: Message, ents: Sequence[Entry]) -> bool:
    """Whether ``ents`` start right after the last entry carried by ``msg``."""
    if msg.entries and ents:
        return msg.entries[-1].index + 1 == ents[0].index
    return True