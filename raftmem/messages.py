"""Message types exchanged between Raft peers and kept in storage."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional


class EntryType(enum.IntEnum):
    """Kind of a log entry."""

    ENTRY_NORMAL = 0
    ENTRY_CONF_CHANGE = 1


class ConfChangeType(enum.IntEnum):
    """Kind of a configuration change."""

    ADD_NODE = 0
    REMOVE_NODE = 1
    ADD_LEARNER_NODE = 2
    BEGIN_MEMBERSHIP_CHANGE = 3
    FINALIZE_MEMBERSHIP_CHANGE = 4


def _varint_len(value: int) -> int:
    """Number of bytes a non-negative integer takes as a protobuf varint."""
    if value < 0:
        raise ValueError("varint values must be non-negative")
    return max(1, (value.bit_length() + 6) // 7)


def _bytes_field_len(payload: bytes) -> int:
    return 1 + _varint_len(len(payload)) + len(payload)


@dataclass
class Entry:
    """A single log entry."""

    entry_type: EntryType = EntryType.ENTRY_NORMAL
    term: int = 0
    index: int = 0
    data: bytes = b""
    context: bytes = b""
    sync_log: bool = False

    def encoded_len(self) -> int:
        """Size in bytes of this entry in its protobuf wire encoding."""
        size = 0
        if self.entry_type:
            size += 1 + _varint_len(int(self.entry_type))
        if self.term:
            size += 1 + _varint_len(self.term)
        if self.index:
            size += 1 + _varint_len(self.index)
        if self.data:
            size += _bytes_field_len(self.data)
        if self.sync_log:
            size += 2
        if self.context:
            size += _bytes_field_len(self.context)
        return size


@dataclass
class HardState:
    """Persistent term, vote and commit index of a peer."""

    term: int = 0
    vote: int = 0
    commit: int = 0


@dataclass
class ConfState:
    """The voters (``nodes``) and learners of a cluster."""

    nodes: list[int] = field(default_factory=list)
    learners: list[int] = field(default_factory=list)

    @property
    def voters(self) -> list[int]:
        """The voting members; the same list as ``nodes``."""
        return self.nodes

    @classmethod
    def from_members(cls, voters: Iterable[int], learners: Iterable[int]) -> ConfState:
        """Build a configuration from iterables of voter and learner ids."""
        return cls(nodes=list(voters), learners=list(learners))


@dataclass
class ConfChange:
    """A requested change of cluster membership."""

    id: int = 0
    change_type: ConfChangeType = ConfChangeType.ADD_NODE
    node_id: int = 0
    context: bytes = b""
    configuration: Optional[ConfState] = None
    start_index: int = 0

    @classmethod
    def begin_membership_change(cls, start_index: int, state: ConfState) -> ConfChange:
        """A change that starts a joint-consensus transition to ``state``."""
        return cls(
            change_type=ConfChangeType.BEGIN_MEMBERSHIP_CHANGE,
            configuration=state,
            start_index=start_index,
        )


@dataclass
class SnapshotMetadata:
    """Index, term and configuration captured by a snapshot."""

    conf_state: ConfState = field(default_factory=ConfState)
    pending_membership_change: Optional[ConfState] = None
    pending_membership_change_index: int = 0
    index: int = 0
    term: int = 0


@dataclass
class Snapshot:
    """A snapshot of the state machine together with its metadata."""

    data: bytes = b""
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)


@dataclass
class Message:
    """A message sent between peers."""

    msg_type: int = 0
    to: int = 0
    from_: int = 0
    term: int = 0
    log_term: int = 0
    index: int = 0
    entries: list[Entry] = field(default_factory=list)
    commit: int = 0
    snapshot: Optional[Snapshot] = None
    reject: bool = False
    reject_hint: int = 0
    context: bytes = b""