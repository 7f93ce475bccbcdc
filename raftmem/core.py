"""The mutable state held behind an in-memory storage."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterable, Optional

from raftmem.messages import (
    ConfChange,
    ConfState,
    Entry,
    HardState,
    Snapshot,
    SnapshotMetadata,
)
from raftmem.state import RaftState, SnapshotOutOfDateError


@dataclass
class MemStorageCore:
    """Raft state, log entries and last snapshot metadata of an in-memory storage.

    ``entries[i]`` sits at log position ``i + entries[0].index``; the entries
    before them were compacted or covered by the last applied snapshot.
    """

    raft_state: RaftState = field(default_factory=RaftState)
    entries: list[Entry] = field(default_factory=list)
    snapshot_metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)

    @property
    def hard_state(self) -> HardState:
        """The current hard state."""
        return self.raft_state.hard_state

    def set_hardstate(self, hs: HardState) -> None:
        """Replace the current hard state."""
        self.raft_state.hard_state = hs

    def _has_entry_at(self, index: int) -> bool:
        return bool(self.entries) and self.first_index() <= index <= self.last_index()

    def commit_to(self, index: int) -> None:
        """Commit up to ``index``, taking the term from the entry there.

        Raises ``ValueError`` if the log holds no entry at ``index``.
        """
        if not self._has_entry_at(index):
            raise ValueError(f"commit_to {index} but the entry does not exist")
        entry = self.entries[index - self.entries[0].index]
        self.raft_state.hard_state.commit = index
        self.raft_state.hard_state.term = entry.term

    def set_conf_state(
        self,
        cs: ConfState,
        pending_membership_change: Optional[tuple[ConfState, int]] = None,
    ) -> None:
        """Set the configuration and, if given, the pending membership change."""
        self.raft_state.conf_state = cs
        if pending_membership_change is not None:
            pending, start_index = pending_membership_change
            self.raft_state.pending_conf_state = pending
            self.raft_state.pending_conf_state_start_index = start_index

    def first_index(self) -> int:
        """Index of the first entry held, or one past the snapshot index."""
        if self.entries:
            return self.entries[0].index
        return self.snapshot_metadata.index + 1

    def last_index(self) -> int:
        """Index of the last entry held, or the snapshot index."""
        if self.entries:
            return self.entries[-1].index
        return self.snapshot_metadata.index

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """Overwrite the stored state with that of ``snapshot``.

        Raises ``SnapshotOutOfDateError`` if the snapshot is older than the
        first index held.
        """
        meta = copy.deepcopy(snapshot.metadata)
        if self.first_index() > meta.index:
            raise SnapshotOutOfDateError()

        self.snapshot_metadata = copy.deepcopy(meta)
        self.raft_state.hard_state.term = meta.term
        self.raft_state.hard_state.commit = meta.index
        self.entries.clear()

        self.raft_state.conf_state = meta.conf_state
        if meta.pending_membership_change_index > 0:
            self.raft_state.pending_conf_state = (
                meta.pending_membership_change or ConfState()
            )
            self.raft_state.pending_conf_state_start_index = (
                meta.pending_membership_change_index
            )

    def snapshot(self) -> Snapshot:
        """A snapshot at the committed index, carrying no application data."""
        state = self.raft_state
        metadata = SnapshotMetadata(
            conf_state=copy.deepcopy(state.conf_state),
            index=state.hard_state.commit,
            term=state.hard_state.term,
        )
        if state.pending_conf_state is not None:
            if state.pending_conf_state_start_index is None:
                raise ValueError("pending configuration without a start index")
            metadata.pending_membership_change = copy.deepcopy(state.pending_conf_state)
            metadata.pending_membership_change_index = state.pending_conf_state_start_index
        return Snapshot(metadata=metadata)

    def compact(self, compact_index: int) -> None:
        """Discard all entries before ``compact_index``.

        Raises ``ValueError`` if ``compact_index`` is beyond ``last_index() + 1``.
        """
        if compact_index <= self.first_index():
            return
        if compact_index > self.last_index() + 1:
            raise ValueError(
                f"compact not received raft logs: {compact_index}, "
                f"last index: {self.last_index()}"
            )
        if self.entries:
            del self.entries[: compact_index - self.entries[0].index]

    def append(self, ents: Iterable[Entry]) -> None:
        """Append entries, replacing any held entries they overlap.

        Raises ``ValueError`` if ``ents`` reach into compacted entries or
        leave a gap after the last entry held.
        """
        ents = list(ents)
        if not ents:
            return
        start = ents[0].index
        if self.first_index() > start:
            raise ValueError(
                f"overwrite compacted raft logs, compacted: {self.first_index() - 1}, "
                f"append: {start}"
            )
        if self.last_index() + 1 < start:
            raise ValueError(
                f"raft logs should be continuous, last index: {self.last_index()}, "
                f"new appended: {start}"
            )
        del self.entries[start - self.first_index():]
        self.entries.extend(copy.deepcopy(entry) for entry in ents)

    def commit_to_and_set_conf_states(
        self,
        idx: int,
        cs: Optional[ConfState] = None,
        pending_membership_change: Optional[ConfChange] = None,
    ) -> None:
        """Commit to ``idx`` and set the given configuration states."""
        self.commit_to(idx)
        if cs is not None:
            self.raft_state.conf_state = cs
        if pending_membership_change is not None:
            self.raft_state.pending_conf_state = (
                pending_membership_change.configuration or ConfState()
            )
            self.raft_state.pending_conf_state_start_index = (
                pending_membership_change.start_index
            )