"""A thread-safe in-memory storage, mainly for tests."""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Union

from raftmem.core import MemStorageCore
from raftmem.messages import ConfState, Entry, Snapshot
from raftmem.state import CompactedError, RaftState, Storage, UnavailableError
from raftmem.util import limit_size

ConfStateLike = Union[ConfState, tuple[Iterable[int], Iterable[int]]]


def _to_conf_state(conf_state: ConfStateLike) -> ConfState:
    if isinstance(conf_state, ConfState):
        return copy.deepcopy(conf_state)
    voters, learners = conf_state
    return ConfState.from_members(voters, learners)


class MemStorage(Storage):
    """An in-memory storage that keeps raft logs but no applied data.

    Persist newly received entries with ``write()`` and ``append`` on the
    core, then read them back through the ``Storage`` methods. Snapshots
    produced by ``snapshot()`` carry metadata only.
    """

    def __init__(self) -> None:
        self._core = MemStorageCore()
        self._lock = threading.RLock()

    @classmethod
    def with_conf_state(cls, conf_state: ConfStateLike) -> MemStorage:
        """A new storage initialized with the given configuration.

        ``conf_state`` is a ``ConfState`` or a ``(voters, learners)`` pair.
        """
        store = cls()
        store.initialize_with_conf_state(conf_state)
        return store

    def initialize_with_conf_state(self, conf_state: ConfStateLike) -> None:
        """Initialize the storage with a configuration at index 1, term 1.

        The first index is then 2, so uninitialized followers catch up on
        the initial configuration through a snapshot. Raises ``ValueError``
        if the storage is already initialized.
        """
        state = _to_conf_state(conf_state)
        with self._lock:
            core = self._core
            if core.raft_state.initialized():
                raise ValueError("storage is already initialized")
            core.snapshot_metadata.index = 1
            core.snapshot_metadata.term = 1
            core.raft_state.hard_state.commit = 1
            core.raft_state.hard_state.term = 1
            core.raft_state.conf_state = state

    @contextmanager
    def read(self) -> Iterator[MemStorageCore]:
        """Hold the lock and yield the core for reading."""
        with self._lock:
            yield self._core

    @contextmanager
    def write(self) -> Iterator[MemStorageCore]:
        """Hold the lock and yield the core for mutation."""
        with self._lock:
            yield self._core

    def initial_state(self) -> RaftState:
        with self.read() as core:
            return copy.deepcopy(core.raft_state)

    def entries(self, low: int, high: int, max_size: Optional[int] = None) -> list[Entry]:
        """Entries in ``[low, high)``, limited in total size by ``max_size``.

        Raises ``CompactedError`` if ``low`` has been compacted and
        ``ValueError`` if ``high`` is beyond ``last_index() + 1``.
        """
        with self.read() as core:
            if low < core.first_index():
                raise CompactedError()
            if high > core.last_index() + 1:
                raise ValueError(
                    f"index out of bound (last: {core.last_index() + 1}, high: {high})"
                )
            if low > high:
                raise ValueError(f"invalid range: low {low} > high {high}")
            offset = core.first_index()
            selected = copy.deepcopy(core.entries[low - offset : high - offset])
        return limit_size(selected, max_size)

    def term(self, idx: int) -> int:
        """Term of the entry at ``idx``.

        Raises ``CompactedError`` below the first index and
        ``UnavailableError`` beyond the last one.
        """
        with self.read() as core:
            if idx == core.snapshot_metadata.index:
                return core.snapshot_metadata.term
            if idx < core.first_index():
                raise CompactedError()
            if not core.entries:
                raise UnavailableError()
            position = idx - core.entries[0].index
            if position >= len(core.entries):
                raise UnavailableError()
            return core.entries[position].term

    def first_index(self) -> int:
        with self.read() as core:
            return core.first_index()

    def last_index(self) -> int:
        with self.read() as core:
            return core.last_index()

    def snapshot(self) -> Snapshot:
        with self.read() as core:
            return core.snapshot()