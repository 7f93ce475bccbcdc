"""Raft persistent state and the storage interface."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Optional

from raftmem.messages import ConfState, Entry, HardState, Snapshot


class StorageError(Exception):
    """Base class for errors reported by a storage."""


class CompactedError(StorageError):
    """The requested index has been compacted away."""

    def __init__(self, message: str = "log compacted") -> None:
        super().__init__(message)


class UnavailableError(StorageError):
    """The requested index is beyond what the storage holds."""

    def __init__(self, message: str = "log unavailable") -> None:
        super().__init__(message)


class SnapshotOutOfDateError(StorageError):
    """The snapshot is older than what the storage already holds."""

    def __init__(self, message: str = "snapshot out of date") -> None:
        super().__init__(message)


@dataclass
class RaftState:
    """Hard state and configuration state of a peer.

    While a membership change is in progress, ``pending_conf_state`` holds
    the target configuration and ``pending_conf_state_start_index`` the
    index of the entry that began it.
    """

    hard_state: HardState = field(default_factory=HardState)
    conf_state: ConfState = field(default_factory=ConfState)
    pending_conf_state: Optional[ConfState] = None
    pending_conf_state_start_index: Optional[int] = None

    def initialized(self) -> bool:
        """Whether a configuration has been set."""
        return self.conf_state != ConfState()


class Storage(abc.ABC):
    """Access to a peer's persisted log, state and snapshot.

    Any error raised by a storage leaves the peer unable to take part in
    elections; recovery is up to the application.
    """

    @abc.abstractmethod
    def initial_state(self) -> RaftState:
        """The hard state and configuration the peer starts from."""

    @abc.abstractmethod
    def entries(self, low: int, high: int, max_size: Optional[int] = None) -> list[Entry]:
        """Entries in ``[low, high)``, limited in total size by ``max_size``.

        At least one entry is returned when the range holds any.
        """

    @abc.abstractmethod
    def term(self, idx: int) -> int:
        """Term of the entry at ``idx``, from ``first_index() - 1`` to ``last_index()``."""

    @abc.abstractmethod
    def first_index(self) -> int:
        """Index of the first available entry: the truncated index plus one."""

    @abc.abstractmethod
    def last_index(self) -> int:
        """Index of the last entry held."""

    @abc.abstractmethod
    def snapshot(self) -> Snapshot:
        """The most recent snapshot."""