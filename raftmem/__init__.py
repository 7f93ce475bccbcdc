"""In-memory storage for a Raft log, hard state, configuration and snapshots."""

__version__ = "0.1.0"
__all__ = ["core", "memstorage", "messages", "state", "util"]