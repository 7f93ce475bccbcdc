# raftmem

An in-memory storage backend for a Raft log. It keeps the log entries, the
hard state (term, vote, commit index), the cluster configuration and the
metadata of the last applied snapshot. It answers the questions a Raft
state machine asks of its storage.

It is meant for tests and for prototyping a storage layer of your own. The
`Storage` base class in `raftmem.state` describes what a backend must
provide. `MemStorage` in `raftmem.memstorage` is a thread-safe
implementation that keeps everything in memory.

## Modules

- `raftmem.messages`: the data types:
  - `Entry`, with `encoded_len()`, its size in the protobuf wire encoding;
  - `HardState`;
  - `ConfState`, with `from_members(voters, learners)` and a `voters` property;
  - `ConfChange`, with `begin_membership_change(start_index, state)`;
  - `SnapshotMetadata`, `Snapshot` and `Message`;
  - the enums `EntryType` and `ConfChangeType`.
- `raftmem.util`: `limit_size`, `is_continuous_ents` and the constant `NO_LIMIT`.
- `raftmem.state`: `RaftState`, the abstract `Storage`, and the error classes.
- `raftmem.core`: `MemStorageCore`, the mutable state behind a `MemStorage`.
  It has these methods:
  - `append`, `compact`, `commit_to`;
  - `set_hardstate`, `set_conf_state`;
  - `apply_snapshot`, `snapshot`;
  - `commit_to_and_set_conf_states`.
- `raftmem.memstorage`: `MemStorage`.

## Installation

```
pip install raftmem
```

## Usage

```python
from raftmem.memstorage import MemStorage
from raftmem.messages import ConfState, Entry
from raftmem.state import CompactedError

# A storage initialised with voters 1, 2, 3 starts at index 1, term 1.
storage = MemStorage.with_conf_state(ConfState.from_members([1, 2, 3], []))
# A (voters, learners) pair works too:
other = MemStorage.with_conf_state(([1, 2, 3], [4]))

with storage.write() as core:
    core.append([Entry(index=2, term=1), Entry(index=3, term=1)])

storage.first_index()   # 2
storage.last_index()    # 3
storage.term(3)         # 1
storage.entries(2, 4, None)

with storage.write() as core:
    core.commit_to(3)
    core.compact(3)

try:
    storage.entries(2, 4, None)
except CompactedError:
    pass

snap = storage.snapshot()
snap.metadata.index     # 3
```

`read()` and `write()` are context managers that hold the storage's lock
and yield its `MemStorageCore`.

The storage's own query methods return copies. The query methods are
`initial_state`, `entries`, `term`, `first_index`, `last_index` and
`snapshot`.

### Errors

Storage failures are raised as subclasses of `StorageError`:

- `CompactedError`: the requested index has been compacted away.
- `UnavailableError`: the requested entry is not in the log yet.
- `SnapshotOutOfDateError`: a snapshot older than the log was applied.

Misuse is a programming error and raises `ValueError`. Misuse covers these
cases:

- appending with a gap, or over compacted entries;
- compacting or reading past the last index;
- committing to an index the log does not hold;
- initialising an already initialised storage.

### Size limits

`raftmem.util.limit_size(entries, max_size)` returns the longest prefix of
`entries` whose total encoded size fits `max_size`. It always keeps at least
one entry. `None` or `NO_LIMIT` keeps them all. `MemStorage.entries`
applies it to the entries it returns.

## What it does not do

- It holds no Raft state machine. There is no election, replication or
  message handling here, only the storage such a state machine reads from.
- Nothing is written to disk.
- Snapshots made by `snapshot()` carry metadata only, with no application data.

## Running the tests

```
pip install -e ".[test]"
pytest
```