import pytest

from raftmem.messages import (
    ConfChange,
    ConfChangeType,
    ConfState,
    Entry,
    EntryType,
    HardState,
    Message,
    Snapshot,
    SnapshotMetadata,
)


def test_default_entry_encodes_to_nothing():
    assert Entry().encoded_len() == 0


def test_entry_with_hundred_byte_payload():
    entry = Entry(data=b"*" * 100)
    assert entry.encoded_len() == 102


def test_encoded_len_grows_with_payload():
    small = Entry(term=3, index=3, data=b"a")
    large = Entry(term=3, index=3, data=b"a" * 500)
    assert large.encoded_len() > small.encoded_len()
    assert large.encoded_len() - small.encoded_len() >= 499


def test_encoded_len_grows_with_large_numbers():
    assert Entry(term=1).encoded_len() < Entry(term=2**40).encoded_len()
    assert Entry(index=5).encoded_len() == Entry(term=5).encoded_len()


def test_encoded_len_counts_entry_type_and_flags():
    plain = Entry(term=1, index=1)
    conf = Entry(entry_type=EntryType.ENTRY_CONF_CHANGE, term=1, index=1)
    synced = Entry(term=1, index=1, sync_log=True)
    assert conf.encoded_len() > plain.encoded_len()
    assert synced.encoded_len() > plain.encoded_len()


def test_entries_compare_by_value():
    assert Entry(term=4, index=4) == Entry(index=4, term=4)
    assert Entry(term=4, index=4) != Entry(term=4, index=5)


def test_conf_state_from_members():
    cs = ConfState.from_members([1, 2, 3], iter([4]))
    assert cs.nodes == [1, 2, 3]
    assert cs.learners == [4]
    assert cs.voters == [1, 2, 3]


def test_conf_state_defaults_are_independent():
    first = ConfState()
    second = ConfState()
    first.nodes.append(7)
    assert second.nodes == []
    assert ConfState() == ConfState.from_members([], [])


def test_begin_membership_change():
    state = ConfState.from_members([1, 2], [3])
    change = ConfChange.begin_membership_change(9, state)
    assert change.change_type is ConfChangeType.BEGIN_MEMBERSHIP_CHANGE
    assert change.configuration == state
    assert change.start_index == 9


def test_snapshot_defaults():
    snap = Snapshot()
    assert snap.metadata == SnapshotMetadata()
    assert snap.metadata.pending_membership_change is None
    assert snap.metadata.conf_state == ConfState()


def test_snapshot_equality_depends_on_metadata():
    a = Snapshot(metadata=SnapshotMetadata(index=4, term=4, conf_state=ConfState([1, 2, 3])))
    b = Snapshot(metadata=SnapshotMetadata(index=4, term=4, conf_state=ConfState([1, 2, 3])))
    c = Snapshot(metadata=SnapshotMetadata(index=5, term=4, conf_state=ConfState([1, 2, 3])))
    assert a == b
    assert a != c


def test_hard_state_fields():
    hs = HardState(term=2, vote=1, commit=3)
    assert (hs.term, hs.vote, hs.commit) == (2, 1, 3)
    assert HardState() == HardState(0, 0, 0)


def test_message_entries_are_independent():
    m1 = Message()
    m2 = Message()
    m1.entries.append(Entry(index=1))
    assert m2.entries == []


@pytest.mark.parametrize("member", list(ConfChangeType))
def test_conf_change_type_round_trips_through_int(member):
    assert ConfChangeType(int(member)) is member