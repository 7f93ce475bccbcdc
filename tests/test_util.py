import pytest

from raftmem.messages import Entry, Message
from raftmem.util import NO_LIMIT, is_continuous_ents, limit_size


def _template_entries(count):
    return [Entry(data=b"*" * 100) for _ in range(count)]


def test_documented_example():
    entries = _template_entries(5)
    assert len(entries) == 5
    entries = limit_size(entries, 220)
    assert len(entries) == 2
    entries = limit_size(entries, 0)
    assert len(entries) == 1


def test_no_limit_keeps_everything():
    entries = _template_entries(4)
    assert limit_size(entries, None) == entries
    assert limit_size(entries, NO_LIMIT) == entries


def test_single_and_empty_inputs_are_unchanged():
    assert limit_size([], 0) == []
    single = [Entry(term=1, index=1, data=b"x" * 50)]
    assert limit_size(single, 0) == single


def test_input_is_not_modified():
    entries = _template_entries(3)
    limit_size(entries, 0)
    assert len(entries) == 3


def _sized_entries():
    return [Entry(term=i, index=i, data=b"d" * (i * 10)) for i in range(3, 7)]


def test_exact_budget_includes_entry():
    ents = _sized_entries()
    budget = ents[0].encoded_len() + ents[1].encoded_len()
    assert limit_size(ents, budget) == ents[:2]
    assert limit_size(ents, budget - 1) == ents[:1]


def test_full_budget_returns_all():
    ents = _sized_entries()
    total = sum(e.encoded_len() for e in ents)
    assert limit_size(ents, total) == ents
    assert limit_size(ents, total - 1) == ents[:3]


@pytest.mark.parametrize("budget", [0, 10, 50, 100, 200, 400, 10_000])
def test_result_is_prefix_within_budget(budget):
    ents = _sized_entries()
    result = limit_size(ents, budget)
    assert result == ents[: len(result)]
    assert len(result) >= 1
    if len(result) > 1:
        assert sum(e.encoded_len() for e in result) <= budget


def test_continuous_when_next_index_follows():
    msg = Message(entries=[Entry(index=3), Entry(index=4)])
    assert is_continuous_ents(msg, [Entry(index=5)]) is True
    assert is_continuous_ents(msg, [Entry(index=6)]) is False
    assert is_continuous_ents(msg, [Entry(index=4)]) is False


def test_continuous_when_either_side_empty():
    assert is_continuous_ents(Message(), [Entry(index=9)]) is True
    assert is_continuous_ents(Message(entries=[Entry(index=1)]), []) is True