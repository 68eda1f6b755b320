import pytest

from keyforge.core.errors import EmptyInputError, RandomSourceError, RangeError
from keyforge.generators.random_source import RandomSource


def test_uniform_int_rejects_non_positive_bounds():
    rng = RandomSource()
    with pytest.raises(RangeError):
        rng.uniform_int(0)
    with pytest.raises(RangeError):
        rng.uniform_int(-3)
    with pytest.raises(ValueError):
        rng.uniform_int(0)
    with pytest.raises(RandomSourceError):
        rng.uniform_int(True)


def test_uniform_int_stays_in_range():
    rng = RandomSource()
    for n in range(1, 8):
        draws = {rng.uniform_int(n) for _ in range(300)}
        assert draws <= set(range(n))
    assert rng.uniform_int(1) == 0


def test_uniform_int_reaches_every_value():
    rng = RandomSource()
    seen = {rng.uniform_int(4) for _ in range(500)}
    assert seen == {0, 1, 2, 3}


def test_choose_empty_raises():
    rng = RandomSource()
    with pytest.raises(EmptyInputError):
        rng.choose("")
    with pytest.raises(IndexError):
        rng.choose([])


def test_choose_returns_member():
    rng = RandomSource()
    for _ in range(50):
        assert rng.choose("xyz") in "xyz"


def test_shuffle_is_a_permutation():
    rng = RandomSource()
    items = list(range(20))
    rng.shuffle(items)
    assert sorted(items) == list(range(20))


def test_shuffle_is_driven_by_csprng(monkeypatch):
    monkeypatch.setattr("secrets.randbelow", lambda n: 0)
    items = [1, 2, 3, 4]
    RandomSource().shuffle(items)
    assert items == [2, 3, 4, 1]


def test_sample_uses_distinct_indices():
    rng = RandomSource()
    seq = ["a", "a", "b"]
    assert sorted(rng.sample(seq, 3)) == ["a", "a", "b"]

    picked = rng.sample(list(range(10)), 10)
    assert sorted(picked) == list(range(10))


def test_sample_caps_at_sequence_length():
    rng = RandomSource()
    assert len(rng.sample("abc", 10)) == 3
    assert len(rng.sample("abcdef", 2)) == 2


def test_sample_rejects_bad_input():
    rng = RandomSource()
    with pytest.raises(EmptyInputError):
        rng.sample([], 1)
    with pytest.raises(RangeError):
        rng.sample([1, 2], 0)
