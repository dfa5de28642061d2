import pytest

from core.rng import (
    EngineRandom,
    LcgRandom,
    UnseededRandom,
    XorShiftRandom,
    advice_random,
    planner_random,
    to_uint32,
)


def test_to_uint32_wraps_negative_and_truncates():
    assert to_uint32(-1) == 2 ** 32 - 1
    assert to_uint32(7.9) == 7
    assert to_uint32(2 ** 32 + 5) == 5


def test_lcg_first_step():
    rng = LcgRandom(1)
    value = rng.random()
    assert rng.state == 1015568748
    assert value == 1015568748 / 2 ** 32


def test_xorshift_first_step():
    rng = XorShiftRandom(1)
    assert rng.random() == 0.270369
    assert rng.state == 270369


def test_xorshift_zero_seed_uses_default_state():
    assert XorShiftRandom(0).state == XorShiftRandom.DEFAULT_STATE


def test_values_stay_in_unit_interval():
    for rng in (LcgRandom(42), XorShiftRandom(42), UnseededRandom()):
        for _ in range(500):
            value = rng.random()
            assert 0.0 <= value < 1.0


def test_shuffled_is_a_permutation_and_reproducible():
    pool = list(range(20))
    first = LcgRandom(9).shuffled(pool)
    second = LcgRandom(9).shuffled(pool)
    assert first == second
    assert sorted(first) == pool
    assert pool == list(range(20))


def test_choose_and_chance():
    rng = XorShiftRandom(3)
    assert rng.choose(["a", "b", "c"]) in {"a", "b", "c"}
    assert rng.chance(1.0) is True
    assert rng.chance(0.0) is False


def test_seed_zero_semantics_differ_between_engines():
    assert isinstance(advice_random(0), LcgRandom)
    assert isinstance(advice_random(None), UnseededRandom)
    assert isinstance(planner_random(0), UnseededRandom)
    assert isinstance(planner_random(None), UnseededRandom)
    assert isinstance(planner_random(17), XorShiftRandom)


def test_generator_without_random_cannot_be_built():
    class Incomplete(EngineRandom):
        pass

    with pytest.raises(TypeError):
        Incomplete()
