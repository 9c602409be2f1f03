"""Tests for the random sources used by the collapse engine."""

import pytest

from py_wfc.core.alea_prng import AleaPRNG
from py_wfc.utils.random import NumpyRandomSource, get_prng, set_random_seed


class TestAleaPRNG:
    """Test the Alea generator."""

    def test_same_seed_same_sequence(self):
        """Test that equal seeds reproduce the same stream."""
        a = AleaPRNG("terrain")
        b = AleaPRNG("terrain")
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_different_seeds_differ(self):
        """Test that different seeds give different streams."""
        a = AleaPRNG("seed1")
        b = AleaPRNG("seed2")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_numeric_and_iterable_seeds(self):
        """Test that numbers and iterables are accepted as seeds."""
        assert AleaPRNG(123).random() == AleaPRNG("123").random()
        assert AleaPRNG(["a", "b"]).random() != AleaPRNG("a").random()

    def test_range_and_call_count(self):
        """Test that values stay in [0, 1) and every draw is counted."""
        prng = AleaPRNG("range")
        values = [prng.random() for _ in range(1000)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert prng.call_count == 1000

    def test_choice(self):
        """Test uniform choice."""
        prng = AleaPRNG("choice")
        seq = ["a", "b", "c"]
        picks = {prng.choice(seq) for _ in range(200)}
        assert picks == set(seq)

        with pytest.raises(IndexError):
            prng.choice([])

    def test_weighted_choice_respects_zero_weights(self):
        """Test that zero-weighted items are never drawn."""
        prng = AleaPRNG("weights")
        for _ in range(200):
            assert prng.weighted_choice(["a", "b", "c"], [0.0, 2.5, 0.0]) == "b"

    def test_weighted_choice_favours_heavy_items(self):
        """Test that draws follow the weights roughly."""
        prng = AleaPRNG("heavy")
        draws = [prng.weighted_choice(["rare", "common"], [1.0, 9.0]) for _ in range(2000)]
        assert draws.count("common") > draws.count("rare") * 4

    def test_weighted_choice_all_zero_falls_back_to_uniform(self):
        """Test that an all-zero weight list still yields an element."""
        prng = AleaPRNG("zero")
        picks = {prng.weighted_choice(["a", "b"], [0.0, 0.0]) for _ in range(100)}
        assert picks == {"a", "b"}

    def test_weighted_choice_validation(self):
        """Test weighted choice argument checks."""
        prng = AleaPRNG("bad")
        with pytest.raises(IndexError):
            prng.weighted_choice([], [])
        with pytest.raises(ValueError):
            prng.weighted_choice(["a", "b"], [1.0])

    def test_shuffle(self):
        """Test that shuffling permutes in place and is reproducible."""
        items_a = list(range(20))
        items_b = list(range(20))
        AleaPRNG("shuffle").shuffle(items_a)
        AleaPRNG("shuffle").shuffle(items_b)

        assert sorted(items_a) == list(range(20))
        assert items_a == items_b
        assert items_a != list(range(20))


class TestNumpyRandomSource:
    """Test the NumPy-backed random source."""

    def test_reproducible(self):
        """Test that equal seeds reproduce the same draws."""
        a = NumpyRandomSource(7)
        b = NumpyRandomSource(7)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_capabilities(self):
        """Test choice, weighted choice and shuffle."""
        rng = NumpyRandomSource(1)
        assert rng.choice(["x", "y"]) in ("x", "y")
        assert rng.weighted_choice(["x", "y"], [0.0, 1.0]) == "y"
        assert rng.weighted_choice(["x", "y"], [0.0, 0.0]) in ("x", "y")

        items = list(range(10))
        rng.shuffle(items)
        assert sorted(items) == list(range(10))

        with pytest.raises(IndexError):
            rng.choice([])


class TestGlobalPRNG:
    """Test the process-wide PRNG helpers."""

    def test_set_random_seed(self):
        """Test that reseeding restarts the global stream."""
        set_random_seed("global")
        first = get_prng().random()
        set_random_seed("global")
        assert get_prng().random() == first
        assert first == AleaPRNG("global").random()
