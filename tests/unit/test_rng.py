import random

import pytest

from rng import SeededRandom, hash_string_to_seed, make_seed


class TestHashStringToSeed:
    """Tests for the FNV-1a seed hash."""

    def test_empty_string_is_offset_basis(self):
        """Hashing nothing leaves the FNV offset basis."""
        assert hash_string_to_seed("") == 2166136261

    def test_known_value(self):
        """Single character matches the reference FNV-1a value."""
        # Reference FNV-1a 32-bit value for "a"
        assert hash_string_to_seed("a") == 0xE40C292C

    def test_result_fits_in_32_bits(self):
        """Long and non-ASCII inputs still hash into 32 bits."""
        for text in ["2025-01-01", "x" * 500, "ünïcødé"]:
            assert 0 <= hash_string_to_seed(text) <= 0xFFFFFFFF

    def test_different_dates_give_different_seeds(self):
        """Consecutive dates hash differently."""
        assert hash_string_to_seed("2025-01-01") != hash_string_to_seed("2025-01-02")


class TestMakeSeed:
    """Tests for building the seed string of a run."""

    def test_deterministic_returns_date(self):
        """Without randomize the date is the seed."""
        assert make_seed("2025-01-01", randomize=False) == "2025-01-01"

    def test_randomize_mixes_entropy(self):
        """Explicit entropy is appended after a '#'."""
        assert make_seed("2025-01-01", randomize=True, entropy=42) == "2025-01-01#42"

    def test_randomize_without_entropy_uses_clock(self):
        """Randomize without entropy falls back to the clock."""
        seed = make_seed("2025-01-01", randomize=True)
        assert seed.startswith("2025-01-01#")
        assert seed != "2025-01-01"


class TestSeededRandom:
    """Tests for the seeded random source and its helpers."""

    def test_same_seed_same_stream(self):
        """Two sources with the same seed draw the same values."""
        a = SeededRandom("2025-01-01")
        b = SeededRandom("2025-01-01")
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_stream_matches_stdlib_random_seeded_by_hash(self):
        """The stream is random.Random seeded with the FNV-1a hash."""
        rng = SeededRandom("2025-01-01")
        reference = random.Random(hash_string_to_seed("2025-01-01"))
        assert [rng.random() for _ in range(20)] == [reference.random() for _ in range(20)]

    def test_shuffle_matches_stdlib_shuffle(self):
        """shuffle() permutes exactly as random.shuffle on the same stream."""
        items = [f"P{i}" for i in range(10)]
        expected = list(items)
        random.Random(hash_string_to_seed("s")).shuffle(expected)
        assert SeededRandom("s").shuffle(items) == expected

    def test_different_seed_different_stream(self):
        """Different seeds give different draws."""
        a = SeededRandom("2025-01-01")
        b = SeededRandom("2025-01-02")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_values_in_unit_interval(self):
        """Uniform draws stay in [0, 1)."""
        rng = SeededRandom("range-check")
        for _ in range(2000):
            value = rng.random()
            assert 0.0 <= value < 1.0

    def test_roughly_uniform(self):
        """Draws are balanced around 0.5."""
        rng = SeededRandom("uniform")
        draws = [rng.random() for _ in range(10000)]
        mean = sum(draws) / len(draws)
        assert 0.45 < mean < 0.55
        low = sum(1 for d in draws if d < 0.5)
        assert 4500 < low < 5500

    def test_integer_seed(self):
        """Integer seeds are accepted and deterministic."""
        a = SeededRandom(12345)
        b = SeededRandom(12345)
        assert a.random() == b.random()

    def test_randrange_bounds(self):
        """randrange(n) covers 0..n-1 and nothing else."""
        rng = SeededRandom("randrange")
        values = {rng.randrange(5) for _ in range(500)}
        assert values == {0, 1, 2, 3, 4}

    def test_randrange_rejects_non_positive(self):
        """An empty range is an error."""
        with pytest.raises(ValueError):
            SeededRandom("x").randrange(0)

    def test_shuffle_is_permutation_and_copy(self):
        """shuffle() returns a new permutation and leaves the input alone."""
        rng = SeededRandom("shuffle")
        items = list(range(20))
        shuffled = rng.shuffle(items)
        assert sorted(shuffled) == items
        assert items == list(range(20))  # input untouched
        assert shuffled != items

    def test_shuffle_deterministic(self):
        """Same seed, same shuffle."""
        items = [f"P{i}" for i in range(10)]
        assert SeededRandom("s").shuffle(items) == SeededRandom("s").shuffle(items)

    def test_choice_empty_raises(self):
        """Choosing from nothing raises IndexError."""
        with pytest.raises(IndexError):
            SeededRandom("x").choice([])

    def test_weighted_choice_respects_zero_weight(self):
        """Zero-weight items are never picked."""
        rng = SeededRandom("weighted")
        picks = {rng.weighted_choice(["a", "b", "c"], [1.0, 0.0, 1.0]) for _ in range(200)}
        assert "b" not in picks
        assert picks == {"a", "c"}

    def test_weighted_choice_favors_heavier_item(self):
        """A 9:1 weight ratio shows up in the picks."""
        rng = SeededRandom("weighted-bias")
        picks = [rng.weighted_choice(["light", "heavy"], [1.0, 9.0]) for _ in range(1000)]
        assert picks.count("heavy") > 800

    def test_weighted_choice_zero_total_is_uniform(self):
        """All-zero weights fall back to a uniform choice."""
        rng = SeededRandom("zero-total")
        picks = {rng.weighted_choice(["a", "b"], [0.0, 0.0]) for _ in range(100)}
        assert picks == {"a", "b"}

    def test_weighted_choice_length_mismatch(self):
        """Items and weights must line up."""
        with pytest.raises(ValueError):
            SeededRandom("x").weighted_choice(["a"], [1.0, 2.0])

    def test_weighted_choice_negative_weight(self):
        """Negative weights are rejected."""
        with pytest.raises(ValueError):
            SeededRandom("x").weighted_choice(["a", "b"], [1.0, -1.0])

    def test_jitter_scale(self):
        """Jitter stays below its scale and is zero for a zero scale."""
        rng = SeededRandom("jitter")
        assert all(0.0 <= rng.jitter(0.5) < 0.5 for _ in range(100))
        assert rng.jitter(0.0) == 0.0
