"""
🧪 Randomization tests
"""

import pytest

from genetic import RandomizationProvider, get_randomization, seed, set_randomization


class TestRandomizationProvider:
    """Shared random source"""

    def test_same_seed_same_draws(self):
        first = RandomizationProvider(7)
        second = RandomizationProvider(7)

        assert first.get_ints(10, 0, 100) == second.get_ints(10, 0, 100)
        assert first.get_float() == second.get_float()

    def test_get_int_upper_bound_is_exclusive(self):
        provider = RandomizationProvider(1)
        values = provider.get_ints(200, 0, 3)
        assert set(values) <= {0, 1, 2}

    def test_unique_ints_are_distinct(self):
        provider = RandomizationProvider(3)
        values = provider.get_unique_ints(5, 0, 5)
        assert sorted(values) == [0, 1, 2, 3, 4]

    def test_unique_ints_need_a_large_enough_interval(self):
        with pytest.raises(ValueError):
            RandomizationProvider().get_unique_ints(4, 0, 3)

    def test_choice_of_empty_sequence_raises(self):
        with pytest.raises(ValueError):
            RandomizationProvider().choice([])

    def test_shuffle_keeps_items(self):
        items = list(range(10))
        RandomizationProvider(5).shuffle(items)
        assert sorted(items) == list(range(10))

    def test_module_seed_reseeds_current_provider(self):
        seed(11)
        first = get_randomization().get_ints(5, 0, 1000)
        seed(11)
        assert get_randomization().get_ints(5, 0, 1000) == first

    def test_set_randomization_replaces_provider(self):
        previous = get_randomization()
        custom = RandomizationProvider(0)
        try:
            set_randomization(custom)
            assert get_randomization() is custom
        finally:
            set_randomization(previous)
