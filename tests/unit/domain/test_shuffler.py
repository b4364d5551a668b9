import random
from collections import Counter

from src.trivia.domain.shuffler import shuffle


class TestShuffle:
    def test_returns_same_object(self):
        items = [1, 2, 3]
        assert shuffle(items) is items

    def test_result_is_a_permutation(self):
        rng = random.Random(7)
        for size in range(0, 9):
            items = list(range(size)) + [0, 0]
            original = Counter(items)
            shuffle(items, rng)
            assert Counter(items) == original

    def test_empty_and_single_element_untouched(self):
        empty: list[int] = []
        single = ["only"]
        assert shuffle(empty) == []
        assert shuffle(single) == ["only"]

    def test_seeded_source_is_deterministic(self):
        first = shuffle(list("abcdef"), random.Random(99))
        second = shuffle(list("abcdef"), random.Random(99))
        assert first == second

    def test_uses_injected_source_from_last_index_down(self):
        class RecordingRandom(random.Random):
            def __init__(self):
                super().__init__(0)
                self.bounds = []

            def randrange(self, stop, *args, **kwargs):
                self.bounds.append(stop)
                return stop - 1  # always swap with itself

        rng = RecordingRandom()
        items = ["a", "b", "c", "d"]
        shuffle(items, rng)

        assert rng.bounds == [4, 3, 2]
        assert items == ["a", "b", "c", "d"]

    def test_each_position_is_uniform(self):
        rng = random.Random(1234)
        trials = 40_000
        counts = [Counter() for _ in range(4)]

        for _ in range(trials):
            items = ["A", "B", "C", "D"]
            shuffle(items, rng)
            for position, value in enumerate(items):
                counts[position][value] += 1

        for position_counts in counts:
            for value in "ABCD":
                share = position_counts[value] / trials
                assert abs(share - 0.25) < 0.02, f"{value}: {share:.3f}"
