"""Tests for page sampling."""

import random

from wtype.models import PageId, Word
from wtype.page import generate_page, page_char_count


def make_pool(size):
    return [Word(id=i, display=f"w{i}", pron="x" * i) for i in range(1, size + 1)]


class TestGeneratePage:
    def test_empty_pool_gives_empty_page(self):
        assert generate_page([], 14, random.Random(0)) == []

    def test_page_has_requested_size(self):
        for pool_size in (1, 3, 20):
            page = generate_page(make_pool(pool_size), 14, random.Random(pool_size))
            assert len(page) == 14

    def test_ids_unique_even_with_repeated_words(self):
        page = generate_page(make_pool(1), 14, random.Random(0))
        assert {entry.word.id for entry in page} == {1}
        assert len({entry.page_id for entry in page}) == 14

    def test_page_id_is_word_and_slot(self):
        page = generate_page(make_pool(5), 6, random.Random(3))
        for slot, entry in enumerate(page):
            assert entry.page_id == PageId(entry.word.id, slot)

    def test_same_seed_same_page(self):
        pool = make_pool(10)
        first = generate_page(pool, 14, random.Random(42))
        second = generate_page(pool, 14, random.Random(42))
        assert first == second

    def test_draws_only_from_pool(self):
        pool = make_pool(4)
        page = generate_page(pool, 50, random.Random(7))
        assert all(entry.word in pool for entry in page)


class TestPageCharCount:
    def test_sums_pronunciation_lengths(self):
        page = generate_page(make_pool(1), 3, random.Random(0))
        assert page_char_count(page) == 3
        assert page_char_count([]) == 0
