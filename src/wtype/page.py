import random
from typing import List, Sequence

from .models import PageEntry, PageId, Word


def generate_page(
    pool: Sequence[Word], size: int, rng: random.Random
) -> List[PageEntry]:
    """Samples ``size`` words with replacement; each slot gets its own id."""
    if not pool:
        return []
    return [
        PageEntry(word=word, page_id=PageId(word.id, slot))
        for slot, word in enumerate(rng.choice(pool) for _ in range(size))
    ]


def page_char_count(entries: Sequence[PageEntry]) -> int:
    return sum(len(entry.word.pron) for entry in entries)
