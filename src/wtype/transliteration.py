"""
Romaji to kana conversion and the confirmed/pending split of a typing buffer.

Japanese words are typed as romaji and resolve into kana as syllables complete,
the same way an IME behaves: ``nek`` reads as ``ね`` confirmed with ``k`` still
pending. Other languages are typed directly and never have a pending part.
"""

from typing import Tuple

import wanakana

from .config import is_transliterated


def to_kana(raw: str) -> str:
    """Converts romaji to kana, leaving a syllable still being typed as it is."""
    if not raw:
        return ""
    return wanakana.to_kana(raw, convert_ending=False)


def split_resolved(converted: str) -> Tuple[str, str]:
    split = len(converted)
    for i, ch in enumerate(converted):
        if not wanakana.is_kana(ch):
            split = i
            break
    return converted[:split], converted[split:]


def normalize(raw: str, language: str) -> Tuple[str, str]:
    """Splits a raw buffer into its (confirmed, pending) segments."""
    if not is_transliterated(language):
        return raw, ""
    return split_resolved(to_kana(raw))
