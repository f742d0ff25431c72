from enum import Enum
from typing import Any, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Vocabulary ---
class GrammaticalTag(str, Enum):
    """Per-word grammatical class. Only some languages carry one."""

    NONE = ""
    CLASS_A = "0"
    CLASS_B = "1"
    CLASS_C = "2"

    @classmethod
    def parse(cls, value: Any) -> "GrammaticalTag":
        if isinstance(value, cls):
            return value
        text = "" if value is None else str(value).strip()
        # CSV readers hand back "1.0" for numeric columns with gaps
        if text.endswith(".0"):
            text = text[:-2]
        try:
            return cls(text)
        except ValueError:
            return cls.NONE


class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    display: str
    pron: str
    hint: str = ""
    gram: GrammaticalTag = GrammaticalTag.NONE

    @field_validator("gram", mode="before")
    @classmethod
    def _parse_gram(cls, value: Any) -> GrammaticalTag:
        return GrammaticalTag.parse(value)


# --- Pages ---
class PageId(NamedTuple):
    word_id: int
    slot: int


class PageEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: Word
    page_id: PageId


# --- Results ---
class Stats(BaseModel):
    wpm: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)


class Result(Stats):
    timestamp: int


# --- Display ---
class SessionPhase(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    RUNNING = "running"
    FINISHED = "finished"


class LetterStatus(str, Enum):
    UNTYPED = "untyped"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class Letter(BaseModel):
    char: str
    status: LetterStatus
    extra: bool = False
    caret: bool = False


class EntryView(BaseModel):
    page_id: PageId
    display: str
    hint: str
    gram: GrammaticalTag
    is_current: bool
    is_past: bool
    letters: List[Letter]


class SessionView(BaseModel):
    phase: SessionPhase
    language: Optional[str]
    level: Optional[int]
    current_index: int
    raw_input: str
    confirmed: str
    pending: str
    accuracy: int
    stats: Optional[Stats] = None
    entries: List[EntryView]
