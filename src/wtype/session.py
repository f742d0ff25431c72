import logging
import random
import time
from typing import Callable, List, Optional, Protocol, Tuple

from . import metrics
from .config import settings
from .errors import FetchFailure
from .models import PageEntry, Result, SessionPhase, Stats, Word
from .page import generate_page, page_char_count
from .transliteration import normalize

logger = logging.getLogger(__name__)


class WordProvider(Protocol):
    async def fetch(self, language: str, level: int) -> List[Word]:
        ...


class ResultSink(Protocol):
    async def submit(self, result: Result) -> None:
        ...


class TypingSession:
    """
    State machine for one typing session.

    Input arrives as whole-buffer snapshots rather than key events; correctness
    is judged from what the buffer resolves to against the current word's
    pronunciation.
    """

    def __init__(
        self,
        provider: WordProvider,
        sink: Optional[ResultSink] = None,
        page_size: int = settings.PAGE_SIZE,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        skip_last_word: bool = settings.SKIP_LAST_WORD,
    ):
        self.provider = provider
        self.sink = sink
        self.page_size = page_size
        self.rng = rng or random.Random()
        self.clock = clock
        self.skip_last_word = skip_last_word

        self.language: Optional[str] = None
        self.level: Optional[int] = None
        self.pool: List[Word] = []
        self.page: List[PageEntry] = []
        self.current_index = 0
        self.raw_input = ""
        self.input_history: List[str] = []
        self.keystroke_total = 0
        self.keystroke_correct = 0
        self.past_char_count = 0
        self.start_time: Optional[float] = None
        self.finished = False
        self.stats: Optional[Stats] = None
        self._generation = 0

    # --- Derived state ---
    @property
    def phase(self) -> SessionPhase:
        if self.finished:
            return SessionPhase.FINISHED
        if not self.page:
            return SessionPhase.EMPTY
        if self.start_time is None:
            return SessionPhase.LOADED
        return SessionPhase.RUNNING

    @property
    def current_entry(self) -> Optional[PageEntry]:
        if not self.page:
            return None
        return self.page[self.current_index]

    @property
    def is_last_slot(self) -> bool:
        return self.current_index == len(self.page) - 1

    @property
    def live_accuracy(self) -> int:
        return metrics.accuracy(self.keystroke_correct, self.keystroke_total)

    def split_input(self) -> Tuple[str, str]:
        return normalize(self.raw_input, self.language or "")

    def effective_input(self) -> str:
        confirmed, _ = self.split_input()
        return confirmed

    # --- Loading ---
    async def load_page(self, language: str, level: int) -> bool:
        """Fetches a pool and starts over. Only the latest call takes effect."""
        self._generation += 1
        generation = self._generation
        try:
            pool = await self.provider.fetch(language, level)
        except FetchFailure as e:
            logger.warning(f"Keeping previous page: {e}")
            return False
        except Exception as e:
            logger.warning(
                f"Keeping previous page: word provider failed for {language}/{level}: {e}"
            )
            return False

        if generation != self._generation:
            logger.info(
                f"Discarding stale word list for {language}/{level} "
                f"(request {generation}, latest {self._generation})"
            )
            return False

        self.language = language
        self.level = level
        self.pool = list(pool)
        self.current_index = 0
        self.raw_input = ""
        self.start_time = None
        self.keystroke_total = 0
        self.keystroke_correct = 0
        self.input_history = []
        self.past_char_count = 0
        self.finished = False
        self.stats = None
        self.page = generate_page(self.pool, self.page_size, self.rng)
        if not self.page:
            logger.warning(f"No words available for {language}/{level}")
        return True

    async def on_restart(self) -> bool:
        if self.language is None:
            return False
        return await self.load_page(self.language, self.level)

    async def select_language(self, language: str) -> bool:
        return await self.load_page(language, self.level or settings.DEFAULT_LEVEL)

    async def select_level(self, level: int) -> bool:
        return await self.load_page(
            self.language or settings.DEFAULT_LANGUAGE, level
        )

    # --- Typing ---
    def on_input(self, raw: str):
        if self.finished or not self.page:
            return
        self.raw_input = raw
        if self.start_time is None and raw:
            self.start_time = self.clock()

        target = self.current_entry.word.pron
        typed = self.effective_input()

        self.keystroke_total += 1
        if target.startswith(typed):
            self.keystroke_correct += 1

        if typed == target:
            self.advance_word(typed)

    def advance_word(self, typed: str):
        self.input_history.append(typed)
        if self.is_last_slot:
            self.past_char_count += page_char_count(self.page)
            self.input_history = []
            self.current_index = 0
            self.raw_input = ""
            self.page = generate_page(self.pool, self.page_size, self.rng)
        else:
            self.current_index += 1
            self.raw_input = ""

    def on_backspace_at_empty(self):
        if self.finished or self.raw_input or self.current_index == 0:
            return
        previous = self.input_history.pop()
        self.current_index -= 1
        self.raw_input = previous

    def on_skip(self):
        if self.finished or not self.page:
            return
        if self.is_last_slot and not self.skip_last_word:
            return
        typed = self.effective_input()
        missing = max(0, len(self.current_entry.word.pron) - len(typed))
        # Untyped characters count as missed keystrokes
        self.keystroke_total += missing
        self.advance_word(typed)

    # --- Finishing ---
    def on_finish(self) -> Optional[Result]:
        if self.start_time is None or self.finished:
            return None
        now = self.clock()
        minutes = metrics.elapsed_minutes(self.start_time, now)

        # The word in progress counts in full, typed or not
        total_chars = self.past_char_count + page_char_count(
            self.page[: self.current_index]
        )
        if self.current_entry is not None:
            total_chars += len(self.current_entry.word.pron)

        self.stats = Stats(
            wpm=metrics.wpm(total_chars, minutes),
            accuracy=metrics.accuracy(self.keystroke_correct, self.keystroke_total),
        )
        self.finished = True
        logger.info(
            f"Finished {self.language}/{self.level}: {self.stats.wpm} wpm, "
            f"{self.stats.accuracy}% over {total_chars} chars"
        )
        return Result(
            wpm=self.stats.wpm,
            accuracy=self.stats.accuracy,
            timestamp=int(now * 1000),
        )

    async def emit_result(self, result: Result) -> bool:
        """Hands a result to the sink. Failures are logged and dropped."""
        if self.sink is None:
            return False
        try:
            await self.sink.submit(result)
        except Exception as e:
            logger.error(f"Failed to submit result: {e}")
            return False
        return True

    async def finish(self) -> Optional[Result]:
        result = self.on_finish()
        if result is not None:
            await self.emit_result(result)
        return result
