import glob
import logging
import os
import re
from typing import Any, Dict, List, Tuple

import pandas as pd

from .config import settings
from .errors import FetchFailure
from .models import Word

logger = logging.getLogger(__name__)

FILE_PATTERN = re.compile(r"^(?P<language>[a-z]+)_(?P<level>\d+)$")
REQUIRED_COLUMNS = ("word", "pron")


class VocabularyManager:
    """Loads word pools from ``<language>_<level>.csv`` files."""

    def __init__(self, directory: str):
        self.directory = directory
        self.vocab_sets: Dict[Tuple[str, int], List[Word]] = {}

    def load_all(self):
        self.vocab_sets = {}
        if not os.path.exists(self.directory):
            os.makedirs(self.directory)
            logger.warning(f"Created directory {self.directory}. Please add CSV files.")

        csv_files = glob.glob(os.path.join(self.directory, "*.csv"))
        for file_path in sorted(csv_files):
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            match = FILE_PATTERN.match(file_name)
            if not match:
                logger.error(f"Skipping {file_name}: expected <language>_<level>.csv")
                continue
            try:
                df = pd.read_csv(
                    file_path, encoding="utf-8", dtype=str, keep_default_na=False
                )
                if not all(column in df.columns for column in REQUIRED_COLUMNS):
                    logger.error(f"Skipping {file_name}: Missing columns.")
                    continue
                words = self._to_words(df.to_dict("records"))
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue
            key = (match["language"], int(match["level"]))
            self.vocab_sets[key] = words
            logger.info(f"Loaded {len(words)} words from {file_name}")

        if not self.vocab_sets:
            logger.warning("No CSV files found. Loading dummy data.")
            self.vocab_sets[(settings.DEFAULT_LANGUAGE, settings.DEFAULT_LEVEL)] = [
                Word(id=1, display="猫", pron="ねこ", hint="neko"),
                Word(id=2, display="犬", pron="いぬ", hint="inu"),
                Word(id=3, display="水", pron="みず", hint="mizu"),
                Word(id=4, display="山", pron="やま", hint="yama"),
                Word(id=5, display="本", pron="ほん", hint="hon"),
            ]

    @staticmethod
    def _to_words(records: List[Dict[str, Any]]) -> List[Word]:
        words = []
        for row_number, record in enumerate(records, start=1):
            raw_id = str(record.get("id", "")).strip()
            words.append(
                Word(
                    id=int(raw_id) if raw_id else row_number,
                    display=record["word"],
                    pron=record["pron"],
                    hint=record.get("romaji", ""),
                    gram=record.get("gram", ""),
                )
            )
        return words

    def get_words(self, language: str, level: int) -> List[Word]:
        return self.vocab_sets.get((language, level), [])

    def get_languages(self) -> List[Dict[str, Any]]:
        languages = []
        for code, info in settings.LANGUAGES.items():
            levels = sorted(lvl for lang, lvl in self.vocab_sets if lang == code)
            languages.append(
                {
                    "code": code,
                    "label": info["label"],
                    "transliterated": info["transliterated"],
                    "levels": levels,
                }
            )
        return languages

    async def fetch(self, language: str, level: int) -> List[Word]:
        if language not in settings.LANGUAGES:
            raise FetchFailure(language, level, "unknown language")
        return list(self.get_words(language, level))
