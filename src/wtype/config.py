import os


class Settings:
    PROJECT_NAME: str = "wtype"
    DEBUG: bool = False
    LOG_DIR: str = "log"
    LOG_FILE: str = "wtype.log"
    LOG_TO_DB: bool = os.environ.get("LOG_TO_DB", "1") == "1"
    DB_DIR: str = "db"
    DB_FILE: str = "wtype.db"
    VOCAB_DIR: str = os.environ.get("VOCAB_DIR", "vocabulary")
    PAGE_SIZE: int = 14
    SKIP_LAST_WORD: bool = True
    DEFAULT_LANGUAGE: str = "jp"
    DEFAULT_LEVEL: int = 1
    LEVELS: tuple = (1, 2)
    LANGUAGES: dict = {
        "jp": {"label": "Japanese", "transliterated": True},
        "de": {"label": "German", "transliterated": False},
        "fr": {"label": "French", "transliterated": False},
        "ru": {"label": "Russian", "transliterated": False},
        "es": {"label": "Spanish", "transliterated": False},
    }
    SESSION_COOKIE_NAME: str = "typing_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    RESULTS_LIMIT: int = 50
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()


def is_transliterated(language: str) -> bool:
    return settings.LANGUAGES.get(language, {}).get("transliterated", False)
