class WtypeError(Exception):
    """Base class for errors raised by wtype."""


class FetchFailure(WtypeError):
    """The word provider could not produce a pool."""

    def __init__(self, language: str, level: int, reason: str = ""):
        self.language = language
        self.level = level
        message = f"Could not fetch words for {language}/{level}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SubmitFailure(WtypeError):
    """The result sink did not accept a result."""
