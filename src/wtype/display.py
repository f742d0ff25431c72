from typing import List

from .models import EntryView, Letter, LetterStatus, SessionView
from .session import TypingSession


def letter_states(
    target: str, typed: str, is_current: bool, is_past: bool
) -> List[Letter]:
    """Per-character marking of one word against what was typed for it."""
    letters = []
    for i in range(max(len(target), len(typed))):
        extra = i >= len(target)
        caret = is_current and i == len(typed)
        if i < len(typed):
            if not extra and typed[i] == target[i]:
                letters.append(Letter(char=target[i], status=LetterStatus.CORRECT))
            else:
                letters.append(
                    Letter(char=typed[i], status=LetterStatus.INCORRECT, extra=extra)
                )
        else:
            status = LetterStatus.INCORRECT if is_past else LetterStatus.UNTYPED
            letters.append(Letter(char=target[i], status=status, caret=caret))

    if is_current and len(typed) >= len(target):
        letters.append(Letter(char="", status=LetterStatus.UNTYPED, caret=True))
    return letters


def snapshot(session: TypingSession) -> SessionView:
    confirmed, pending = session.split_input()
    entries = []
    for index, entry in enumerate(session.page):
        is_current = index == session.current_index
        is_past = index < session.current_index
        if is_current:
            typed = confirmed + pending
        elif is_past:
            typed = session.input_history[index]
        else:
            typed = ""
        entries.append(
            EntryView(
                page_id=entry.page_id,
                display=entry.word.display,
                hint=entry.word.hint,
                gram=entry.word.gram,
                is_current=is_current,
                is_past=is_past,
                letters=letter_states(entry.word.pron, typed, is_current, is_past),
            )
        )

    return SessionView(
        phase=session.phase,
        language=session.language,
        level=session.level,
        current_index=session.current_index,
        raw_input=session.raw_input,
        confirmed=confirmed,
        pending=pending,
        accuracy=session.live_accuracy,
        stats=session.stats,
        entries=entries,
    )
