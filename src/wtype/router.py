import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Cookie, Depends, Form, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .config import settings
from .display import snapshot
from .errors import SubmitFailure
from .globals import result_store, vocab_manager
from .models import Result, SessionView, Word
from .session import TypingSession

logger = logging.getLogger(__name__)

router = APIRouter()


class ActiveSession:
    def __init__(self, session: TypingSession):
        self.session = session
        self.created_at = datetime.now()


sessions: Dict[str, ActiveSession] = {}


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def get_active_session(session_id: Optional[str]) -> Optional[TypingSession]:
    if not session_id or session_id not in sessions:
        return None
    active = sessions[session_id]
    if datetime.now() - active.created_at > timedelta(
        minutes=settings.SESSION_TIMEOUT_MINUTES
    ):
        del sessions[session_id]
        return None
    return active.session


def invalid_session() -> JSONResponse:
    return JSONResponse({"error": "Session invalid"}, status_code=401)


def invalid_selection(language: str, level: int) -> Optional[JSONResponse]:
    if language not in settings.LANGUAGES:
        return JSONResponse({"error": f"Unknown language: {language}"}, status_code=400)
    if level not in settings.LEVELS:
        return JSONResponse({"error": f"Unknown level: {level}"}, status_code=400)
    return None


# --- Vocabulary and results ---
@router.get("/api/languages")
async def get_languages():
    return {"languages": vocab_manager.get_languages(), "levels": list(settings.LEVELS)}


@router.get("/api/words", response_model=List[Word])
async def get_words(
    lang: str = settings.DEFAULT_LANGUAGE, level: int = settings.DEFAULT_LEVEL
):
    error = invalid_selection(lang, level)
    if error:
        return error
    return vocab_manager.get_words(lang, level)


@router.post("/api/results", response_model=Result)
async def post_result(result: Result):
    try:
        await result_store.submit(result)
    except SubmitFailure as e:
        logger.error(str(e))
        return JSONResponse({"error": "Could not store result"}, status_code=503)
    return result


@router.get("/api/results", response_model=List[Result])
async def get_results():
    return await run_in_threadpool(result_store.recent)


# --- Typing session ---
@router.post("/api/session", response_model=SessionView)
async def start_session(
    response: Response,
    lang: str = Form(settings.DEFAULT_LANGUAGE),
    level: int = Form(settings.DEFAULT_LEVEL),
):
    error = invalid_selection(lang, level)
    if error:
        return error

    session = TypingSession(provider=vocab_manager, sink=result_store)
    await session.load_page(lang, level)

    new_id = str(uuid.uuid4())
    sessions[new_id] = ActiveSession(session)
    logger.info(f"New session: {new_id} [Language: {lang}, Level: {level}]")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return snapshot(session)


@router.get("/api/session", response_model=SessionView)
async def get_session(session_id: str = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    return snapshot(session)


@router.post("/api/session/input", response_model=SessionView)
async def input_changed(
    buffer: str = Form(""), session_id: str = Depends(get_session_id)
):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    session.on_input(buffer)
    return snapshot(session)


@router.post("/api/session/backspace", response_model=SessionView)
async def backspace_at_empty(session_id: str = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    session.on_backspace_at_empty()
    return snapshot(session)


@router.post("/api/session/skip", response_model=SessionView)
async def skip_word(session_id: str = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    session.on_skip()
    return snapshot(session)


@router.post("/api/session/restart", response_model=SessionView)
async def restart(session_id: str = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    await session.on_restart()
    return snapshot(session)


@router.post("/api/session/finish", response_model=SessionView)
async def finish(
    background_tasks: BackgroundTasks, session_id: str = Depends(get_session_id)
):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    result = session.on_finish()
    if result is not None:
        background_tasks.add_task(session.emit_result, result)
    return snapshot(session)


@router.post("/api/session/language", response_model=SessionView)
async def select_language(
    lang: str = Form(...), session_id: str = Depends(get_session_id)
):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    error = invalid_selection(lang, session.level or settings.DEFAULT_LEVEL)
    if error:
        return error
    await session.select_language(lang)
    return snapshot(session)


@router.post("/api/session/level", response_model=SessionView)
async def select_level(
    level: int = Form(...), session_id: str = Depends(get_session_id)
):
    session = get_active_session(session_id)
    if not session:
        return invalid_session()
    error = invalid_selection(session.language or settings.DEFAULT_LANGUAGE, level)
    if error:
        return error
    await session.select_level(level)
    return snapshot(session)


@router.post("/api/reset")
async def reset_session(response: Response, session_id: str = Depends(get_session_id)):
    if session_id in sessions:
        del sessions[session_id]
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
