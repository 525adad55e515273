import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import settings
from .errors import (
    AnswerAlreadyRecordedError,
    EmptyOptionsError,
    InsufficientDataError,
    UnknownQuestionError,
)
from .exercises import ExerciseFactory, calculate_similarity
from .globals import progress_store, sessions, vocab_manager
from .models import PublicQuestion
from .review import build_review_queue
from .session import ExerciseSession, check_question_options

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class StartSessionRequest(BaseModel):
    topic: Optional[str] = None
    mode: str = "mixed"
    count: int = Field(default=settings.EXERCISE_COUNT, ge=1, le=100)


class SubmitAnswerRequest(BaseModel):
    question_id: str
    answer: str
    time_spent: float = Field(default=0.0, ge=0)
    user_id: Optional[str] = None


class SimilarityRequest(BaseModel):
    user_answer: str
    correct_answer: str


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def _is_expired(session: ExerciseSession, now: datetime) -> bool:
    return now - session.started_at > timedelta(
        minutes=settings.SESSION_TIMEOUT_MINUTES
    )


def get_active_session(session_id: Optional[str]) -> Optional[ExerciseSession]:
    if not session_id or session_id not in sessions:
        return None
    session = sessions[session_id]
    if _is_expired(session, datetime.now()):
        del sessions[session_id]
        return None
    return session


def purge_expired_sessions() -> int:
    now = datetime.now()
    expired = [sid for sid, s in list(sessions.items()) if _is_expired(s, now)]
    for sid in expired:
        sessions.pop(sid, None)
    if expired:
        logger.info(f"Purged {len(expired)} expired sessions")
    return len(expired)


def _public_questions(session: ExerciseSession):
    return [
        PublicQuestion.from_question(check_question_options(q))
        for q in session.questions
    ]


# --- Routes ---


@router.get("/topics")
async def get_topics():
    return vocab_manager.get_topics()


@router.post("/sessions")
async def start_session(request: StartSessionRequest):
    if request.mode not in ExerciseFactory.MODES:
        return JSONResponse(
            {"error": f"Unknown mode {request.mode!r}, expected one of {list(ExerciseFactory.MODES)}"},
            status_code=422,
        )
    purge_expired_sessions()

    topic = request.topic
    if not topic or not vocab_manager.get_words(topic):
        # Fallback to first available
        topics = vocab_manager.get_topics()
        topic = topics[0]["id"] if topics else "default_dummy"

    generator = ExerciseFactory.create(request.mode)
    try:
        questions = generator.generate(vocab_manager.get_words(topic), request.count)
    except InsufficientDataError as e:
        logger.warning(f"Cannot build exercises for {topic}: {e}")
        return JSONResponse({"error": str(e)}, status_code=422)

    session = ExerciseSession(questions, topic=topic, mode=request.mode)
    try:
        public = _public_questions(session)
    except EmptyOptionsError as e:
        logger.error(f"Generated an invalid question: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)

    new_id = str(uuid.uuid4())
    sessions[new_id] = session
    logger.info(
        f"New session: {new_id} [Topic: {topic}, Mode: {request.mode}, Questions: {len(questions)}]"
    )

    response = JSONResponse(
        {
            "session_id": new_id,
            "topic": topic,
            "mode": request.mode,
            "total_questions": session.total_questions,
            "questions": [q.model_dump(mode="json") for q in public],
        }
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return response


@router.get("/sessions/current")
async def get_session_data(session_id: Optional[str] = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    try:
        public = _public_questions(session)
    except EmptyOptionsError as e:
        logger.error(f"Session {session_id} holds an invalid question: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)
    return {
        "topic": session.topic,
        "mode": session.mode,
        "total_questions": session.total_questions,
        "questions": public,
        "answers": session.answers,
    }


@router.post("/sessions/current/answers")
async def submit_answer(
    request: SubmitAnswerRequest,
    session_id: Optional[str] = Depends(get_session_id),
):
    session = get_active_session(session_id)
    if not session:
        return JSONResponse({"error": "Invalid session"}, status_code=401)

    try:
        answer = session.submit_answer(
            request.question_id, request.answer, request.time_spent
        )
    except UnknownQuestionError:
        return JSONResponse({"error": "Unknown question"}, status_code=404)
    except AnswerAlreadyRecordedError:
        return JSONResponse({"error": "Already answered"}, status_code=400)

    mastery = None
    if request.user_id:
        vocabulary_id = session.get_question(request.question_id).vocabulary.id
        mastery = progress_store.record_outcome(
            request.user_id, vocabulary_id, answer.is_correct
        )

    return {"answer": answer, "mastery": mastery}


@router.get("/sessions/current/summary")
async def get_summary(session_id: Optional[str] = Depends(get_session_id)):
    session = get_active_session(session_id)
    if not session:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    return session.summary()


@router.post("/similarity")
async def similarity(request: SimilarityRequest):
    return {
        "similarity": calculate_similarity(request.user_answer, request.correct_answer)
    }


@router.get("/review/{user_id}")
async def review_queue(user_id: str, include_upcoming: bool = False):
    return build_review_queue(
        progress_store.records_for(user_id),
        vocab_manager.all_entries(),
        include_upcoming=include_upcoming,
    )


@router.post("/reset")
async def reset_session(
    response: Response, session_id: Optional[str] = Depends(get_session_id)
):
    if session_id in sessions:
        del sessions[session_id]
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
