import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_current_fid, get_quiz_set, get_result_store
from ..errors import InvalidSubmission, StoreUnavailable
from ..models.quiz import GuessResult, QuizSet, QuizStateResponse, QuizSubmitResponse
from ..services.result_store import ResultStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


@router.get("/questions", response_model=QuizSet)
async def get_questions(quiz_set: QuizSet = Depends(get_quiz_set)):
    """Get the active quiz questions and version."""
    return quiz_set


@router.get("/state", response_model=QuizStateResponse)
async def get_state(
    fid: str = Depends(get_current_fid),
    quiz_set: QuizSet = Depends(get_quiz_set),
    store: Optional[ResultStore] = Depends(get_result_store)
):
    """Get the stored results of the current user for the active quiz version."""
    if store is None:
        return QuizStateResponse(results=None, version=quiz_set.version)

    try:
        results = await store.get(fid, quiz_set.version)
    except StoreUnavailable as e:
        # Reads degrade to "nothing stored"; the write path reports the failure
        logger.warning("Quiz state read failed fid=%s: %s", fid, e.detail)
        results = None

    return QuizStateResponse(results=results, version=quiz_set.version)


@router.post("/state", response_model=QuizSubmitResponse)
async def submit_state(
    results: List[GuessResult],
    fid: str = Depends(get_current_fid),
    quiz_set: QuizSet = Depends(get_quiz_set),
    store: Optional[ResultStore] = Depends(get_result_store)
):
    """
    Store the finished quiz results of the current user.

    Only the first submission per quiz version is kept. Later submissions
    get the stored results back unchanged.
    """
    expected = [q.id for q in quiz_set.questions]
    if [r.id for r in results] != expected:
        raise InvalidSubmission(f"Expected results for questions {expected}")

    if store is None:
        raise StoreUnavailable("Result store is not configured")

    stored = await store.submit(fid, quiz_set.version, results)
    return QuizSubmitResponse(ok=True, results=stored, version=quiz_set.version)
