"""
Client side progression through a quiz attempt.

QuizSession walks the questions one at a time:

    AWAITING_GUESS -> GUESS_PLACED -> REVEALED -> (next question) ... -> FINISHED

Results collected along the way form a DraftAttempt. Once the last answer is
acknowledged the draft is submitted to the result store and whatever the
store returns becomes the FinalizedAttempt shown to the user. A stored
attempt found on resume() finishes the session immediately.
"""

import logging
from enum import Enum
from typing import List, Optional

import httpx
from fastapi import status

from ..errors import InvalidSubmission, InvalidTransition, StoreUnavailable, Unauthorized
from ..models.quiz import (
    Coordinate, DraftAttempt, FinalizedAttempt, GuessResult, QuizQuestion, QuizSet,
    QuizStateResponse, QuizSubmitResponse
)
from .scoring import MAX_DISTANCE_KM, build_guess_result

logger = logging.getLogger(__name__)


class QuizStateClient:
    """HTTP client for the /api/quiz/state endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json"
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport
        )

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            raise Unauthorized()
        if response.is_client_error:
            raise InvalidSubmission(f"Quiz server rejected the request: {response.text}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreUnavailable(f"Quiz state request failed: {str(e)}")

    async def fetch(self) -> Optional[FinalizedAttempt]:
        """Get the stored attempt for the signed-in user, if any."""
        async with self._client() as client:
            try:
                response = await client.get("/api/quiz/state")
            except httpx.RequestError as e:
                raise StoreUnavailable(f"Cannot reach quiz server: {str(e)}")
        self._check(response)

        state = QuizStateResponse.model_validate(response.json())
        if state.results is None:
            return None
        return FinalizedAttempt(version=state.version, results=state.results)

    async def submit(self, results: List[GuessResult]) -> FinalizedAttempt:
        """Submit a finished attempt; returns what the server stored."""
        payload = [result.model_dump(by_alias=True, mode="json") for result in results]
        async with self._client() as client:
            try:
                response = await client.post("/api/quiz/state", json=payload)
            except httpx.RequestError as e:
                raise StoreUnavailable(f"Cannot reach quiz server: {str(e)}")
        self._check(response)

        stored = QuizSubmitResponse.model_validate(response.json())
        return FinalizedAttempt(version=stored.version, results=stored.results)


class SessionState(str, Enum):
    AWAITING_GUESS = "awaiting_guess"
    GUESS_PLACED = "guess_placed"
    REVEALED = "revealed"
    FINISHED = "finished"


class QuizSession:
    """
    One user's pass through a quiz set.

    Args:
        quiz_set: Questions to ask, in order
        gateway: Object with async fetch() and submit(results), usually a
            QuizStateClient
        max_distance_km: Distance at which a guess scores zero
    """

    def __init__(self, quiz_set: QuizSet, gateway, max_distance_km: float = MAX_DISTANCE_KM):
        if not quiz_set.questions:
            raise ValueError("Quiz set has no questions")
        self.quiz_set = quiz_set
        self.gateway = gateway
        self.max_distance_km = max_distance_km

        self.state = SessionState.AWAITING_GUESS
        self.question_index = 0
        self.guess: Optional[Coordinate] = None
        self.revealed: Optional[GuessResult] = None
        self.draft = DraftAttempt()
        self.finalized: Optional[FinalizedAttempt] = None

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.state == SessionState.FINISHED:
            return None
        return self.quiz_set.questions[self.question_index]

    @property
    def is_last_question(self) -> bool:
        return self.question_index == len(self.quiz_set.questions) - 1

    @property
    def results(self) -> List[GuessResult]:
        """Stored results once finished, otherwise the draft so far."""
        if self.finalized is not None:
            return self.finalized.results
        return self.draft.results

    async def resume(self) -> Optional[FinalizedAttempt]:
        """Load a previously stored attempt and lock the session if there is one."""
        stored = await self.gateway.fetch()
        if stored is not None:
            self._finish(stored)
        return stored

    def place_guess(self, coordinate: Coordinate) -> bool:
        """Place or move the guess marker. Ignored once the answer is shown."""
        if self.state not in (SessionState.AWAITING_GUESS, SessionState.GUESS_PLACED):
            return False
        self.guess = coordinate
        self.state = SessionState.GUESS_PLACED
        return True

    def submit_guess(self) -> GuessResult:
        """Reveal the answer for the current question and score the guess."""
        if self.state != SessionState.GUESS_PLACED or self.guess is None:
            raise InvalidTransition(f"Cannot submit a guess while {self.state.value}")

        self.revealed = build_guess_result(
            self.current_question, self.guess, self.max_distance_km
        )
        self.state = SessionState.REVEALED
        return self.revealed

    async def advance(self) -> Optional[FinalizedAttempt]:
        """
        Move past a revealed answer.

        On the last question the attempt is submitted and the session
        finishes with the stored results. If submission fails the session
        stays on the revealed answer so advance() can be retried.
        """
        if self.state != SessionState.REVEALED or self.revealed is None:
            raise InvalidTransition(f"Cannot advance while {self.state.value}")

        collected = self.draft.results + [self.revealed]

        if self.is_last_question:
            stored = await self.gateway.submit(collected)
            self.draft = DraftAttempt(results=collected)
            if stored.results != collected:
                logger.info("Server kept an earlier attempt for version %s", stored.version)
            self._finish(stored)
            return stored

        self.draft = DraftAttempt(results=collected)
        self.question_index += 1
        self.guess = None
        self.revealed = None
        self.state = SessionState.AWAITING_GUESS
        return None

    def _finish(self, stored: FinalizedAttempt) -> None:
        self.finalized = stored
        self.guess = None
        self.revealed = None
        self.state = SessionState.FINISHED
