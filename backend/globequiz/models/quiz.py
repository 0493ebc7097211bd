from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class Coordinate(BaseModel):
    """Latitude / longitude in degrees."""
    lat: float
    lng: float

    class Config:
        frozen = True


class QuizQuestion(BaseModel):
    """A single "where is it" question with its answer location."""
    id: str
    prompt: str
    answer: Coordinate

    class Config:
        frozen = True


class QuizSet(BaseModel):
    """The active ordered question set and its version namespace."""
    version: str
    questions: List[QuizQuestion]

    class Config:
        frozen = True


class GuessResult(BaseModel):
    """Outcome of one guess. Sent by the client as camelCase JSON."""
    id: str
    guess: Coordinate
    answer: Coordinate
    distance_km: float = Field(alias="distanceKm", ge=0)
    score: int = Field(ge=0, le=100)

    class Config:
        frozen = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def derive_missing_score(cls, data):
        """Records written by older clients carry only the distance."""
        if not isinstance(data, dict) or "score" in data:
            return data
        distance = data.get("distanceKm", data.get("distance_km"))
        if not isinstance(distance, (int, float)):
            return data

        from ..services.scoring import calculate_score

        return {**data, "score": calculate_score(float(distance))}


class DraftAttempt(BaseModel):
    """Client-side results collected so far. Not authoritative."""
    results: List[GuessResult] = []


class FinalizedAttempt(BaseModel):
    """Results as returned by the result store. Authoritative."""
    version: str
    results: List[GuessResult]

    class Config:
        frozen = True


class QuizStateResponse(BaseModel):
    """Response for reading the stored attempt."""
    results: Optional[List[GuessResult]] = None
    version: str


class QuizSubmitResponse(BaseModel):
    """Response after submitting a finished attempt."""
    ok: bool = True
    results: List[GuessResult]
    version: str
