import logging
from math import isfinite
from typing import List

from ..config import Settings
from ..errors import InvalidConfiguration
from ..models.quiz import Coordinate, QuizQuestion, QuizSet

logger = logging.getLogger(__name__)

QUESTIONS_PER_QUIZ = 3

# Birthplaces, approximate building coordinates
DEFAULT_QUESTIONS: List[QuizQuestion] = [
    QuizQuestion(
        id="goethe",
        prompt="Guess where Goethe was born",
        # Goethe-Haus, Grosser Hirschgraben, Frankfurt
        answer=Coordinate(lat=50.1108, lng=8.6733),
    ),
    QuizQuestion(
        id="leonardo",
        prompt="Guess where Leonardo da Vinci was born",
        # Casa Natale di Leonardo, Anchiano
        answer=Coordinate(lat=43.7935, lng=10.9236),
    ),
    QuizQuestion(
        id="newton",
        prompt="Guess where Isaac Newton was born",
        # Woolsthorpe Manor, Lincolnshire
        answer=Coordinate(lat=52.8096, lng=-0.6126),
    ),
    QuizQuestion(
        id="curie",
        prompt="Guess where Marie Curie was born",
        # Freta Street, Warsaw
        answer=Coordinate(lat=52.2511, lng=21.008),
    ),
    QuizQuestion(
        id="shakespeare",
        prompt="Guess where William Shakespeare was born",
        # Henley Street, Stratford-upon-Avon
        answer=Coordinate(lat=52.1935, lng=-1.7072),
    ),
    QuizQuestion(
        id="einstein",
        prompt="Guess where Albert Einstein was born",
        # Bahnhofstrasse, Ulm
        answer=Coordinate(lat=48.3987, lng=9.9933),
    ),
    QuizQuestion(
        id="tesla",
        prompt="Guess where Nikola Tesla was born",
        # Smiljan memorial center
        answer=Coordinate(lat=44.5723, lng=15.3886),
    ),
]


def default_quiz_set(version: str = "1") -> QuizSet:
    """The built-in question set, truncated to the quiz length."""
    return QuizSet(version=version, questions=DEFAULT_QUESTIONS[:QUESTIONS_PER_QUIZ])


def _parse_coordinate(raw: str, name: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} is not a number: {raw!r}")
    if not isfinite(value):
        raise InvalidConfiguration(f"{name} is not finite: {raw!r}")
    return value


def quiz_set_from_settings(settings: Settings) -> QuizSet:
    """
    Build the quiz set from QUIZ_Q{n}_PROMPT / _LAT / _LNG settings.

    Raises:
        InvalidConfiguration: if any of the values is missing or malformed
    """
    questions = []
    for n in range(1, QUESTIONS_PER_QUIZ + 1):
        prefix = f"QUIZ_Q{n}"
        prompt = getattr(settings, f"{prefix}_PROMPT").strip()
        lat = getattr(settings, f"{prefix}_LAT").strip()
        lng = getattr(settings, f"{prefix}_LNG").strip()

        if not (prompt and lat and lng):
            raise InvalidConfiguration(f"{prefix} is incomplete")

        questions.append(QuizQuestion(
            id=f"q{n}",
            prompt=prompt,
            answer=Coordinate(
                lat=_parse_coordinate(lat, f"{prefix}_LAT"),
                lng=_parse_coordinate(lng, f"{prefix}_LNG"),
            ),
        ))

    return QuizSet(version=settings.QUIZ_VERSION, questions=questions)


def load_quiz_set(settings: Settings) -> QuizSet:
    """Quiz set from settings, or the built-in set if they are unusable."""
    try:
        return quiz_set_from_settings(settings)
    except InvalidConfiguration as e:
        logger.warning("Using built-in quiz questions: %s", e)
        return default_quiz_set(settings.QUIZ_VERSION)
