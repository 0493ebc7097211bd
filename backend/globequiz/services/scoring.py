from math import radians, degrees, sin, cos, sqrt, atan2

from ..models.quiz import Coordinate, GuessResult, QuizQuestion

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0
MAX_DISTANCE_KM = 20000.0
MAX_POINTS = 100


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: Coordinates of the first point (degrees)
        lat2, lon2: Coordinates of the second point (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon / 2)**2
    # Rounding can push a a hair outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great circle distance between two coordinates in kilometers."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def calculate_score(
    distance_km: float,
    max_distance_km: float = MAX_DISTANCE_KM,
    max_points: int = MAX_POINTS
) -> int:
    """
    Calculate score based on distance from actual location.

    Linear scale: a perfect guess earns max_points, anything at or beyond
    max_distance_km earns 0.

    Args:
        distance_km: Distance in kilometers
        max_distance_km: Distance at which the score reaches zero
        max_points: Maximum possible points

    Returns:
        Score (0 to max_points)
    """
    clamped = min(max(distance_km, 0.0), max_distance_km)
    return int(round((1 - clamped / max_distance_km) * max_points))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Geographic midpoint of the great circle path, used for label placement."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lng)
    lat2 = radians(b.lat)
    lon2 = radians(b.lng)
    dlon = lon2 - lon1

    bx = cos(lat2) * cos(dlon)
    by = cos(lat2) * sin(dlon)
    lat3 = atan2(sin(lat1) + sin(lat2), sqrt((cos(lat1) + bx)**2 + by**2))
    lon3 = lon1 + atan2(by, cos(lat1) + bx)

    return Coordinate(lat=degrees(lat3), lng=degrees(lon3))


def build_guess_result(
    question: QuizQuestion,
    guess: Coordinate,
    max_distance_km: float = MAX_DISTANCE_KM,
    max_points: int = MAX_POINTS
) -> GuessResult:
    """Score a guess against a question's answer."""
    distance = distance_km(guess, question.answer)
    return GuessResult(
        id=question.id,
        guess=guess,
        answer=question.answer,
        distance_km=distance,
        score=calculate_score(distance, max_distance_km, max_points)
    )
