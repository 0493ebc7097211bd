import pytest

from globequiz.models.quiz import Coordinate, GuessResult, QuizQuestion
from globequiz.services.scoring import (
    build_guess_result,
    calculate_score,
    distance_km,
    haversine_distance,
    midpoint,
)

FRANKFURT = Coordinate(lat=50.1108, lng=8.6733)
VINCI = Coordinate(lat=43.7935, lng=10.9236)
WOOLSTHORPE = Coordinate(lat=52.8096, lng=-0.6126)
SYDNEY = Coordinate(lat=-33.8688, lng=151.2093)

POINTS = [FRANKFURT, VINCI, WOOLSTHORPE, SYDNEY, Coordinate(lat=0, lng=0)]


class TestDistance:
    @pytest.mark.parametrize("a", POINTS)
    @pytest.mark.parametrize("b", POINTS)
    def test_symmetric(self, a, b):
        assert distance_km(a, b) == pytest.approx(distance_km(b, a))

    @pytest.mark.parametrize("a", POINTS)
    def test_zero_for_same_point(self, a):
        assert distance_km(a, a) == 0.0

    def test_same_building_is_zero(self):
        assert haversine_distance(50.1108, 8.6733, 50.1108, 8.6733) == 0.0

    def test_antipodal_on_equator_is_half_circumference(self):
        assert haversine_distance(0, 0, 0, 180) == pytest.approx(20015.09, abs=0.1)

    def test_known_distance(self):
        # Frankfurt to Vinci is roughly 720 km
        assert distance_km(FRANKFURT, VINCI) == pytest.approx(720, abs=15)

    def test_longitude_wraparound(self):
        assert haversine_distance(0, 179.5, 0, -179.5) == pytest.approx(111.2, abs=0.5)


class TestScore:
    def test_perfect_guess(self):
        assert calculate_score(0) == 100

    @pytest.mark.parametrize("distance", [20000, 20015.09, 50000])
    def test_far_guess_is_zero(self, distance):
        assert calculate_score(distance) == 0

    def test_linear(self):
        assert calculate_score(10000) == 50
        assert calculate_score(5000) == 75

    def test_rounds_to_nearest(self):
        # 1 - 40/20000 = 0.998 -> 99.8 -> 100
        assert calculate_score(40) == 100
        assert calculate_score(250) == 99

    def test_bounds_and_monotonic(self):
        distances = [d * 137.3 for d in range(0, 200)]
        scores = [calculate_score(d) for d in distances]
        assert all(0 <= s <= 100 for s in scores)
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_returns_int(self):
        assert isinstance(calculate_score(1234.5), int)


class TestMidpoint:
    def test_equator(self):
        mid = midpoint(Coordinate(lat=0, lng=0), Coordinate(lat=0, lng=90))
        assert mid.lat == pytest.approx(0)
        assert mid.lng == pytest.approx(45)

    def test_same_point(self):
        mid = midpoint(FRANKFURT, FRANKFURT)
        assert mid.lat == pytest.approx(FRANKFURT.lat)
        assert mid.lng == pytest.approx(FRANKFURT.lng)

    def test_is_equidistant(self):
        mid = midpoint(FRANKFURT, SYDNEY)
        assert distance_km(FRANKFURT, mid) == pytest.approx(distance_km(mid, SYDNEY), rel=1e-6)


class TestGuessResult:
    def test_exact_guess(self):
        question = QuizQuestion(id="goethe", prompt="Guess where Goethe was born", answer=FRANKFURT)
        result = build_guess_result(question, Coordinate(lat=50.1108, lng=8.6733))

        assert result.id == "goethe"
        assert result.distance_km == 0.0
        assert result.score == 100
        assert result.answer == FRANKFURT

    def test_antipodal_guess(self):
        question = QuizQuestion(id="q1", prompt="?", answer=Coordinate(lat=0, lng=180))
        result = build_guess_result(question, Coordinate(lat=0, lng=0))

        assert result.distance_km == pytest.approx(20015.09, abs=0.1)
        assert result.score == 0

    def test_serializes_camel_case(self):
        question = QuizQuestion(id="q1", prompt="?", answer=FRANKFURT)
        data = build_guess_result(question, VINCI).model_dump(by_alias=True)

        assert "distanceKm" in data
        assert data["guess"] == {"lat": VINCI.lat, "lng": VINCI.lng}

    @pytest.mark.parametrize("distance, score", [(0.0, 100), (5551.2, 72), (25000.0, 0)])
    def test_score_derived_when_missing(self, distance, score):
        result = GuessResult.model_validate({
            "id": "q1",
            "guess": {"lat": 0, "lng": 0},
            "answer": {"lat": 0, "lng": 0},
            "distanceKm": distance,
        })
        assert result.score == score

    def test_stored_score_is_kept(self):
        result = GuessResult(
            id="q1", guess=VINCI, answer=FRANKFURT, distance_km=5551.2, score=10
        )
        assert result.score == 10
