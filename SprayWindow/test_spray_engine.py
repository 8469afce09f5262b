"""Tests for the spray window decision engine."""
import pytest
from spray_data import HourlyObservation
from spray_engine import compute_spray_state, find_next_good_window, is_good_hour


def hours(*pairs):
    """Build observations T0, T1, ... from (rain, wind) pairs."""
    return [
        HourlyObservation(time=f"T{i}", rain_prob=rain, wind_speed=wind)
        for i, (rain, wind) in enumerate(pairs)
    ]


def test_heavy_rain_means_dont_spray():
    rec = compute_spray_state([{"rainProb": 50, "windSpeed": 5}])

    assert rec.state == "dont"
    assert rec.reason == "rain"
    assert rec.max_rain == 50
    assert rec.max_wind == 5
    assert rec.next_good_start is None
    assert rec.next_good_end is None


def test_strong_wind_means_dont_spray():
    rec = compute_spray_state([{"rainProb": 0, "windSpeed": 20}])

    assert rec.state == "dont"
    assert rec.reason == "wind"


def test_rain_beats_wind_anywhere_in_horizon():
    """Wind in an earlier hour does not win over rain in a later hour."""
    rec = compute_spray_state(hours((0, 25), (0, 0), (45, 0)))

    assert rec.state == "dont"
    assert rec.reason == "rain"
    assert rec.max_wind == 25


def test_good_run_reported_even_when_state_is_dont():
    rec = compute_spray_state(hours((0, 0), (0, 0), (50, 0)))

    assert rec.state == "dont"
    assert rec.reason == "rain"
    assert rec.next_good_start == "T0"
    assert rec.next_good_end == "T1"


def test_empty_horizon():
    rec = compute_spray_state([])

    assert rec.state == "good"
    assert rec.reason == "good"
    assert rec.max_rain == 0
    assert rec.max_wind == 0
    assert rec.next_good_start is None
    assert rec.next_good_end is None


@pytest.mark.parametrize("rain,wind,state,reason", [
    (40, 0, "dont", "rain"),
    (39, 17, "caution", "caution"),
    (0, 18, "dont", "wind"),
    (20, 0, "caution", "caution"),
    (0, 12, "caution", "caution"),
    (19, 11, "good", "good"),
])
def test_threshold_boundaries(rain, wind, state, reason):
    rec = compute_spray_state(hours((rain, wind)))
    assert (rec.state, rec.reason) == (state, reason)


def test_caution_from_any_hour():
    rec = compute_spray_state(hours((0, 0), (0, 0), (0, 14)))

    assert rec.state == "caution"
    assert rec.reason == "caution"
    assert rec.next_good_start == "T0"
    assert rec.next_good_end == "T1"


def test_missing_values_count_as_zero():
    rec = compute_spray_state([{"time": "T0"}, {"time": "T1", "rainProb": None, "windSpeed": None}])

    assert rec.state == "good"
    assert rec.max_rain == 0
    assert rec.max_wind == 0
    assert rec.next_good_start == "T0"
    assert rec.next_good_end == "T1"


def test_only_first_good_run_is_reported():
    rec = compute_spray_state(hours((30, 0), (0, 0), (0, 0), (25, 0), (0, 0), (0, 0)))

    assert rec.next_good_start == "T1"
    assert rec.next_good_end == "T2"


def test_single_good_hour_window():
    rec = compute_spray_state(hours((30, 0), (0, 0), (30, 0)))

    assert rec.next_good_start == "T1"
    assert rec.next_good_end == "T1"


def test_no_good_hour_gives_no_window():
    rec = compute_spray_state(hours((20, 0), (0, 12), (35, 15)))

    assert rec.state == "caution"
    assert rec.next_good_start is None
    assert rec.next_good_end is None


def test_window_runs_to_end_of_horizon():
    assert find_next_good_window(hours((25, 0), (0, 0), (5, 5))) == ("T1", "T2")


def test_maxima_cover_all_hours():
    rec = compute_spray_state(hours((10, 3), (35, 9), (15, 16)))

    assert rec.max_rain == 35
    assert rec.max_wind == 16


def test_is_good_hour_is_strict():
    assert is_good_hour({"rainProb": 19, "windSpeed": 11}) is True
    assert is_good_hour({"rainProb": 20, "windSpeed": 0}) is False
    assert is_good_hour({"rainProb": 0, "windSpeed": 12}) is False
    assert is_good_hour({}) is True


def test_same_input_same_output():
    data = hours((10, 3), (45, 9), (0, 0))
    assert compute_spray_state(data) == compute_spray_state(data)


def test_accepts_generators():
    rec = compute_spray_state(h for h in hours((0, 0), (0, 20)))

    assert rec.reason == "wind"
    assert rec.next_good_start == "T0"
