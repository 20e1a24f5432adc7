"""Unit tests for route formatting and live-tracking helpers."""

from datetime import datetime

import pytest

from src.domain.entities import Coordinate
from src.domain.navigation import (
    NavigationRoute,
    RouteStep,
    format_distance,
    format_duration,
    get_current_step,
    get_estimated_arrival,
    get_maneuver_icon,
    get_voice_instruction,
    is_off_route,
    route_summary,
)

# Straight east-west polyline along latitude 3.0, one vertex every ~111 m
POLYLINE = tuple(Coordinate(3.0, 101.0 + i * 0.001) for i in range(11))


class TestFormatDistance:
    @pytest.mark.parametrize(
        "meters, expected",
        [
            (0, "0 m"),
            (450, "450 m"),
            (449.6, "450 m"),
            (999, "999 m"),
            (1000, "1.0 km"),
            (1500, "1.5 km"),
            (12_345, "12.3 km"),
        ],
    )
    def test_format(self, meters, expected):
        assert format_distance(meters) == expected


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "0m"),
            (59, "0m"),
            (300, "5m"),
            (3599, "59m"),
            (3600, "1h 0m"),
            (3660, "1h 1m"),
            (3900, "1h 5m"),
            (7325, "2h 2m"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_summary_joins_both(self):
        assert route_summary(7600, 900) == "7.6 km • 15m"


class TestIsOffRoute:
    def test_on_a_vertex(self):
        assert not is_off_route(POLYLINE[3], POLYLINE)

    def test_close_to_the_line(self):
        # ~22 m north of a vertex
        assert not is_off_route(Coordinate(3.0002, 101.003), POLYLINE, threshold_m=50)

    def test_far_from_the_line(self):
        # ~111 m north of the nearest vertex
        assert is_off_route(Coordinate(3.001, 101.003), POLYLINE, threshold_m=50)

    def test_threshold_is_respected(self):
        user = Coordinate(3.001, 101.003)
        assert not is_off_route(user, POLYLINE, threshold_m=150)

    def test_vertex_approximation_between_sparse_vertices(self):
        """Standing on the road halfway between two far-apart vertices."""
        sparse = (Coordinate(3.0, 101.0), Coordinate(3.0, 101.01))
        assert is_off_route(Coordinate(3.0, 101.005), sparse, threshold_m=50)

    def test_empty_polyline_is_never_off_route(self):
        assert not is_off_route(Coordinate(10.0, 10.0), ())


def _route(*starts: Coordinate | None) -> NavigationRoute:
    steps = tuple(
        RouteStep(
            instruction=f"Step {i}",
            distance=100,
            duration=10,
            maneuver="straight",
            coordinates=(start,) if start else (),
        )
        for i, start in enumerate(starts)
    )
    return NavigationRoute(steps=steps, total_distance=100 * len(steps),
                           total_duration=10 * len(steps))


class TestGetCurrentStep:
    def test_empty_route(self):
        current = get_current_step(Coordinate(3.0, 101.0), _route())
        assert current.step_index == -1
        assert current.step is None

    def test_nearest_step_start(self):
        route = _route(POLYLINE[0], POLYLINE[5], POLYLINE[10])
        current = get_current_step(Coordinate(3.0, 101.0048), route)
        assert current.step_index == 1
        assert current.step is route.steps[1]

    def test_tie_goes_to_lowest_index(self):
        route = _route(POLYLINE[2], POLYLINE[2])
        assert get_current_step(POLYLINE[2], route).step_index == 0

    def test_steps_without_geometry_are_skipped(self):
        route = _route(None, POLYLINE[4])
        assert get_current_step(POLYLINE[0], route).step_index == 1

    def test_no_geometry_at_all_falls_back_to_first(self):
        route = _route(None, None)
        assert get_current_step(POLYLINE[0], route).step_index == 0


class TestPresentation:
    @pytest.mark.parametrize(
        "maneuver, direction, icon",
        [
            ("depart", None, "🚗"),
            ("arrive", None, "🏁"),
            ("turn", "left", "⬅️"),
            ("turn", "right", "➡️"),
            ("turn", None, "↗️"),
            ("slight-turn", "left", "↖️"),
            ("something-new", None, "➡️"),
        ],
    )
    def test_maneuver_icon(self, maneuver, direction, icon):
        assert get_maneuver_icon(maneuver, direction) == icon

    def test_voice_instruction_strips_markup(self):
        step = RouteStep(
            instruction="Turn <b>left</b> onto Jalan Ampang",
            distance=450, duration=40, maneuver="turn", direction="left",
        )
        assert get_voice_instruction(step) == "In 450 m, Turn left onto Jalan Ampang"

    def test_voice_instruction_drops_unit_words(self):
        step = RouteStep(instruction="Continue for 2 km", distance=2000,
                         duration=120, maneuver="continue")
        assert get_voice_instruction(step) == "In 2.0 km, Continue for 2"

    def test_estimated_arrival(self):
        now = datetime(2026, 10, 16, 13, 5)
        assert get_estimated_arrival(600, now=now) == "01:15 PM"
