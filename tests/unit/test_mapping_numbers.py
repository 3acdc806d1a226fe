"""Unit tests for mapping numbers."""

from ledlayout.domain import (
    Cabinet,
    DataRoute,
    MappingNumbersSettings,
    OverviewSettings,
)
from ledlayout.domain.services import mapping_number_labels
from ledlayout.domain.services.mapping_numbers import (
    find_route_id_for_endpoint,
    label_sequence,
    route_card_group,
)
from ledlayout.domain.value_objects import MappingNumbersMode

from conftest import grid_cabinets


def _with_mapping(make_layout, cabinets, routes, **settings):
    return make_layout(
        cabinets,
        data_routes=routes,
        overview=OverviewSettings(mapping_numbers=MappingNumbersSettings(show=True, **settings)),
    )


class TestLabelSequence:
    """Tests for label_sequence."""

    def test_default_odd_sequence(self) -> None:
        assert label_sequence(4) == [1, 3, 5, 7]

    def test_chosen_labels_first(self) -> None:
        """Positions past the chosen labels continue the odd sequence by position."""
        assert label_sequence(3, (10, 20)) == [10, 20, 5]

    def test_non_finite_labels_dropped(self) -> None:
        assert label_sequence(2, (float("nan"), 4)) == [4, 3]


class TestRouteHelpers:
    """Tests for route grouping and lookup helpers."""

    def test_card_group_majority(self) -> None:
        route = DataRoute("r", 1, ("C1:b", "C2:b", "C3:a"))
        assert route_card_group(route) == 1

    def test_card_group_bare_ids_count_as_first_card(self) -> None:
        assert route_card_group(DataRoute("r", 1, ("C1", "C2:b"))) == 0

    def test_find_route(self) -> None:
        routes = (DataRoute("r1", 1, ("C1",)), DataRoute("r2", 2, ("C2:a",)))
        assert find_route_id_for_endpoint(routes, "C2:a") == "r2"
        assert find_route_id_for_endpoint(routes, "C3") is None


class TestAutoMode:
    """Tests for automatically numbered chains."""

    def test_numbered_by_port(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(2, 1),
            (DataRoute("late", 2, ("C2",)), DataRoute("early", 1, ("C1",))),
        )
        assert mapping_number_labels(layout) == {"C1": "1", "C2": "3"}

    def test_empty_routes_skipped(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(1, 1),
            (DataRoute("empty", 1), DataRoute("r2", 2, ("C1",))),
        )
        assert mapping_number_labels(layout) == {"C1": "1"}

    def test_custom_labels(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(2, 1),
            (DataRoute("r1", 1, ("C1",)), DataRoute("r2", 2, ("C2",))),
            labels=(2.0, 4.5),
        )
        assert mapping_number_labels(layout) == {"C1": "2", "C2": "4.5"}

    def test_restart_per_card(self, make_layout) -> None:
        cabinets = (
            Cabinet("C1", "640x640", receiver_card_count=2),
            Cabinet("C2", "640x640", x_mm=640, receiver_card_count=2),
        )
        routes = (
            DataRoute("r1", 1, ("C1:a",)),
            DataRoute("r2", 2, ("C2:a",)),
            DataRoute("r3", 3, ("C1:b",)),
            DataRoute("r4", 4, ("C2:b",)),
        )
        layout = _with_mapping(make_layout, cabinets, routes, restart_per_card=True)
        assert mapping_number_labels(layout) == {
            "C1:a": "1",
            "C2:a": "3",
            "C1:b": "1",
            "C2:b": "3",
        }


class TestManualMode:
    """Tests for manually assigned numbers."""

    def test_per_endpoint_wins_over_per_chain(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(2, 1),
            (DataRoute("r1", 1, ("C1", "C2")),),
            mode=MappingNumbersMode.MANUAL,
            per_chain=(("r1", "7"),),
            per_endpoint=(("C2", "9"),),
        )
        assert mapping_number_labels(layout) == {"C1": "7", "C2": "9"}

    def test_blank_values_ignored(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(1, 1),
            (DataRoute("r1", 1, ("C1",)),),
            mode=MappingNumbersMode.MANUAL,
            per_chain=(("r1", "  "),),
        )
        assert mapping_number_labels(layout) == {}

    def test_unrouted_endpoint_assignment_kept(self, make_layout) -> None:
        layout = _with_mapping(
            make_layout,
            grid_cabinets(1, 1),
            (),
            mode=MappingNumbersMode.MANUAL,
            per_endpoint=(("C1", "3"),),
        )
        assert mapping_number_labels(layout) == {"C1": "3"}
