"""Unit tests for controller capacity checks and placement."""

from ledlayout.domain import (
    Cabinet,
    ControllerModel,
    ControllerPlacement,
    DataRoute,
    ProjectMode,
)
from ledlayout.domain.services import (
    CONTROLLER_LIMITS,
    PER_PORT_MAX_PX,
    default_outdoor_lv_box_cabinet_id,
    get_controller_limits,
    is_layout_over_controller_limits,
    is_route_over_capacity,
    layout_pixel_load,
    resolve_controller_cabinet_id,
    route_load_px,
    suggest_controller_upgrade,
)

from conftest import grid_cabinets

# A 640x640 cabinet at P2.5 is 256 x 256 pixels
CABINET_PX = 65_536


class TestLimits:
    """Tests for the controller limits table."""

    def test_table(self) -> None:
        assert get_controller_limits(ControllerModel.A100).total_max_px == 1_300_000
        a200 = CONTROLLER_LIMITS[ControllerModel.A200]
        assert (a200.total_max_px, a200.max_width_px, a200.max_height_px) == (
            2_300_000,
            4096,
            2560,
        )
        assert CONTROLLER_LIMITS[ControllerModel.X8E].total_max_px == 8 * PER_PORT_MAX_PX

    def test_port_counts(self) -> None:
        assert [m.port_count for m in ControllerModel] == [2, 4, 8]


class TestRouteLoad:
    """Tests for per-route pixel load."""

    def test_single_card_cabinets(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(2, 1))
        route = DataRoute("r1", 1, ("C1", "C2"))
        assert route_load_px(route, layout) == 2 * CABINET_PX

    def test_dual_card_endpoint_carries_half(self, make_layout) -> None:
        layout = make_layout((Cabinet("C1", "640x640", receiver_card_count=2),))
        route = DataRoute("r1", 1, ("C1:a",))
        assert route_load_px(route, layout) == CABINET_PX / 2

    def test_unknown_endpoints_ignored(self, make_layout) -> None:
        route = DataRoute("r1", 1, ("GHOST",))
        assert route_load_px(route, make_layout()) == 0

    def test_capacity(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(10, 1))
        full = DataRoute("r1", 1, tuple(f"C{i}" for i in range(1, 10)))
        over = DataRoute("r2", 2, tuple(f"C{i}" for i in range(1, 11)))
        assert not is_route_over_capacity(full, layout)
        assert is_route_over_capacity(over, layout)

    def test_p156_uses_effective_pitch(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(1, 1), pitch_mm=1.56, pitch_is_gob=False)
        # 640 / 1.568627 rounds to 408
        assert layout_pixel_load(layout) == 408 * 408


class TestLayoutLimits:
    """Tests for whole-layout controller checks."""

    def test_within_limits(self, pair_layout) -> None:
        assert not is_layout_over_controller_limits(pair_layout)
        assert suggest_controller_upgrade(pair_layout) is None

    def test_total_pixels_exceeded(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(5, 5), controller=ControllerModel.A100)
        assert layout_pixel_load(layout) == 25 * CABINET_PX
        assert is_layout_over_controller_limits(layout)
        assert suggest_controller_upgrade(layout) == ControllerModel.A200

    def test_canvas_width_exceeded(self, make_layout) -> None:
        """17 cabinets in a row are 4352 px wide, past the A200 canvas."""
        layout = make_layout(grid_cabinets(17, 1), controller=ControllerModel.A200)
        assert is_layout_over_controller_limits(layout)
        assert not is_layout_over_controller_limits(layout, ControllerModel.X8E)

    def test_upgrade_skips_to_largest(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(8, 5), controller=ControllerModel.A100)
        assert suggest_controller_upgrade(layout) == ControllerModel.X8E

    def test_upgrade_respects_used_ports(self, make_layout) -> None:
        layout = make_layout(
            grid_cabinets(17, 1),
            controller=ControllerModel.A200,
            data_routes=(DataRoute("r1", 4),),
        )
        assert suggest_controller_upgrade(layout) == ControllerModel.X8E

    def test_nothing_fits(self, make_layout) -> None:
        layout = make_layout(grid_cabinets(10, 10), controller=ControllerModel.X8E)
        assert is_layout_over_controller_limits(layout)
        assert suggest_controller_upgrade(layout) is None


class TestControllerCabinet:
    """Tests for controller cabinet resolution."""

    def test_external_has_no_cabinet(self, pair_layout) -> None:
        assert resolve_controller_cabinet_id(pair_layout) is None

    def test_explicit_cabinet(self, make_layout) -> None:
        layout = make_layout(
            grid_cabinets(2, 1),
            controller_placement=ControllerPlacement.CABINET,
            controller_cabinet_id="C1",
        )
        assert resolve_controller_cabinet_id(layout) == "C1"

    def test_outdoor_falls_back_to_lv_box(self, make_layout) -> None:
        layout = make_layout(
            grid_cabinets(2, 2),
            mode=ProjectMode.OUTDOOR,
            controller_placement=ControllerPlacement.CABINET,
            controller_cabinet_id="GHOST",
        )
        assert resolve_controller_cabinet_id(layout) == "C4"

    def test_lv_box_prefers_top_then_right(self, make_layout) -> None:
        layout = make_layout(
            (
                Cabinet("LOW", "640x640", x_mm=2000, y_mm=0),
                Cabinet("TOP_LEFT", "640x640", x_mm=0, y_mm=640),
                Cabinet("TOP_RIGHT", "640x640", x_mm=640, y_mm=640),
            )
        )
        assert default_outdoor_lv_box_cabinet_id(layout) == "TOP_RIGHT"

    def test_lv_box_empty_layout(self, make_layout) -> None:
        assert default_outdoor_lv_box_cabinet_id(make_layout()) is None
