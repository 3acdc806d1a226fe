"""Unit tests for EditorSession."""

from ledlayout.application import EditorSession
from ledlayout.domain import Cabinet, ControllerModel, DataRoute, ProjectMode
from ledlayout.domain.services import IssueCode, RoutingMode

from conftest import grid_cabinets


class TestHistoryIntegration:
    """Tests for commit, undo and redo through the session."""

    def test_dispatch_does_not_commit(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.update_cabinet("C1", x_mm=160)
        assert not session.can_undo

    def test_commit_then_undo(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.update_cabinet("C1", x_mm=160)
        session.commit()
        session.undo()
        assert session.layout.find_cabinet("C1").x_mm == 0
        session.redo()
        assert session.layout.find_cabinet("C1").x_mm == 160

    def test_undo_clears_selection(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.select_cabinet("C1")
        session.commit()
        session.undo()
        assert session.selected_cabinet_id is None

    def test_set_layout_restarts_history(self, pair_layout, square_layout) -> None:
        session = EditorSession(pair_layout)
        session.delete_cabinet("C1")
        session.commit()
        session.set_layout(square_layout)
        assert not session.can_undo
        assert len(session.layout.cabinets) == 4

    def test_default_session(self) -> None:
        session = EditorSession()
        assert session.layout.project.mode == ProjectMode.INDOOR
        assert session.layout.cabinets == ()


class TestTransactions:
    """Edits that apply and commit in one step."""

    def test_card_count_single_step(self, make_layout) -> None:
        layout = make_layout(
            grid_cabinets(1, 1), data_routes=(DataRoute("r1", 1, ("C1",)),)
        )
        session = EditorSession(layout)
        session.set_receiver_card_count("C1", 2)
        assert session.layout.find_route("r1").cabinet_ids == ("C1:a",)
        session.undo()
        assert session.layout.find_route("r1").cabinet_ids == ("C1",)
        assert session.layout.find_cabinet("C1").receiver_card_count == 1

    def test_card_count_out_of_range_is_clamped(self, make_layout) -> None:
        session = EditorSession(make_layout(grid_cabinets(1, 1)))
        session.set_receiver_card_count("C1", 3)
        assert session.layout.find_cabinet("C1").receiver_card_count == 2

    def test_update_cabinet_card_count_keeps_routes_consistent(self, make_layout) -> None:
        layout = make_layout(
            (
                Cabinet("X", "640x640", receiver_card_count=2),
                Cabinet("Y", "640x640", x_mm=640),
            ),
            data_routes=(DataRoute("r1", 1, ("X:a", "X:b", "Y")),),
        )
        session = EditorSession(layout)
        session.update_cabinet("X", receiver_card_count=1)
        session.commit()
        assert session.history.current.find_route("r1").cabinet_ids == ("X", "Y")

    def test_auto_route_commits(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        routes = session.auto_route()
        assert len(routes) == 2
        assert session.can_undo

    def test_auto_power_commits(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        feeds = session.auto_power()
        assert feeds[0].id == "feed-1"
        session.undo()
        assert session.layout.project.power_feeds == ()

    def test_set_mode_commits_and_resets(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.select_cabinet("C1")
        session.set_project_mode(ProjectMode.OUTDOOR)
        assert session.layout.cabinets == ()
        assert session.selected_cabinet_id is None
        session.undo()
        assert session.layout.project.mode == ProjectMode.INDOOR

    def test_update_project_mode_drops_selection(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.select_cabinet("C1")
        session.update_project(mode=ProjectMode.OUTDOOR)
        assert session.layout.cabinets == ()
        assert session.selected_cabinet_id is None
        assert not session.can_undo


class TestCabinets:
    """Tests for cabinet helpers."""

    def test_add_selects(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.add_cabinet(Cabinet("C3", "640x640", x_mm=1280))
        assert session.selected_cabinet_id == "C3"

    def test_duplicate_selects_copy(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        new_id = session.duplicate_cabinet("C2")
        assert new_id == "C03"
        assert session.selected_cabinet_id == "C03"
        assert session.layout.find_cabinet("C03").x_mm == 1280

    def test_duplicate_missing(self, pair_layout) -> None:
        assert EditorSession(pair_layout).duplicate_cabinet("GHOST") is None

    def test_delete_drops_selection(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.select_cabinet("C1")
        session.delete_cabinet("C1")
        assert session.selected_cabinet_ids == []

    def test_rotate_selection(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.select_cabinet("C2")
        session.rotate_cabinets()
        assert session.layout.find_cabinet("C2").rot_deg == 90

    def test_select_issue(self, make_layout) -> None:
        session = EditorSession(make_layout((Cabinet("C1", "640x640"), Cabinet("C2", "640x640"))))
        issue = session.validate().by_code(IssueCode.OVERLAP)[0]
        assert session.select_issue(issue) == "C1"

    def test_derived_reads(self, square_layout) -> None:
        session = EditorSession(square_layout)
        assert session.grid_label("C2") == "A1"
        assert session.grid_label("GHOST") is None
        assert session.bounds().width == 1280


class TestRoutesAndFeeds:
    """Tests for route and feed helpers."""

    def test_add_route_uses_free_ports(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        first = session.add_data_route()
        second = session.add_data_route()
        assert (first.id, first.port) == ("route-1", 1)
        assert (second.id, second.port) == ("route-2", 2)
        assert session.add_data_route() is None

    def test_add_feed_ids(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        assert session.add_power_feed().id == "feed-1"
        assert session.add_power_feed().id == "feed-2"

    def test_feed_load(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        feed = session.add_power_feed()
        session.update_power_feed(feed.id, assigned_cabinet_ids=["C1", "C2"])
        assert session.load_w(feed.id) == 451
        assert not session.is_overloaded(feed.id)
        assert session.load_w("GHOST") is None

    def test_deleting_target_leaves_routing_mode(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        route = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(route.id))
        session.delete_data_route(route.id)
        assert not session.routing_mode.is_active


class TestManualRouting:
    """Tests for clicks in routing mode."""

    def test_click_selects_outside_routing(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        session.click_cabinet("C2")
        assert session.selected_cabinet_id == "C2"

    def test_click_builds_route(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        route = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(route.id))
        session.click_cabinet("C2")
        session.click_cabinet("C1")
        assert session.layout.find_route(route.id).cabinet_ids == ("C2", "C1")

    def test_click_dual_card_defaults_to_first_card(self, make_layout) -> None:
        layout = make_layout(
            (Cabinet("C1", "640x640", receiver_card_count=2),),
            controller=ControllerModel.A100,
        )
        session = EditorSession(layout)
        route = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(route.id))
        session.click_cabinet("C1")
        session.click_cabinet("C1", card_index=1)
        assert session.layout.find_route(route.id).cabinet_ids == ("C1:a", "C1:b")

    def test_cardless_cabinet_ignored(self, make_layout) -> None:
        session = EditorSession(make_layout((Cabinet("C1", "640x640", receiver_card_count=0),)))
        route = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(route.id))
        session.click_cabinet("C1")
        assert session.layout.find_route(route.id).cabinet_ids == ()

    def test_power_routing_toggles_feed(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        feed = session.add_power_feed()
        session.set_routing_mode(RoutingMode.power(feed.id))
        session.click_cabinet("C1")
        assert session.layout.find_feed(feed.id).assigned_cabinet_ids == ("C1",)

    def test_exit_commits(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        route = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(route.id))
        session.click_cabinet("C1")
        session.exit_routing_mode()
        assert session.can_undo
        session.undo()
        assert session.layout.project.data_routes == ()

    def test_switching_target_does_not_commit(self, pair_layout) -> None:
        session = EditorSession(pair_layout)
        first = session.add_data_route()
        second = session.add_data_route()
        session.set_routing_mode(RoutingMode.data(first.id))
        session.set_routing_mode(RoutingMode.data(second.id))
        assert not session.can_undo
