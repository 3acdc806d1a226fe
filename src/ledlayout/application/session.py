"""Interactive editing session.

``EditorSession`` owns the working layout, the history log, the current
selection and the manual routing mode. Plain edits change the working
layout only; the caller commits once a logical edit is complete.
Transactional helpers (card count changes, auto-route, auto-power,
leaving routing mode) apply and commit in one step.
"""

from __future__ import annotations

import logging
from typing import Any

from ledlayout.domain import (
    Cabinet,
    CabinetType,
    DataRoute,
    LayoutData,
    PowerFeed,
    ProjectMode,
)
from ledlayout.domain.services import (
    RoutingKind,
    RoutingMode,
    default_layout,
    format_endpoint,
    generate_cabinet_id,
    grid_label,
    is_overloaded,
    layout_bounds,
    load_w,
    normalize,
    validate_layout,
)
from ledlayout.domain.services.routing import default_power_feed
from ledlayout.domain.services.validation import Issue, ValidationReport
from ledlayout.domain.value_objects import LayoutBounds

from .commands import (
    AddCabinet,
    AddCabinetType,
    AddDataRoute,
    AddPowerFeed,
    AutoPower,
    AutoRoute,
    Command,
    DeleteCabinet,
    DeleteCabinetType,
    DeleteDataRoute,
    DeletePowerFeed,
    DuplicateCabinet,
    RotateCabinets,
    SetProjectMode,
    SetReceiverCardCount,
    TogglePowerFeedCabinet,
    ToggleRouteEndpoint,
    UpdateCabinet,
    UpdateDataRoute,
    UpdateExportSettings,
    UpdateOverviewSettings,
    UpdatePowerFeed,
    UpdateProject,
    apply_command,
)
from .history import MAX_HISTORY, HistoryManager

logger = logging.getLogger(__name__)


class EditorSession:
    """Single-user editing session over one layout document.

    Attributes:
        layout: The working document.
        history: Committed snapshots.
        selected_cabinet_ids: Current selection, primary cabinet last.
        routing_mode: Manual routing state.
    """

    def __init__(
        self, layout: LayoutData | None = None, max_history: int = MAX_HISTORY
    ) -> None:
        initial = normalize(layout) if layout is not None else default_layout()
        self.layout = initial
        self.history = HistoryManager(initial, max_size=max_history)
        self.selected_cabinet_ids: list[str] = []
        self.routing_mode = RoutingMode.none()

    # --- Core ------------------------------------------------------------

    def dispatch(self, command: Command) -> LayoutData:
        """Apply a command to the working layout without committing."""
        self.layout = apply_command(self.layout, command)
        return self.layout

    def commit(self) -> None:
        """Record the working layout as an undoable step."""
        self.history.commit(self.layout)

    def undo(self) -> LayoutData:
        self.layout = self.history.undo()
        self.clear_selection()
        return self.layout

    def redo(self) -> LayoutData:
        self.layout = self.history.redo()
        self.clear_selection()
        return self.layout

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def set_layout(self, layout: LayoutData) -> LayoutData:
        """Replace the document (e.g. on import) and restart history."""
        self.layout = normalize(layout)
        self.history.reset(self.layout)
        self.clear_selection()
        self.routing_mode = RoutingMode.none()
        return self.layout

    # --- Selection -------------------------------------------------------

    @property
    def selected_cabinet_id(self) -> str | None:
        return self.selected_cabinet_ids[-1] if self.selected_cabinet_ids else None

    def select_cabinet(self, cabinet_id: str | None) -> None:
        self.selected_cabinet_ids = [cabinet_id] if cabinet_id else []

    def clear_selection(self) -> None:
        self.selected_cabinet_ids = []

    def select_issue(self, issue: Issue) -> str | None:
        """Select the first cabinet implicated by a validation issue."""
        first = issue.cabinet_ids[0] if issue.cabinet_ids else None
        self.select_cabinet(first)
        return first

    # --- Catalog and cabinets ---------------------------------------------

    def add_cabinet_type(self, cabinet_type: CabinetType) -> None:
        self.dispatch(AddCabinetType(cabinet_type))

    def delete_cabinet_type(self, type_id: str) -> None:
        self.dispatch(DeleteCabinetType(type_id))

    def generate_cabinet_id(self) -> str:
        return generate_cabinet_id(self.layout.cabinet_ids)

    def add_cabinet(self, cabinet: Cabinet) -> None:
        self.dispatch(AddCabinet(cabinet))
        self.select_cabinet(cabinet.id)

    def update_cabinet(self, cabinet_id: str, **updates: Any) -> None:
        self.dispatch(UpdateCabinet(cabinet_id, updates))

    def delete_cabinet(self, cabinet_id: str) -> None:
        self.dispatch(DeleteCabinet(cabinet_id))
        self.selected_cabinet_ids = [i for i in self.selected_cabinet_ids if i != cabinet_id]

    def duplicate_cabinet(self, cabinet_id: str) -> str | None:
        """Copy a cabinet and select the copy.

        Returns:
            The new cabinet id, or None if the source does not exist.
        """
        if self.layout.find_cabinet(cabinet_id) is None:
            return None
        new_id = self.generate_cabinet_id()
        self.dispatch(DuplicateCabinet(cabinet_id, new_id))
        self.select_cabinet(new_id)
        return new_id

    def rotate_cabinets(self, cabinet_ids: list[str] | None = None) -> None:
        """Rotate the given cabinets, or the selection, a quarter turn."""
        ids = cabinet_ids if cabinet_ids is not None else self.selected_cabinet_ids
        self.dispatch(RotateCabinets(tuple(ids)))

    def set_receiver_card_count(self, cabinet_id: str, count: int) -> None:
        """Change a card count, rewriting routes, as a single undoable step."""
        self.dispatch(SetReceiverCardCount(cabinet_id, count))
        self.commit()

    # --- Data routes and power feeds ----------------------------------------

    def next_free_port(self) -> int | None:
        used = {r.port for r in self.layout.project.data_routes}
        return next(
            (p for p in range(1, self.layout.project.port_count + 1) if p not in used), None
        )

    def add_data_route(self, route: DataRoute | None = None) -> DataRoute | None:
        """Add a route, by default an empty one on the next free port.

        Returns:
            The added route, or None when every port is taken.
        """
        if route is None:
            port = self.next_free_port()
            if port is None:
                logger.info("All controller ports are in use; no route added")
                return None
            route = DataRoute(id=self._next_id("route", self._route_ids()), port=port)
        self.dispatch(AddDataRoute(route))
        return route

    def update_data_route(self, route_id: str, **updates: Any) -> None:
        self.dispatch(UpdateDataRoute(route_id, updates))

    def delete_data_route(self, route_id: str) -> None:
        self.dispatch(DeleteDataRoute(route_id))
        if self.routing_mode == RoutingMode.data(route_id):
            self.routing_mode = RoutingMode.none()

    def add_power_feed(self, feed: PowerFeed | None = None) -> PowerFeed:
        if feed is None:
            feed = default_power_feed(self._next_id("feed", self._feed_ids()))
        self.dispatch(AddPowerFeed(feed))
        return feed

    def update_power_feed(self, feed_id: str, **updates: Any) -> None:
        self.dispatch(UpdatePowerFeed(feed_id, updates))

    def delete_power_feed(self, feed_id: str) -> None:
        self.dispatch(DeletePowerFeed(feed_id))
        if self.routing_mode == RoutingMode.power(feed_id):
            self.routing_mode = RoutingMode.none()

    def auto_route(self) -> tuple[DataRoute, ...]:
        self.dispatch(AutoRoute())
        self.commit()
        return self.layout.project.data_routes

    def auto_power(self) -> tuple[PowerFeed, ...]:
        self.dispatch(AutoPower())
        self.commit()
        return self.layout.project.power_feeds

    def _route_ids(self) -> set[str]:
        return {r.id for r in self.layout.project.data_routes}

    def _feed_ids(self) -> set[str]:
        return {f.id for f in self.layout.project.power_feeds}

    @staticmethod
    def _next_id(prefix: str, taken: set[str]) -> str:
        counter = len(taken) + 1
        while f"{prefix}-{counter}" in taken:
            counter += 1
        return f"{prefix}-{counter}"

    # --- Manual routing -------------------------------------------------------

    def set_routing_mode(self, mode: RoutingMode) -> None:
        """Enter, switch or leave manual routing. Leaving always commits."""
        was_active = self.routing_mode.is_active
        self.routing_mode = mode
        if was_active and not mode.is_active:
            self.commit()

    def exit_routing_mode(self) -> None:
        self.set_routing_mode(RoutingMode.none())

    def click_cabinet(self, cabinet_id: str, card_index: int | None = None) -> None:
        """Handle a cabinet click.

        Outside routing mode this selects the cabinet. In data routing mode
        it toggles the clicked endpoint in the target route (card ``a`` when
        no card is given for a dual-card cabinet); cabinets without cards
        are ignored. In power routing mode it toggles the cabinet in the
        target feed.
        """
        mode = self.routing_mode
        if not mode.is_active or mode.target_id is None:
            self.select_cabinet(cabinet_id)
            return
        cabinet = self.layout.find_cabinet(cabinet_id)
        if cabinet is None:
            return
        if mode.kind == RoutingKind.POWER:
            self.dispatch(TogglePowerFeedCabinet(mode.target_id, cabinet_id))
            return
        if cabinet.receiver_card_count == 0:
            return
        if cabinet.receiver_card_count == 2:
            endpoint_id = format_endpoint(cabinet_id, card_index or 0)
        else:
            endpoint_id = format_endpoint(cabinet_id)
        self.dispatch(ToggleRouteEndpoint(mode.target_id, endpoint_id))

    # --- Project settings -------------------------------------------------------

    def update_project(self, **updates: Any) -> None:
        """Partially update the project.

        A mode change resets the design like ``set_project_mode`` and drops
        the selection and routing mode, but is not committed.
        """
        mode_before = self.layout.project.mode
        self.dispatch(UpdateProject(updates))
        if self.layout.project.mode != mode_before:
            self.clear_selection()
            self.routing_mode = RoutingMode.none()

    def update_overview_settings(self, **updates: Any) -> None:
        self.dispatch(UpdateOverviewSettings(updates))

    def update_export_settings(self, **updates: Any) -> None:
        self.dispatch(UpdateExportSettings(updates))

    def set_project_mode(self, mode: ProjectMode) -> None:
        """Switch mode, resetting the design, as a single undoable step."""
        before = self.layout
        self.dispatch(SetProjectMode(mode))
        if self.layout is before:
            return
        self.clear_selection()
        self.routing_mode = RoutingMode.none()
        self.commit()

    # --- Derived reads -----------------------------------------------------------

    def validate(self) -> ValidationReport:
        return validate_layout(self.layout)

    def bounds(self) -> LayoutBounds:
        return layout_bounds(self.layout)

    def grid_label(self, cabinet_id: str) -> str | None:
        cabinet = self.layout.find_cabinet(cabinet_id)
        if cabinet is None:
            return None
        return grid_label(cabinet, self.layout.cabinets, self.layout.cabinet_types)

    def load_w(self, feed_id: str) -> int | None:
        feed = self.layout.find_feed(feed_id)
        if feed is None:
            return None
        return load_w(feed, self.layout.cabinets, self.layout.cabinet_types, self.layout.project.mode)

    def is_overloaded(self, feed_id: str) -> bool:
        feed = self.layout.find_feed(feed_id)
        if feed is None:
            return False
        return is_overloaded(
            feed, self.layout.cabinets, self.layout.cabinet_types, self.layout.project.mode
        )
