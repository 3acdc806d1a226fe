"""Unit tests for layout document loading and saving.

These tests verify:
- Missing files, malformed JSON and missing keys raise LayoutImportError
- Bad leaf values fall back to defaults instead of failing the import
- The receiver card override round-trips through its three states
- Saved documents load back to the same layout
"""

import json
from pathlib import Path

import pytest

from ledlayout.application import (
    LayoutImportError,
    dump_layout,
    layout_to_dict,
    load_layout,
    load_layout_from_dict,
    load_layout_from_string,
    save_layout,
)
from ledlayout.domain import (
    Cabinet,
    ControllerModel,
    ControllerPlacement,
    PowerFeed,
    ProjectMode,
    ReceiverCardOverride,
    Rotation,
)
from ledlayout.domain.modes import INDOOR_CABINET_TYPES
from ledlayout.domain.value_objects import ReceiverCardKind


class TestLoadErrors:
    """Tests for import failures."""

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(LayoutImportError) as exc_info:
            load_layout(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"
        assert "not found" in str(exc_info.value)

    def test_invalid_json(self) -> None:
        with pytest.raises(LayoutImportError) as exc_info:
            load_layout_from_string('{"schemaVersion": 2,\n  "project": }')
        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 2

    def test_missing_keys(self, layout_document) -> None:
        del layout_document["cabinets"]
        del layout_document["schemaVersion"]
        with pytest.raises(LayoutImportError) as exc_info:
            load_layout_from_dict(layout_document)
        error = exc_info.value
        assert error.error_type == "missing_keys"
        assert error.details == [{"key": "schemaVersion"}, {"key": "cabinets"}]
        assert error.message == "Invalid layout file: missing schemaVersion, cabinets"

    def test_not_an_object(self) -> None:
        with pytest.raises(LayoutImportError) as exc_info:
            load_layout_from_string("[1, 2, 3]")
        assert exc_info.value.error_type == "validation"

    def test_path_in_message(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{}")
        with pytest.raises(LayoutImportError) as exc_info:
            load_layout(path)
        assert exc_info.value.path == path
        assert str(path) in exc_info.value.message


class TestLoad:
    """Tests for successful imports."""

    def test_document_fields(self, layout_document) -> None:
        layout = load_layout_from_dict(layout_document)
        assert layout.project.name == "Main Stage"
        assert layout.project.client == "ACME"
        assert layout.project.controller == ControllerModel.A100
        assert layout.cabinet_ids == ["C1", "C2"]
        assert layout.find_cabinet("C2").x_mm == 640

    def test_load_from_file(self, tmp_path: Path, layout_document) -> None:
        path = tmp_path / "wall.json"
        path.write_text(json.dumps(layout_document), encoding="utf-8")
        assert load_layout(path).project.name == "Main Stage"

    def test_minimal_document_gets_defaults(self) -> None:
        layout = load_layout_from_dict({"schemaVersion": 1, "project": {}, "cabinets": []})
        assert layout.schema_version == 2
        assert layout.project.mode == ProjectMode.INDOOR
        assert layout.cabinet_types == INDOOR_CABINET_TYPES
        assert (layout.project.pitch_mm, layout.project.pitch_is_gob) == (2.5, True)

    def test_bad_leaf_values_fall_back(self, layout_document) -> None:
        layout_document["project"]["controller"] = "Z9000"
        layout_document["project"]["grid"] = "on"
        layout_document["cabinets"][0].update(
            {"x_mm": "160", "rot_deg": 95, "receiverCardCount": 7}
        )
        layout_document["cabinets"].append("not a cabinet")
        layout = load_layout_from_dict(layout_document)
        cabinet = layout.find_cabinet("C1")
        assert layout.project.controller == ControllerModel.A200
        assert layout.project.grid.enabled
        assert cabinet.x_mm == 160
        assert cabinet.rot_deg == Rotation.R90
        assert cabinet.receiver_card_count == 1
        assert len(layout.cabinets) == 2

    def test_unknown_keys_ignored(self, layout_document) -> None:
        layout_document["legacyField"] = {"anything": 1}
        layout_document["cabinets"][0]["color"] = "red"
        assert len(load_layout_from_dict(layout_document).cabinets) == 2

    def test_outdoor_without_placement_is_cabinet_mounted(self, layout_document) -> None:
        project = layout_document["project"]
        project["mode"] = "outdoor"
        del project["controllerPlacement"]
        del project["pitch_mm"]
        layout = load_layout_from_dict(layout_document)
        assert layout.project.controller_placement == ControllerPlacement.CABINET
        assert layout.project.pitch_mm == 6.67

    def test_manual_assignments_are_immutable_pairs(self, layout_document) -> None:
        layout_document["project"]["overview"] = {
            "mappingNumbers": {
                "manualAssignments": {"perChain": {"route-1": "5"}, "perEndpoint": {"C1": 7}}
            }
        }
        layout = load_layout_from_dict(layout_document)
        mapping = layout.project.overview.mapping_numbers
        assert mapping.per_chain == (("route-1", "5"),)
        assert mapping.endpoint_label("C1") == "7"
        assert mapping.chain_label("route-9") is None
        assert hash(layout) == hash(load_layout_from_dict(layout_document))

    def test_non_positive_type_dropped(self, layout_document) -> None:
        layout_document["cabinetTypes"].append({"typeId": "flat", "width_mm": 0, "height_mm": 10})
        layout = load_layout_from_dict(layout_document)
        assert layout.find_type("flat") is None


class TestReceiverCardOverride:
    """The override key is tri-state."""

    def _load_override(self, layout_document, **extra) -> Cabinet:
        layout_document["cabinets"][0].update(extra)
        return load_layout_from_dict(layout_document).find_cabinet("C1")

    def test_absent_key_is_default(self, layout_document) -> None:
        cabinet = self._load_override(layout_document)
        assert cabinet.receiver_card_override.is_default
        assert cabinet.receiver_card_count == 1

    def test_null_hides_card(self, layout_document) -> None:
        cabinet = self._load_override(layout_document, receiverCardOverride=None)
        assert cabinet.receiver_card_override.is_hidden
        assert cabinet.receiver_card_count == 0

    def test_string_is_custom(self, layout_document) -> None:
        cabinet = self._load_override(layout_document, receiverCardOverride=" A8s ")
        assert cabinet.receiver_card_override.kind == ReceiverCardKind.CUSTOM
        assert cabinet.receiver_card_override.model == "A8s"

    def test_blank_string_is_default(self, layout_document) -> None:
        cabinet = self._load_override(layout_document, receiverCardOverride="  ")
        assert cabinet.receiver_card_override.is_default

    def test_serialized_states(self, make_layout) -> None:
        layout = make_layout(
            (
                Cabinet("D", "640x640"),
                Cabinet("H", "640x640", receiver_card_override=ReceiverCardOverride.hidden()),
                Cabinet("X", "640x640", receiver_card_override=ReceiverCardOverride.custom("A8s")),
            )
        )
        cabinets = layout_to_dict(layout)["cabinets"]
        assert "receiverCardOverride" not in cabinets[0]
        assert cabinets[1]["receiverCardOverride"] is None
        assert cabinets[2]["receiverCardOverride"] == "A8s"
        assert all("receiverCardCount" in c for c in cabinets)


class TestSave:
    """Tests for serialization."""

    def test_document_keys(self, pair_layout) -> None:
        data = layout_to_dict(pair_layout)
        assert list(data) == ["schemaVersion", "project", "cabinetTypes", "cabinets"]
        assert data["cabinets"][1] == {
            "id": "C2",
            "typeId": "640x640",
            "x_mm": 640,
            "y_mm": 0,
            "rot_deg": 0,
            "receiverCardCount": 1,
        }
        assert "controllerCabinetId" not in data["project"]

    def test_optional_feed_keys(self, make_layout) -> None:
        layout = make_layout(
            power_feeds=(PowerFeed("f1", breaker=None), PowerFeed("f2", load_override_w=1200.5)),
        )
        feeds = layout_to_dict(layout)["project"]["powerFeeds"]
        assert "breaker" not in feeds[0]
        assert "loadOverrideW" not in feeds[0]
        assert feeds[1]["loadOverrideW"] == 1200.5

    def test_round_trip(self, tmp_path: Path, layout_document) -> None:
        layout = load_layout_from_dict(layout_document)
        path = tmp_path / "out.json"
        save_layout(layout, path)
        assert load_layout(path) == layout

    def test_dump_is_stable(self, layout_document) -> None:
        text = dump_layout(load_layout_from_dict(layout_document))
        assert dump_layout(load_layout_from_string(text)) == text

    def test_compact_dump(self, pair_layout) -> None:
        assert "\n" not in dump_layout(pair_layout, indent=None)
