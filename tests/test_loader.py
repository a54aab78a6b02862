"""
Tests for batch record models and JSON loading.
"""

import json

import pytest
from pydantic import ValidationError

from synth_converter.errors import ConversionError
from synth_converter.loaders import (
    ActionName,
    Batch,
    BatchLoadError,
    load_all_batches,
    load_batch,
    parse_batch,
)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestParseBatch:
    def test_camel_case_fields(self, full_batch):
        assert full_batch.batch_id == "23"
        assert len(full_batch.actions) == 3

        temperature, add, shake = full_batch.actions
        assert temperature.sub_equipment_name == "heater"
        assert temperature.temperature_shaker.value == 25.0
        assert temperature.container_info.container_barcode == "1"

        assert add.dispense_state == "Liquid"
        assert [p.position for p in add.has_container_position_and_quantity] == ["A1", "B1"]
        assert add.has_sample.container.container_id == "19"
        item = add.has_sample.has_sample[0]
        assert item.internal_bar_code == "1"
        assert item.has_chemical.cas_number == "13755-29-8"
        assert item.has_chemical.molecular_mass.unit == "g/mol"

        assert shake.has_sample is None
        assert shake.has_container_position_and_quantity is None

    def test_snake_case_names(self):
        batch = parse_batch(
            {
                "batch_id": "B-9",
                "actions": [{"action_name": "AddAction", "start_time": "2024-01-01T00:00:00"}],
            }
        )

        assert batch.batch_id == "B-9"
        assert batch.actions[0].start_time == "2024-01-01T00:00:00"

    def test_unknown_fields_are_ignored(self):
        batch = parse_batch({"batchID": "B", "operator": "x", "Actions": []})
        assert batch.actions == []

    def test_integer_values_become_floats(self):
        batch = parse_batch(
            {"batchID": "B", "Actions": [{"actionName": "x", "speedShaker": {"value": 152, "unit": "rpm"}}]}
        )
        value = batch.actions[0].speed_shaker.value

        assert isinstance(value, float)
        assert value == 152.0

    def test_missing_action_name(self):
        with pytest.raises(BatchLoadError, match="actionName"):
            parse_batch({"batchID": "B", "Actions": [{"startTime": "2024-01-01T00:00:00"}]})

    def test_missing_batch_id(self):
        with pytest.raises(BatchLoadError) as exc_info:
            parse_batch({"Actions": []}, source="b.json")

        assert exc_info.value.source == "b.json"
        assert isinstance(exc_info.value, ConversionError)

    def test_observation_needs_unit_and_value(self):
        with pytest.raises(BatchLoadError):
            parse_batch(
                {"batchID": "B", "Actions": [{"actionName": "x", "temperatureShaker": {"value": 1}}]}
            )

    def test_records_are_immutable(self, full_batch):
        with pytest.raises(ValidationError):
            full_batch.batch_id = "other"


class TestActionName:
    @pytest.mark.parametrize(
        "tag, kind",
        [
            ("AddAction", ActionName.ADD),
            ("setTemperatureAction", ActionName.SET_TEMPERATURE),
            ("shakeAction", ActionName.UNRECOGNIZED),
            ("unrecognized", ActionName.UNRECOGNIZED),
            ("SetTemperatureAction", ActionName.UNRECOGNIZED),
        ],
    )
    def test_from_tag(self, tag, kind):
        assert ActionName.from_tag(tag) is kind

    def test_action_kind(self, full_batch):
        assert [a.kind for a in full_batch.actions] == [
            ActionName.SET_TEMPERATURE,
            ActionName.ADD,
            ActionName.UNRECOGNIZED,
        ]


class TestLoadBatch:
    def test_load_file(self, tmp_path, full_batch_data):
        path = write_json(tmp_path / "batch.json", full_batch_data)
        batch = load_batch(path)

        assert isinstance(batch, Batch)
        assert batch.batch_id == "23"

    def test_missing_file(self, tmp_path):
        with pytest.raises(BatchLoadError, match="missing.json"):
            load_batch(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(BatchLoadError, match="invalid JSON"):
            load_batch(path)

    def test_top_level_list(self, tmp_path, full_batch_data):
        path = write_json(tmp_path / "list.json", [full_batch_data])

        with pytest.raises(BatchLoadError, match="must be an object"):
            load_batch(path)

    def test_load_all_sorted_with_limit(self, tmp_path, full_batch_data):
        for name, batch_id in [("b.json", "second"), ("a.json", "first"), ("c.json", "third")]:
            write_json(tmp_path / name, {**full_batch_data, "batchID": batch_id})
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        assert [b.batch_id for b in load_all_batches(tmp_path)] == ["first", "second", "third"]
        assert [b.batch_id for b in load_all_batches(tmp_path, limit=2)] == ["first", "second"]
