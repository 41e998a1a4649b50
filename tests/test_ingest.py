"""Tests for trajectory CSV/xlsx and interaction JSON ingestion."""

import json
import math

import pytest
from openpyxl import Workbook

from trajtrust.errors import IngestError
from trajtrust.ingest import (
    build_trajectories,
    detect_columns,
    dump_interactions,
    load_interactions,
    load_trajectories,
    parse_samples,
    read_xlsx_rows,
)
from trajtrust.models import Interaction, Vector


HEADER = ["vehicleID", "time(s)", "longitudinalDistance(m)",
          "distanceToUpperLaneLine(m)", "distanceToLowerLaneLine(m)", "speed(m/s)"]


def write_csv(tmp_path, rows, header=HEADER):
    path = tmp_path / "trajectories.csv"
    lines = [",".join(header)] + [",".join(str(c) for c in row) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return str(path)


class TestColumns:
    def test_detects_any_order(self):
        header = list(reversed(HEADER))
        cols = detect_columns(header)
        assert cols["speed"] == 0
        assert cols["vehicle_id"] == 5

    def test_missing_column(self):
        with pytest.raises(IngestError, match="speed"):
            detect_columns(HEADER[:-1])


class TestParseSamples:
    def test_normalises_position(self):
        rows = [HEADER, ["7", "0.0", "176", "1.0", "3.0", "12.5"]]
        (sample,) = parse_samples(rows, road_length=352.0)
        assert sample.vehicle_id == "7"
        assert sample.x == pytest.approx(0.5)
        assert sample.y == pytest.approx(2.0)
        assert sample.speed == 12.5

    def test_skips_blank_rows(self):
        rows = [HEADER, ["1", "0", "0", "1", "1", "1"], ["", "", "", "", "", ""]]
        assert len(parse_samples(rows)) == 1

    def test_bad_number(self):
        rows = [HEADER, ["1", "zero", "0", "1", "1", "1"]]
        with pytest.raises(IngestError, match="line 2"):
            parse_samples(rows)

    def test_empty_file(self):
        with pytest.raises(IngestError, match="empty"):
            parse_samples([])


class TestLoadTrajectories:
    def test_groups_sorts_and_derives_heading(self, tmp_path):
        path = write_csv(tmp_path, [
            ["a", 2, 70.4, 2, 2, 11],
            ["a", 1, 35.2, 1, 1, 10],
            ["b", 1, 0, 1, 1, 0],
        ])
        traj = load_trajectories(path)
        assert set(traj) == {"a", "b"}
        first, second = traj["a"]
        assert first.speed == 10.0
        assert first.location == pytest.approx(0.1)
        assert first.direction == 0.0
        assert second.location == pytest.approx(0.2)
        assert second.direction == pytest.approx(math.atan2(1.0, 0.1))
        assert traj["b"][0].speed == 0.0

    def test_missing_header(self, tmp_path):
        path = write_csv(tmp_path, [["a", 1, 2, 3]], header=["vehicleID", "time(s)", "x", "y"])
        with pytest.raises(IngestError):
            load_trajectories(path)

    def test_reads_first_xlsx_worksheet(self, tmp_path):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(HEADER)
        sheet.append(["a", 2, 70.4, 2, 2, 11])
        sheet.append(["a", 1, 35.2, 1, 1, 10])
        sheet.append([None] * len(HEADER))
        sheet.append(["b", 1, 0, 1, 1, 0])
        workbook.create_sheet("ignored").append(["not", "a", "trajectory"])
        path = str(tmp_path / "data.xlsx")
        workbook.save(path)

        traj = load_trajectories(path)
        assert set(traj) == {"a", "b"}
        first, second = traj["a"]
        assert first.location == pytest.approx(0.1)
        assert second.speed == 11.0
        assert second.direction == pytest.approx(math.atan2(1.0, 0.1))

    def test_xlsx_missing_column(self, tmp_path):
        workbook = Workbook()
        workbook.active.append(HEADER[:-1])
        path = str(tmp_path / "data.xlsx")
        workbook.save(path)
        with pytest.raises(IngestError, match="speed"):
            load_trajectories(path)

    def test_unreadable_xlsx(self, tmp_path):
        path = tmp_path / "data.xlsx"
        path.write_text("not a workbook")
        with pytest.raises(IngestError, match="xlsx"):
            read_xlsx_rows(str(path))

    def test_build_single_sample_heading_zero(self):
        from trajtrust.ingest import RawSample
        traj = build_trajectories([RawSample("v", 0.0, 0.3, 1.0, 5.0)])
        assert traj["v"] == [Vector(5.0, 0.3, 0.0)]


class TestInteractionFiles:
    def test_dump_then_load(self, tmp_path):
        records = [
            Interaction(sender="1", recipient="2", pos_events=1, timestamp=3.0, comm_quality=0.9,
                        sender_trajectory=(Vector(10, 0.1, 0.0),),
                        recipient_trajectory=(Vector(9, 0.12, 0.1),)),
            Interaction(sender="2", recipient="1", neg_events=2, timestamp=4.0),
        ]
        path = str(tmp_path / "log.json")
        dump_interactions(records, path)
        assert load_interactions(path) == records

    def test_defaults_for_optional_fields(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text(json.dumps([{"sender": "x", "recipient": "y"}]))
        (record,) = load_interactions(str(path))
        assert record.pos_events == 0
        assert record.comm_quality == 0.5
        assert record.sender_trajectory == ()

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text(json.dumps({"sender": "x"}))
        with pytest.raises(IngestError, match="list"):
            load_interactions(str(path))

    def test_missing_sender(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text(json.dumps([{"recipient": "y"}]))
        with pytest.raises(IngestError, match="malformed"):
            load_interactions(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text("[{")
        with pytest.raises(IngestError):
            load_interactions(str(path))

    def test_fractional_event_count_rejected(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text(json.dumps([{"sender": "x", "recipient": "y", "pos_events": 1.7}]))
        with pytest.raises(IngestError, match="whole number"):
            load_interactions(str(path))

    def test_integral_float_event_count_kept(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_text(json.dumps([{"sender": "x", "recipient": "y", "neg_events": 2.0}]))
        (record,) = load_interactions(str(path))
        assert record.neg_events == 2
