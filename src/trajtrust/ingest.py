"""
Ingestion collaborators: vehicle trajectory tables (CSV or .xlsx) and
interaction JSON files.

Trajectory columns (any order, detected from the header row; for .xlsx
the first worksheet is read):

    vehicleID, time(s), longitudinalDistance(m),
    distanceToUpperLaneLine(m), distanceToLowerLaneLine(m), speed(m/s)

Per vehicle, samples are sorted by time and turned into Vectors:
location = longitudinal / road_length, lateral y = (upper + lower) / 2,
direction = atan2(Δy, Δx) against the previous sample (0 for the first).
"""

from __future__ import annotations

import csv
import json
import logging
import math
from dataclasses import dataclass
from typing import Iterable
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import IngestError
from .models import Interaction, Vector

logger = logging.getLogger(__name__)

ROAD_LENGTH_M = 352.0

COLUMNS = {
    "vehicle_id": "vehicleID",
    "time": "time(s)",
    "longitudinal": "longitudinalDistance(m)",
    "upper": "distanceToUpperLaneLine(m)",
    "lower": "distanceToLowerLaneLine(m)",
    "speed": "speed(m/s)",
}


@dataclass
class RawSample:
    vehicle_id: str
    time: float
    x: float
    y: float
    speed: float


def detect_columns(header: list[str]) -> dict[str, int]:
    """Map logical column names to indexes; IngestError on missing headers."""
    index = {title.strip(): i for i, title in enumerate(header)}
    missing = [title for title in COLUMNS.values() if title not in index]
    if missing:
        raise IngestError(f"trajectory file is missing columns: {', '.join(missing)}")
    return {key: index[title] for key, title in COLUMNS.items()}


def parse_samples(rows: Iterable[list[str]], road_length: float = ROAD_LENGTH_M) -> list[RawSample]:
    """Parse table rows (header first) into raw samples."""
    rows = iter(rows)
    try:
        header = next(rows)
    except StopIteration:
        raise IngestError("trajectory file is empty") from None
    cols = detect_columns(header)

    samples = []
    for line_no, row in enumerate(rows, start=2):
        if not any(cell.strip() for cell in row):
            continue
        try:
            upper = float(row[cols["upper"]])
            lower = float(row[cols["lower"]])
            samples.append(RawSample(
                vehicle_id=row[cols["vehicle_id"]].strip(),
                time=float(row[cols["time"]]),
                x=float(row[cols["longitudinal"]]) / road_length,
                y=(upper + lower) / 2.0,
                speed=float(row[cols["speed"]]),
            ))
        except (ValueError, IndexError) as e:
            raise IngestError(f"line {line_no}: cannot parse trajectory row: {e}") from e
    return samples


def build_trajectories(samples: Iterable[RawSample]) -> dict[str, list[Vector]]:
    """Group samples per vehicle, sort by time and derive headings."""
    by_vehicle: dict[str, list[RawSample]] = {}
    for s in samples:
        by_vehicle.setdefault(s.vehicle_id, []).append(s)

    trajectories = {}
    for vid, points in by_vehicle.items():
        points.sort(key=lambda p: p.time)
        vectors = []
        for i, p in enumerate(points):
            direction = 0.0
            if i > 0:
                prev = points[i - 1]
                direction = math.atan2(p.y - prev.y, p.x - prev.x)
            vectors.append(Vector(speed=p.speed, location=p.x, direction=direction))
        trajectories[vid] = vectors
    return trajectories


def read_xlsx_rows(path: str) -> list[list[str]]:
    """Rows of the first worksheet, cells stringified ("" for empty cells)."""
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile) as e:
        raise IngestError(f"{path} is not a readable xlsx workbook: {e}") from e
    try:
        sheet = workbook.worksheets[0]
        return [["" if cell is None else str(cell) for cell in row]
                for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def load_trajectories(path: str, road_length: float = ROAD_LENGTH_M) -> dict[str, list[Vector]]:
    """Read a trajectory CSV or .xlsx workbook into per-vehicle vector sequences."""
    if path.lower().endswith(".xlsx"):
        samples = parse_samples(read_xlsx_rows(path), road_length)
    else:
        with open(path, newline="") as f:
            samples = parse_samples(csv.reader(f), road_length)
    trajectories = build_trajectories(samples)
    logger.info("loaded %d samples for %d vehicles from %s",
                len(samples), len(trajectories), path)
    return trajectories


# ─── Interaction files ─────────────────────────────────────────────

def load_interactions(path: str) -> list[Interaction]:
    """Read a JSON list of interaction records."""
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise IngestError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise IngestError(f"{path} must hold a JSON list of interactions")
    try:
        return [Interaction.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise IngestError(f"{path}: malformed interaction record: {e}") from e


def dump_interactions(records: Iterable[Interaction], path: str) -> None:
    with open(path, "w") as f:
        json.dump([r.to_dict() for r in records], f, indent=2)
