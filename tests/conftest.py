from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

HEADER = [
    "Collection",
    "SongId",
    "Song",
    "Description",
    "Animation",
    "Image",
    "Artist",
    "Genre",
    "BPM",
    "Duration",
    "Release Date",
]


def _row(**overrides: str) -> dict:
    row = {
        "Collection": "1",
        "SongId": "1",
        "Song": "A",
        "Description": "d",
        "Animation": "http://a/b c.mp4",
        "Image": "http://a/i.png",
        "Artist": "X",
        "Genre": "Y",
        "BPM": "120",
        "Duration": "3:00",
        "Release Date": "2020",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row() -> Callable[..., dict]:
    return _row


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """行データ(dict)のリストからテスト用CSVを作成する fixture。"""

    def _write(rows: Sequence[dict], header: Sequence[str] = HEADER, name: str = "input.csv") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as file_obj:
            writer = csv.DictWriter(file_obj, fieldnames=list(header))
            writer.writeheader()
            for row in rows:
                writer.writerow({k: v for k, v in row.items() if k in header})
        return path

    return _write
