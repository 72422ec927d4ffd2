"""
Unit tests for the storage manager.
"""

import os
import tempfile

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from catalog.exceptions import RestoreNotFoundError
from catalog.models.item import Item
from catalog.models.rating import Rating
from catalog.models.review import Review
from catalog.utils.storage import StorageManager


@pytest.fixture
def storage():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield StorageManager(
            data_root=os.path.join(tmpdir, "data"),
            reports_root=os.path.join(tmpdir, "reports"),
            temp_root=os.path.join(tmpdir, "temp"),
        )


def test_initialization_creates_directories(storage):
    assert storage.data_root.is_dir()
    assert storage.reports_root.is_dir()
    # Snapshot directory is only created on first dump
    assert not storage.temp_root.exists()


def test_item_files_filters_by_prefix(storage):
    for name in ("product102.txt", "product101.txt", "notes.txt"):
        (storage.data_root / name).write_text("D|1|x|1.00|0\n", encoding="utf-8")

    names = [path.name for path in storage.item_files()]
    assert names == ["product101.txt", "product102.txt"]


def test_read_first_line(storage):
    path = storage.data_root / "product101.txt"
    path.write_text("D|101|Tea|1.99|4\nignored\n", encoding="utf-8")
    assert storage.read_first_line(path) == "D|101|Tea|1.99|4"

    empty = storage.data_root / "product102.txt"
    empty.write_text("", encoding="utf-8")
    assert storage.read_first_line(empty) is None


def test_review_lines(storage):
    assert storage.load_review_lines(101) is None

    storage.write_lines(storage.reviews_path(101), ["4|Nice", "", "2|Weak"])
    assert storage.load_review_lines(101) == ["4|Nice", "2|Weak"]


def test_snapshot_round_trip(storage):
    """Test saving and loading snapshot entries."""
    tea = Item.standard(101, "Tea", Decimal("1.99"), Rating.FOUR_STAR)
    cake = Item.perishable(103, "Cake", Decimal("3.99"), Rating.FIVE_STAR, date(2024, 6, 3))
    entries = [(tea, [Review(Rating.FOUR_STAR, "Nice")]), (cake, [])]

    snapshot_path = storage.save_snapshot(entries)

    assert snapshot_path.name.endswith(".tmp")
    assert storage.find_snapshot() == snapshot_path

    loaded = storage.load_snapshot(snapshot_path)
    assert loaded == entries
    assert loaded[1][0].best_before == date(2024, 6, 3)

    # No partial files left behind
    assert [p.name for p in storage.temp_root.iterdir()] == [snapshot_path.name]


def test_snapshot_names_never_collide(storage):
    """Test that snapshots taken at the same instant get distinct files."""
    tea = Item.standard(101, "Tea", Decimal("1.99"))

    with patch("catalog.utils.storage.datetime") as fake_datetime:
        fake_datetime.now.return_value = datetime(2024, 6, 1, 9, 0)
        first = storage.save_snapshot([(tea, [])])
        second = storage.save_snapshot([])

    assert first != second
    assert storage.load_snapshot(first) == [(tea, [])]
    assert storage.load_snapshot(second) == []


def test_write_lines_failure_keeps_previous_file(storage):
    """Test that an interrupted write leaves the old file intact."""
    path = storage.report_path(101)
    storage.write_lines(path, ["old report"])

    def failing_lines():
        yield "new first line"
        raise OSError("disk full")

    with pytest.raises(OSError, match="disk full"):
        storage.write_lines(path, failing_lines())

    assert path.read_text(encoding="utf-8") == "old report\n"
    assert [p.name for p in storage.reports_root.iterdir()] == [path.name]


def test_find_snapshot_missing(storage):
    with pytest.raises(RestoreNotFoundError):
        storage.find_snapshot()

    os.makedirs(storage.temp_root)
    (storage.temp_root / "readme.txt").write_text("not a snapshot", encoding="utf-8")
    with pytest.raises(RestoreNotFoundError):
        storage.find_snapshot()


def test_load_snapshot_corrupt(storage):
    os.makedirs(storage.temp_root)
    path = storage.temp_root / "1.tmp"
    path.write_bytes(b"definitely not a pickle")

    with pytest.raises(ValueError):
        storage.load_snapshot(path)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
