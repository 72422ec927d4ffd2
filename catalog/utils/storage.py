"""
Storage utility.

File I/O helpers for item data files, review files, reports and
catalog snapshots.
"""

import os
import pickle
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from datetime import datetime

from catalog.exceptions import RestoreNotFoundError
from catalog.models.item import Item
from catalog.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)

Entries = List[Tuple[Item, List[Review]]]


class StorageManager:
    """
    Manages file I/O for all catalog persistence.

    Handles:
    - Item data files (data_root/product*)
    - Review files (reports_root/reviews{id}.txt)
    - Reports (reports_root/product{id}.txt)
    - Snapshots (temp_root/{timestamp}.tmp)
    """

    def __init__(
        self,
        data_root: str = str(settings.DATA_ROOT),
        reports_root: str = str(settings.REPORTS_ROOT),
        temp_root: str = str(settings.TEMP_ROOT),
        encoding: str = settings.FILE_ENCODING
    ):
        """
        Initialize storage manager.

        Args:
            data_root: Directory scanned for item data files
            reports_root: Directory for reports and review files
            temp_root: Directory for snapshots (created on first dump)
            encoding: Text file encoding
        """
        self.data_root = Path(data_root)
        self.reports_root = Path(reports_root)
        self.temp_root = Path(temp_root)
        self.encoding = encoding

        # Create directories if they don't exist
        os.makedirs(self.data_root, exist_ok=True)
        os.makedirs(self.reports_root, exist_ok=True)

        logger.info(
            f"Initialized StorageManager with data_root={data_root}, "
            f"reports_root={reports_root}, temp_root={temp_root}"
        )

    def item_files(self) -> List[Path]:
        """
        List item data files, sorted by name.

        Raises:
            OSError: If the data directory cannot be read
        """
        return sorted(
            path for path in self.data_root.iterdir()
            if path.is_file() and path.name.startswith(settings.ITEM_FILE_PREFIX)
        )

    def read_first_line(self, path: Path) -> Optional[str]:
        """
        Read the first line of a text file.

        Returns:
            The line without its line ending, or None for an empty file

        Raises:
            OSError: If the file cannot be read
        """
        with open(path, "r", encoding=self.encoding) as f:
            line = f.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def reviews_path(self, item_id: int) -> Path:
        return self.reports_root / settings.REVIEWS_FILE.format(id=item_id)

    def report_path(self, item_id: int) -> Path:
        return self.reports_root / settings.REPORT_FILE.format(id=item_id)

    def item_path(self, item_id: int) -> Path:
        return self.data_root / settings.ITEM_FILE.format(id=item_id)

    def load_review_lines(self, item_id: int) -> Optional[List[str]]:
        """
        Load the review record lines for an item.

        Returns:
            List of non-blank lines, or None if the item has no review file

        Raises:
            OSError: If the file exists but cannot be read
        """
        filepath = self.reviews_path(item_id)

        if not filepath.exists():
            logger.debug(f"No review file for item {item_id}")
            return None

        with open(filepath, "r", encoding=self.encoding) as f:
            lines = [line.rstrip("\r\n") for line in f]
        return [line for line in lines if line.strip()]

    def write_lines(self, filepath: Path, lines: List[str]) -> None:
        """
        Write text lines to a file, replacing its content.

        Lines go to a partial file that is renamed over filepath once
        complete, so a failed write leaves any previous file untouched.

        Raises:
            OSError: If the file cannot be written
        """
        filepath = Path(filepath)
        partial_path = filepath.with_name(filepath.name + ".part")
        count = 0
        try:
            with open(partial_path, "w", encoding=self.encoding, newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
                    count += 1
            os.replace(partial_path, filepath)
        except Exception:
            if partial_path.exists():
                partial_path.unlink()
            raise
        logger.debug(f"Wrote {count} lines to {filepath}")

    def save_snapshot(self, entries: Entries) -> Path:
        """
        Serialize catalog entries to a new timestamped snapshot file.

        Writes to a temporary file first, then renames it into place.

        Returns:
            Path of the snapshot file

        Raises:
            OSError: If the snapshot cannot be written
            pickle.PicklingError: If an entry cannot be serialized
        """
        os.makedirs(self.temp_root, exist_ok=True)

        now = datetime.now()
        timestamp = int(now.timestamp() * 1000)
        snapshot_path = self.temp_root / settings.SNAPSHOT_FILE.format(timestamp=timestamp)
        # Never overwrite an existing snapshot
        while snapshot_path.exists():
            timestamp += 1
            snapshot_path = self.temp_root / settings.SNAPSHOT_FILE.format(timestamp=timestamp)

        data = {
            "version": settings.SNAPSHOT_VERSION,
            "created_at": now.isoformat(),
            "entries": entries,
        }

        # Atomic write: write to partial file, then rename
        partial_path = snapshot_path.with_name(snapshot_path.name + ".part")
        try:
            with open(partial_path, "wb") as f:
                pickle.dump(data, f, protocol=pickle.HIGHEST_PROTOCOL)
            os.replace(partial_path, snapshot_path)
        except Exception:
            if partial_path.exists():
                partial_path.unlink()
            raise

        logger.info(f"Snapshot saved: {len(entries)} items to {snapshot_path}")
        return snapshot_path

    def find_snapshot(self) -> Path:
        """
        Return the first snapshot file found in the snapshot directory.

        Directory listing order decides which file is first; this is not
        necessarily the most recent snapshot.

        Raises:
            RestoreNotFoundError: If no snapshot file exists
        """
        if not self.temp_root.is_dir():
            raise RestoreNotFoundError(str(self.temp_root))

        with os.scandir(self.temp_root) as it:
            for entry in it:
                if entry.is_file() and entry.name.endswith(settings.SNAPSHOT_SUFFIX):
                    return Path(entry.path)

        raise RestoreNotFoundError(str(self.temp_root))

    def load_snapshot(self, snapshot_path: Path) -> Entries:
        """
        Deserialize catalog entries from a snapshot file.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file does not hold a catalog snapshot
        """
        with open(snapshot_path, "rb") as f:
            try:
                data = pickle.load(f)
            except Exception as e:
                raise ValueError(f"Corrupt snapshot {snapshot_path}: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise ValueError(f"Unrecognized snapshot format in {snapshot_path}")

        entries = data["entries"]
        for entry in entries:
            if (
                not isinstance(entry, tuple) or len(entry) != 2
                or not isinstance(entry[0], Item)
                or not all(isinstance(r, Review) for r in entry[1])
            ):
                raise ValueError(f"Unrecognized snapshot entry in {snapshot_path}")

        logger.debug(
            f"Loaded snapshot version {data.get('version')} "
            f"created at {data.get('created_at')}"
        )
        return entries

    def delete(self, path: Path) -> None:
        """Remove a file."""
        os.remove(path)
        logger.debug(f"Deleted {path}")
