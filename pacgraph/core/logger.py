from typeguard import typechecked
import hashlib
import json
import time
import os
from typing import Any, Dict, List, Optional
from pathlib import Path

from pacgraph.core.console import *


class LoggerError(Exception):
    """Custom exception for Logger-related errors."""

    pass


class ValidationError(LoggerError):
    """Exception raised when a turn record is malformed."""

    pass


class FileFormatError(LoggerError):
    """Exception raised when a log file is not JSON or is corrupted."""

    pass


@typechecked
class Logger:
    """
    Turn recorder. Keeps one record per game turn (agent positions, targets and
    ledger size) and persists them together with run metadata as JSON.
    """

    SUPPORTED_SUFFIX = ".json"

    def __init__(self, name: str, metadata: Optional[Dict[str, Any]] = None, path: str = "", filename_pattern: str = "{name}_{hash}_{timestamp}"):
        """
        Args:
            name (str): The name of the run, used in generated filenames.
            metadata (Dict[str, Any], optional): Run-level parameters (grid size, config).
            path (str, optional): Directory used to read/write files.
            filename_pattern (str): Pattern for auto-generated filenames.
        """
        self.name: str = name
        self.metadata: Dict[str, Any] = metadata if metadata is not None else {}
        self.path: str = path
        self.filename_pattern: str = filename_pattern
        self._records: List[Dict[str, Any]] = []
        self._last_turn: Optional[int] = None

    def _validate_record(self, record: Dict[str, Any]) -> None:
        if "turn" not in record:
            raise ValidationError("Record must contain 'turn' field")

        if not isinstance(record["turn"], int) or record["turn"] < 0:
            raise ValidationError(f"Turn field must be a non-negative integer, got {record['turn']!r}")

        if self._last_turn is not None and record["turn"] <= self._last_turn and not record.get("summary", False):
            raise ValidationError(f"Turn {record['turn']} does not follow turn {self._last_turn}")

    def _generate_filename(self) -> str:
        meta_str = json.dumps(self.metadata, sort_keys=True, default=str)
        hash_value = hashlib.sha256((meta_str + str(time.time())).encode("utf-8")).hexdigest()[:16]
        timestamp = str(int(time.time()))
        filename = self.filename_pattern.format(name=self.name, hash=hash_value, timestamp=timestamp)
        return filename + self.SUPPORTED_SUFFIX

    def log_turn(self, turn: int, data: Dict[str, Any]) -> None:
        """
        Record the state of one turn.

        Args:
            turn (int): Turn number, strictly increasing.
            data (dict): Turn payload.
        """
        record = {"turn": turn, **data}
        try:
            self._validate_record(record)
        except ValidationError as e:
            error(f"Validation failed for turn record: {str(e)}")
            raise
        self._records.append(record)
        self._last_turn = turn

    def get_records(self) -> List[Dict[str, Any]]:
        """Return a copy of all logged records."""
        return self._records.copy()

    def set_records(self, records: List[Dict[str, Any]]) -> None:
        """Replace the current records, validating turn order."""
        self.clear_records()
        for i, record in enumerate(records):
            try:
                self._validate_record(record)
            except ValidationError as e:
                raise ValidationError(f"Invalid record at index {i}: {str(e)}")
            self._records.append(record)
            if not record.get("summary", False):
                self._last_turn = record["turn"]

    def get_metadata(self) -> Dict[str, Any]:
        return self.metadata.copy()

    def get_record_count(self) -> int:
        return len(self._records)

    def get_turn_range(self) -> Optional[tuple]:
        """Get the (first, last) turn numbers of all non-summary records."""
        turns = [r["turn"] for r in self._records if not r.get("summary", False)]
        if not turns:
            return None
        return min(turns), max(turns)

    def finalize(self, turn: int, **summary_data: Any) -> None:
        """
        Append a final summary record.

        Args:
            turn (int): The turn at which the run ended.
            **summary_data: Arbitrary summary values.
        """
        summary = {"summary": True, "turn": turn}
        summary.update(summary_data)
        self._records.append(summary)

    def extract_summary(self) -> List[Dict[str, Any]]:
        """Return all summary records."""
        return [record for record in self._records if record.get("summary", False)]

    def write_to_file(self, filename: Optional[str] = None, force: bool = False) -> str:
        """
        Write metadata and records to a JSON file.

        Args:
            filename (str, optional): Target file name. If None, auto-generate.
            force (bool): Overwrite an existing file.

        Returns:
            str: The file name used.
        """
        if filename is None:
            filename = self._generate_filename()

        if Path(filename).suffix.lower() != self.SUPPORTED_SUFFIX:
            raise FileFormatError(f"Unsupported file format: {Path(filename).suffix}. Only {self.SUPPORTED_SUFFIX} is written")

        full_path = os.path.join(self.path, filename)
        if os.path.exists(full_path) and not force:
            raise FileExistsError(f"File {full_path} already exists. Use force=True to overwrite.")

        data = {"metadata": self.metadata, "records": self._records, "stats": {"record_count": len(self._records), "turn_range": self.get_turn_range()}}
        try:
            with open(full_path, "w") as f:
                json.dump(data, f, indent=4)
        except (IOError, OSError) as e:
            raise LoggerError(f"Failed to write file {full_path}: {str(e)}")

        info(f"Wrote {len(self._records)} records to {full_path}")
        return filename

    def read_from_file(self, filename: str) -> None:
        """Load metadata and records previously written by write_to_file."""
        full_path = os.path.join(self.path, filename)
        if not os.path.exists(full_path):
            raise FileNotFoundError(f"File not found: {full_path}")

        try:
            with open(full_path, "r") as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            raise FileFormatError(f"Invalid JSON in file {full_path}: {str(e)}")

        if not isinstance(loaded, dict) or "metadata" not in loaded or "records" not in loaded:
            raise FileFormatError("Invalid file format: missing 'metadata' or 'records'")

        self.metadata = loaded["metadata"]
        self.set_records(loaded["records"])
        info(f"Loaded {len(self._records)} records from {full_path}")

    def clear_records(self) -> None:
        self._records = []
        self._last_turn = None
