from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

from .errors import StorageError
from .series import Record


@dataclass(frozen=True)
class LoadedDataset:
    resume_timestamp: int
    text: str
    rows: int


def is_header_line(line: str) -> bool:
    # Header's first token is a column name, data lines start with a ms timestamp
    first = line.strip().split(",", 1)[0]
    return any(c.isalpha() for c in first)


class RecordStore:
    """Flat CSV file holding one series, ordered by timestamp.

    The file is the only record of sync progress: its last line is the resume
    point. Appends happen in memory and the whole file is rewritten per batch.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._seen: Set[int] = set()
        self._last_timestamp: Optional[int] = None
        self._indexed = False

    def open_or_create(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text("", encoding="utf-8")
        except OSError as e:
            raise StorageError(f"cannot create dataset file {self.path}: {e}") from e

    def load(self, genesis: int) -> LoadedDataset:
        """Read the whole file and derive where syncing resumes.

        An empty (or header-only) file resumes from `genesis`.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"cannot read dataset file {self.path}: {e}") from e

        text, rows = self._index(text)
        if self._last_timestamp is None:
            return LoadedDataset(resume_timestamp=int(genesis), text=text, rows=0)
        return LoadedDataset(resume_timestamp=self._last_timestamp, text=text, rows=rows)

    def _index(self, text: str) -> Tuple[str, int]:
        """Rebuild the stored-timestamp state from dataset text.

        Returns the text without blank lines and the number of data rows.
        """
        lines = [ln for ln in text.splitlines() if ln.strip()]
        data = lines[1:] if lines and is_header_line(lines[0]) else lines

        self._seen = set()
        self._last_timestamp = None
        for n, line in enumerate(data, start=1):
            ts = self._parse_timestamp(line, n)
            self._seen.add(ts)
            self._last_timestamp = ts
        self._indexed = True
        return "\n".join(lines), len(data)

    def _parse_timestamp(self, line: str, n: int) -> int:
        token = line.split(",", 1)[0].strip()
        try:
            return int(token)
        except ValueError as e:
            raise StorageError(f"{self.path}: data line {n} does not start with a timestamp: {line[:80]!r}") from e

    def append_batch(self, records: Sequence[Record], text: str) -> Tuple[str, int]:
        """Append records not yet stored; returns (new_text, appended_count).

        A record is skipped when its timestamp is already stored or is not
        newer than the last stored one, which keeps the file strictly ordered.
        """
        if not records:
            return text, 0
        if not self._indexed:
            text, _ = self._index(text)
        parts: List[str] = [text] if text else [",".join(records[0].columns())]
        appended = 0
        for rec in records:
            if rec.timestamp in self._seen:
                continue
            if self._last_timestamp is not None and rec.timestamp <= self._last_timestamp:
                continue
            parts.append(rec.to_line())
            self._seen.add(rec.timestamp)
            self._last_timestamp = rec.timestamp
            appended += 1
        return "\n".join(parts), appended

    def write(self, text: str) -> None:
        # Write to a sibling temp file, then rename over the dataset
        tmp_path = self.path.with_name(self.path.name + ".part")
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"cannot write dataset file {self.path}: {e}") from e
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

    @property
    def last_timestamp(self) -> Optional[int]:
        return self._last_timestamp
