"""Reference table — labeled feature vectors the classifier compares against.

The table is owned by a store (CSV file by default); classification only
borrows an immutable ReferenceSet for the duration of a call.

CSV layout, one row per reference leaf:

    label,area,...,solidity,efd_0,...,efd_{L1-1},hu_0,...,hu_{L2-1}
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from leafsight.engine.errors import DimensionMismatchError, ReferenceStoreError

logger = logging.getLogger(__name__)

VECTOR_PREFIXES = ("efd", "hu")


@dataclass(frozen=True)
class ReferenceEntry:
    label: str
    efd: tuple[float, ...]
    hu: tuple[float, ...]
    measurements: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        label: str,
        efd: Iterable[float],
        hu: Iterable[float],
        measurements: Mapping[str, float] | None = None,
    ) -> ReferenceEntry:
        return cls(
            label=str(label),
            efd=tuple(float(v) for v in efd),
            hu=tuple(float(v) for v in hu),
            measurements=dict(measurements or {}),
        )

    def vector(self, name: str) -> tuple[float, ...]:
        return getattr(self, name)


class ReferenceSet:
    """Immutable, ordered set of reference entries with one matrix per vector kind."""

    def __init__(self, entries: Iterable[ReferenceEntry]) -> None:
        self._entries: tuple[ReferenceEntry, ...] = tuple(entries)
        self._matrices: dict[str, NDArray[np.float64]] = {}

        for name in VECTOR_PREFIXES:
            lengths = {len(e.vector(name)) for e in self._entries}
            if len(lengths) > 1:
                raise DimensionMismatchError(
                    f"reference '{name}' vectors have mixed lengths {sorted(lengths)}",
                    stage="reference",
                )
            width = lengths.pop() if lengths else 0
            matrix = np.array(
                [e.vector(name) for e in self._entries], dtype=np.float64
            ).reshape(len(self._entries), width)
            matrix.setflags(write=False)
            self._matrices[name] = matrix

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index: int) -> ReferenceEntry:
        return self._entries[index]

    @property
    def labels(self) -> list[str]:
        return [e.label for e in self._entries]

    def matrix(self, name: str) -> NDArray[np.float64]:
        """(n, L) matrix of one vector kind."""
        return self._matrices[name]

    def dimension(self, name: str) -> int:
        return int(self._matrices[name].shape[1])

    def check_query(self, name: str, length: int) -> None:
        """Fail when a query vector cannot be compared to this table."""
        if len(self) and self.dimension(name) != length:
            raise DimensionMismatchError(
                f"query '{name}' vector has length {length}, "
                f"reference table expects {self.dimension(name)}",
                stage="distance",
            )


class CsvReferenceStore:
    """Flat-file reference table."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> ReferenceSet:
        with self.path.open(newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            try:
                header = next(reader)
            except StopIteration:
                return ReferenceSet([])
            layout = _parse_header(header, self.path)
            entries = [
                _parse_row(row, layout, self.path, line_no)
                for line_no, row in enumerate(reader, start=2)
                if row
            ]

        ref_set = ReferenceSet(entries)
        logger.info(
            "Loaded %d reference entries from %s (efd=%d, hu=%d)",
            len(ref_set),
            self.path,
            ref_set.dimension("efd"),
            ref_set.dimension("hu"),
        )
        return ref_set

    def append(self, entry: ReferenceEntry) -> None:
        """Add one row, creating the file (with header) when missing."""
        if not self.path.exists() or self.path.stat().st_size == 0:
            header = _header_for(entry)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(header)
        else:
            with self.path.open(newline="", encoding="utf-8") as f:
                header = next(csv.reader(f))
            layout = _parse_header(header, self.path)
            for name in VECTOR_PREFIXES:
                expected = len(layout.vectors[name])
                if len(entry.vector(name)) != expected:
                    raise DimensionMismatchError(
                        f"'{name}' vector has length {len(entry.vector(name))}, "
                        f"{self.path} expects {expected}",
                        stage="reference",
                    )

        row = []
        for col in (h.strip() for h in header):
            parsed = _vector_column(col)
            if col == "label":
                row.append(entry.label)
            elif parsed:
                name, idx = parsed
                row.append(repr(float(entry.vector(name)[idx])))
            else:
                row.append(repr(float(entry.measurements.get(col, 0.0))))

        with self.path.open("a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(row)
        logger.info("Appended reference '%s' to %s", entry.label, self.path)


@dataclass(frozen=True)
class _Layout:
    """Column positions of a reference CSV header."""

    names: list[str]
    label: int
    measurements: list[int]
    vectors: dict[str, list[int]]


def _vector_column(col: str) -> tuple[str, int] | None:
    prefix, _, idx = col.rpartition("_")
    if prefix in VECTOR_PREFIXES and idx.isdigit():
        return (prefix, int(idx))
    return None


def _header_for(entry: ReferenceEntry) -> list[str]:
    header = ["label", *entry.measurements.keys()]
    for name in VECTOR_PREFIXES:
        header.extend(f"{name}_{i}" for i in range(len(entry.vector(name))))
    return header


def _parse_header(header: list[str], path: Path) -> _Layout:
    names = [h.strip() for h in header]
    if "label" not in names:
        raise ReferenceStoreError(f"{path}: missing 'label' column", stage="reference")

    measurements: list[int] = []
    indexed: dict[str, list[tuple[int, int]]] = {name: [] for name in VECTOR_PREFIXES}
    for pos, col in enumerate(names):
        if col == "label":
            continue
        parsed = _vector_column(col)
        if parsed:
            indexed[parsed[0]].append((parsed[1], pos))
        else:
            measurements.append(pos)

    vectors: dict[str, list[int]] = {}
    for name, cols in indexed.items():
        cols.sort()
        if [i for i, _ in cols] != list(range(len(cols))):
            raise ReferenceStoreError(
                f"{path}: '{name}_*' columns are not numbered 0..{len(cols) - 1}",
                stage="reference",
            )
        vectors[name] = [pos for _, pos in cols]

    return _Layout(
        names=names,
        label=names.index("label"),
        measurements=measurements,
        vectors=vectors,
    )


def _parse_row(row: list[str], layout: _Layout, path: Path, line_no: int) -> ReferenceEntry:
    if len(row) != len(layout.names):
        raise ReferenceStoreError(
            f"{path}:{line_no}: expected {len(layout.names)} columns, got {len(row)}",
            stage="reference",
        )
    try:
        vectors = {name: [float(row[p]) for p in cols] for name, cols in layout.vectors.items()}
        measurements = {layout.names[p]: float(row[p]) for p in layout.measurements}
    except ValueError as e:
        raise ReferenceStoreError(f"{path}:{line_no}: {e}", stage="reference") from e

    return ReferenceEntry.create(
        label=row[layout.label].strip(),
        efd=vectors["efd"],
        hu=vectors["hu"],
        measurements=measurements,
    )
