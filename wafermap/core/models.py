"""
Domain Models for Wafer Die Results.
Encapsulates the per-die record and the sparse, coordinate-indexed wafer grid.
"""
from dataclasses import dataclass, field
import logging
from typing import Dict, Iterator, NamedTuple, Optional, Tuple

import pandas as pd

from wafermap.core.config import PASS_BIN, CSV_EXPORT_COLUMNS
from wafermap.enums import DieStatus, CellStatus

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]


@dataclass(frozen=True)
class DieRecord:
    """
    Represents the test outcome of a single die.
    `status` is derived from `bin_value` on every access and never stored.
    """
    x: int
    y: int
    identifier: str
    bin_value: int
    hard_bin: str = ""
    soft_bin: str = ""
    part_txt: str = ""

    @property
    def status(self) -> DieStatus:
        return DieStatus.PASS if self.bin_value == PASS_BIN else DieStatus.FAIL

    @property
    def is_pass(self) -> bool:
        return self.status is DieStatus.PASS

    @property
    def coordinate(self) -> Coordinate:
        return (self.x, self.y)


class Bounds(NamedTuple):
    """Inclusive coordinate range. An empty grid reports min > max."""
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def is_valid(self) -> bool:
        return self.min_x <= self.max_x and self.min_y <= self.max_y

    @property
    def width(self) -> int:
        return max(self.max_x - self.min_x + 1, 0)

    @property
    def height(self) -> int:
        return max(self.max_y - self.min_y + 1, 0)

    def x_range(self) -> range:
        return range(self.min_x, self.max_x + 1)

    def y_range_descending(self) -> range:
        """Y values from the top row (max_y) down to the bottom row (min_y)."""
        return range(self.max_y, self.min_y - 1, -1)


# Inverted range returned before the first insert.
EMPTY_BOUNDS = Bounds(0, -1, 0, -1)


@dataclass
class WaferGrid:
    """
    Sparse mapping from (x, y) to DieRecord with running bounds and counters.

    Counters are insert-event counts: inserting at an occupied coordinate
    replaces the record but still increments `total_chips` (and `pass_count`
    when the new record passes).
    """
    _dies: Dict[Coordinate, DieRecord] = field(default_factory=dict)
    min_x: Optional[int] = None
    max_x: Optional[int] = None
    min_y: Optional[int] = None
    max_y: Optional[int] = None
    total_chips: int = 0
    pass_count: int = 0

    def insert(self, record: DieRecord) -> None:
        x, y = record.x, record.y
        if self.total_chips == 0:
            self.min_x = self.max_x = x
            self.min_y = self.max_y = y
        else:
            self.min_x = min(self.min_x, x)
            self.max_x = max(self.max_x, x)
            self.min_y = min(self.min_y, y)
            self.max_y = max(self.max_y, y)

        self.total_chips += 1
        if record.is_pass:
            self.pass_count += 1

        if record.coordinate in self._dies:
            logger.debug(f"Die at ({x}, {y}) replaced by a later record.")
        self._dies[record.coordinate] = record

    def lookup(self, x: int, y: int) -> Optional[DieRecord]:
        """Returns the record at (x, y), or None for an untested site."""
        return self._dies.get((x, y))

    def bounds(self) -> Bounds:
        if self.is_empty:
            return EMPTY_BOUNDS
        return Bounds(self.min_x, self.max_x, self.min_y, self.max_y)

    def cell_status(self, x: int, y: int) -> CellStatus:
        record = self.lookup(x, y)
        if record is None:
            return CellStatus.NO_DATA
        return CellStatus.from_die_status(record.status)

    @property
    def is_empty(self) -> bool:
        return self.total_chips == 0

    @property
    def fail_count(self) -> int:
        return self.total_chips - self.pass_count

    def __len__(self) -> int:
        return len(self._dies)

    def __iter__(self) -> Iterator[DieRecord]:
        return iter(self._dies.values())

    def __contains__(self, coordinate: Coordinate) -> bool:
        return coordinate in self._dies

    def to_dataframe(self) -> pd.DataFrame:
        """
        Returns the live records as a DataFrame in map order
        (top row first, left to right), using the CSV export column names.
        """
        rows = [
            {
                'X_COORD': r.x,
                'Y_COORD': r.y,
                'PART_ID': r.identifier,
                'HARD_BIN': r.hard_bin,
                'SOFT_BIN': r.soft_bin,
                'PART_TXT': r.part_txt,
                'BIN': r.bin_value,
                'STATUS': r.status.value,
            }
            for r in self._dies.values()
        ]
        if not rows:
            return pd.DataFrame(columns=CSV_EXPORT_COLUMNS + ['BIN', 'STATUS'])

        df = pd.DataFrame(rows)
        df.sort_values(['Y_COORD', 'X_COORD'], ascending=[False, True], inplace=True)
        df.reset_index(drop=True, inplace=True)
        return df
