"""
Record Parser.

Turns one pipe-delimited `PRR|` line into a DieRecord using fixed column
positions. Coordinate problems raise and drop the line; a bad bin source
degrades the record to bin 0 and attaches a warning instead.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from wafermap.core.config import (
    RECORD_PREFIX, FIELD_DELIMITER, MIN_FIELD_COUNT,
    HARD_BIN_FIELD, SOFT_BIN_FIELD, X_COORD_FIELD, Y_COORD_FIELD,
    PART_ID_FIELD, PART_TXT_FIELD, DEFAULT_BIN_VALUE
)
from wafermap.core.errors import TruncatedRecordError, BadCoordinateError
from wafermap.core.models import DieRecord

logger = logging.getLogger(__name__)


@dataclass
class ParsedLine:
    """A successfully parsed record plus any recoverable warnings."""
    record: DieRecord
    warnings: List[str] = field(default_factory=list)


def is_record_line(line: str) -> bool:
    return line.strip().startswith(RECORD_PREFIX)


def parse_bin_value(token: str) -> int:
    """
    Parses a bin-source token as a float and truncates toward zero.
    Raises ValueError for non-numeric or non-finite tokens.
    """
    value = float(token)
    # int() truncates toward zero; inf/nan raise OverflowError/ValueError.
    try:
        return int(value)
    except OverflowError as e:
        raise ValueError(f"bin value out of range: {token!r}") from e


def parse_record_line(line: str, line_number: Optional[int] = None) -> Optional[ParsedLine]:
    """
    Parses one line of the intermediate format.

    Returns None for lines that are not PRR records (headers, other record
    types). Raises TruncatedRecordError or BadCoordinateError when the line
    cannot yield a record.
    """
    line = line.strip()
    if not line.startswith(RECORD_PREFIX):
        return None

    parts = line.split(FIELD_DELIMITER)
    if len(parts) < MIN_FIELD_COUNT:
        raise TruncatedRecordError(
            f"PRR record has {len(parts)} fields, need at least {MIN_FIELD_COUNT}",
            line_number=line_number, line=line
        )

    try:
        x = int(parts[X_COORD_FIELD].strip())
        y = int(parts[Y_COORD_FIELD].strip())
    except ValueError as e:
        raise BadCoordinateError(
            f"Non-integer X/Y coordinate ({e})",
            line_number=line_number, line=line
        ) from e

    warnings = []
    part_txt = parts[PART_TXT_FIELD].strip()
    try:
        bin_value = parse_bin_value(part_txt)
    except ValueError:
        bin_value = DEFAULT_BIN_VALUE
        prefix = f"Line {line_number}: " if line_number is not None else ""
        warnings.append(f"{prefix}Bad bin value {part_txt!r}, using {DEFAULT_BIN_VALUE}")

    record = DieRecord(
        x=x,
        y=y,
        identifier=parts[PART_ID_FIELD].strip(),
        bin_value=bin_value,
        hard_bin=parts[HARD_BIN_FIELD].strip(),
        soft_bin=parts[SOFT_BIN_FIELD].strip(),
        part_txt=part_txt,
    )
    return ParsedLine(record=record, warnings=warnings)
