"""
Instrumentation Dump Conversion.

Converts the text rendering of an STDF file (one `Record <n>, type=Prr, ...`
header followed by `KEY = VALUE (TYPE)` lines per record) into either CSV
rows or pipe-delimited `PRR|` lines that the record parser reads.
"""
import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

import pandas as pd

from wafermap.core.config import (
    DUMP_RECORD_HEADER_PATTERN, DUMP_FIELD_PATTERN, DUMP_PRR_TYPE, DUMP_BLOCK_END_FIELD,
    PRR_FIELD_ORDER, CSV_EXPORT_COLUMNS, FIELD_DELIMITER, RECORD_PREFIX,
    DEFAULT_INPUT_PATH, DEFAULT_OUTPUT_DIR, CSV_EXPORT_FILENAME
)
from wafermap.core.errors import SourceMissingError
from wafermap.io.exporters.csv_export import write_csv
from wafermap.utils.logger import configure_logging

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(DUMP_RECORD_HEADER_PATTERN)
_FIELD_RE = re.compile(DUMP_FIELD_PATTERN)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def iter_prr_blocks(lines: Iterable[str]) -> Iterator[Dict[str, str]]:
    """
    Yields one field dict per PRR record in the dump.

    A block ends when its PART_ID field is read, or when the next record
    header appears before that.
    """
    current: Dict[str, str] = {}
    inside_prr = False

    for raw in lines:
        line = raw.strip()

        header = _HEADER_RE.match(line)
        if header:
            if inside_prr and current:
                yield current
            inside_prr = header.group(1) == DUMP_PRR_TYPE
            current = {}
            continue

        if not inside_prr:
            continue

        match = _FIELD_RE.match(line)
        if not match:
            continue

        name = match.group(1).strip()
        current[name] = _unquote(match.group(2).strip())

        if name == DUMP_BLOCK_END_FIELD:
            yield current
            inside_prr = False
            current = {}

    if inside_prr and current:
        yield current


def blocks_to_dataframe(blocks: Iterable[Dict[str, str]]) -> pd.DataFrame:
    """Projects PRR field dicts onto the CSV export columns; missing fields are empty."""
    rows = [{col: block.get(col, "") for col in CSV_EXPORT_COLUMNS} for block in blocks]
    return pd.DataFrame(rows, columns=CSV_EXPORT_COLUMNS)


def block_to_record_line(block: Dict[str, str]) -> str:
    """Lays a PRR field dict out in the fixed column order of the record parser."""
    values = [block.get(name, "").replace(FIELD_DELIMITER, " ") for name in PRR_FIELD_ORDER]
    return RECORD_PREFIX + FIELD_DELIMITER.join(values)


def _read_dump(dump_path: Union[str, Path]) -> List[Dict[str, str]]:
    path = Path(dump_path)
    if not path.is_file():
        logger.error(f"Dump file not found: {path}")
        raise SourceMissingError(path)
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return list(iter_prr_blocks(f))


def convert_dump_to_csv(dump_path: Union[str, Path], csv_path: Union[str, Path]) -> int:
    """
    Converts a dump file into the CSV export format.
    Returns the number of rows written.
    """
    blocks = _read_dump(dump_path)
    df = blocks_to_dataframe(blocks)
    write_csv(df, csv_path)
    logger.info(f"Converted {len(df)} PRR records to '{csv_path}'.")
    return len(df)


def convert_dump_to_records(dump_path: Union[str, Path], output_path: Union[str, Path]) -> int:
    """
    Converts a dump file into pipe-delimited PRR lines.
    Returns the number of lines written.
    """
    blocks = _read_dump(dump_path)
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, 'w', encoding='utf-8') as f:
        for block in blocks:
            f.write(block_to_record_line(block) + "\n")
    logger.info(f"Converted {len(blocks)} PRR records to '{out}'.")
    return len(blocks)


# Output format -> (converter, default output path). PRR lines default to the
# path the batch pipeline reads.
CONVERTERS = {
    "csv": (convert_dump_to_csv, f"{DEFAULT_OUTPUT_DIR}/{CSV_EXPORT_FILENAME}"),
    "records": (convert_dump_to_records, DEFAULT_INPUT_PATH),
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert an STDF text dump into CSV rows or PRR record lines.")
    parser.add_argument("dump_path", help="Text rendering of the STDF file.")
    parser.add_argument("-o", "--output", default=None,
                        help="Output file. Defaults depend on --format.")
    parser.add_argument("--format", choices=list(CONVERTERS), default="csv", dest="output_format",
                        help="'csv' for the per-die CSV, 'records' for PRR lines the pipeline reads.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    converter, default_output = CONVERTERS[args.output_format]
    output = args.output or default_output
    try:
        count = converter(args.dump_path, output)
    except SourceMissingError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    print(f"Converted {count} PRR records -> {output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
