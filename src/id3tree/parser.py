"""Reader for the line-oriented record format.

Each non-blank line describes one labeled example::

    {outlook: sunny, humidity: high, windy: false} - no-play
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from id3tree.exceptions import RecordParseError
from id3tree.models import Record

_LABEL_SEPARATOR: str = "} - "
_PAIR_SEPARATOR: str = ", "
_KEY_VALUE_SEPARATOR: str = ":"


def parse_records(lines: Iterable[str]) -> list[Record]:
    """Parse labeled records from an iterable of text lines.

    Blank lines are skipped. Every other line must have the form
    `{feature1: value1, feature2: value2, ...} - label`.

    Args:
        lines (Iterable[str]): Lines to parse, e.g. an open text file.

    Returns:
        list[Record]: One record per non-blank line, in input order.

    Raises:
        RecordParseError: If a line or one of its feature/value pairs is malformed,
            a line names the same feature twice, or a name or value holds
            reserved text such as `"}"`.

    Examples:
        >>> records = parse_records(["{outlook: sunny, windy: false} - play"])
        >>> records[0].features
        {'outlook': 'sunny', 'windy': 'false'}
    """
    records: list[Record] = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue
        records.append(_parse_line(line, line_number))
    logger.debug("Records parsed", count=len(records))
    return records


def read_records(path: str | Path) -> list[Record]:
    """Read labeled records from a UTF-8 text file.

    Args:
        path (str | Path): Location of the file to read.

    Returns:
        list[Record]: Parsed records, in file order.

    Raises:
        RecordParseError: If any line of the file is malformed.
    """
    with Path(path).open(encoding="utf-8") as handle:
        records = parse_records(handle)
    logger.info("Records loaded", path=str(path), count=len(records))
    return records


def _parse_line(line: str, line_number: int) -> Record:
    """Parse a single non-blank line into a Record.

    Args:
        line (str): The line to parse, without trailing newline.
        line_number (int): 1-indexed line number, used in error messages.

    Returns:
        Record: The parsed record.

    Raises:
        RecordParseError: If the line is malformed.
    """
    parts = line.split(_LABEL_SEPARATOR)
    if len(parts) != 2:
        raise RecordParseError("Invalid line format", line_number=line_number, line=line)
    features_text, label_text = parts

    features: dict[str, str] = {}
    for pair in features_text.replace("{", "").split(_PAIR_SEPARATOR):
        key_value = pair.split(_KEY_VALUE_SEPARATOR)
        if len(key_value) != 2:
            raise RecordParseError("Invalid feature format", line_number=line_number, line=line)
        key, value = key_value[0].strip(), key_value[1].strip()
        if key in features:
            raise RecordParseError(f"Duplicate feature {key!r}", line_number=line_number, line=line)
        features[key] = value

    label = label_text.strip()
    if not label:
        raise RecordParseError("Missing label", line_number=line_number, line=line)
    try:
        return Record(features=features, label=label)
    except ValidationError as exc:
        raise RecordParseError(
            f"Invalid record: {exc.errors()[0]['msg']}", line_number=line_number, line=line
        ) from exc
