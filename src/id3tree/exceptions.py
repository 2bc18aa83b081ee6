"""Custom exceptions for id3tree.

Input validation exceptions (subclass ValueError):
- EmptyDatasetError: Raised when an operation that needs at least one record
  receives none.
- RecordParseError: Raised when a line of the text record format is malformed.
- ColumnsNotFoundError: Raised when a requested column is missing from a DataFrame.
- DuplicateColumnsError: Raised when a feature selection repeats a column.
"""

from __future__ import annotations

from collections import Counter


class EmptyDatasetError(ValueError):
    """Raised when an entropy computation or a tree build receives no records.

    Attributes:
        operation (str): Name of the operation that received the empty dataset.

    Examples:
        >>> err = EmptyDatasetError("expected_entropy")
        >>> str(err)
        'expected_entropy requires at least one record'
    """

    operation: str

    def __init__(self, operation: str) -> None:
        """Initialize EmptyDatasetError.

        Args:
            operation (str): Name of the operation that received the empty dataset.
        """
        super().__init__(f"{operation} requires at least one record")
        self.operation = operation


class RecordParseError(ValueError):
    """Raised when a line cannot be parsed into a Record.

    Attributes:
        line_number (int): 1-indexed number of the offending line.
        line (str): The offending line, without its trailing newline.

    Examples:
        >>> err = RecordParseError("Invalid line format", line_number=3, line="{a: b}")
        >>> err.line_number
        3
    """

    line_number: int
    line: str

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        """Initialize RecordParseError.

        Args:
            message (str): Description of the format violation.
            line_number (int): 1-indexed number of the offending line.
            line (str): The offending line.
        """
        super().__init__(f"{message} (line {line_number}: {line!r})")
        self.line_number = line_number
        self.line = line

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including the message, line number and line.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, line_number={self.line_number!r}, line={self.line!r})"


class ColumnsNotFoundError(ValueError):
    """Raised when the label or a feature column is absent from a DataFrame.

    Attributes:
        missing_columns (list[str]): Requested names with no matching column,
            features first and the label last.
        available_columns (list[str]): Columns the DataFrame does have.

    Examples:
        >>> err = ColumnsNotFoundError(missing_columns=["outlook"], available_columns=["humidity", "play"])
        >>> str(err)
        "Columns not found in DataFrame: ['outlook']"
    """

    missing_columns: list[str]
    available_columns: list[str]

    def __init__(self, missing_columns: list[str], available_columns: list[str]) -> None:
        """Initialize ColumnsNotFoundError.

        Args:
            missing_columns (list[str]): Requested names with no matching column.
            available_columns (list[str]): Columns the DataFrame does have.
        """
        super().__init__(f"Columns not found in DataFrame: {sorted(missing_columns)}")
        self.missing_columns = missing_columns
        self.available_columns = available_columns


class DuplicateColumnsError(ValueError):
    """Raised when a feature selection names the same column more than once.

    Attributes:
        columns (list[str]): The selection as given.
        duplicate_columns (list[str]): Names occurring more than once, each
            reported once in order of first occurrence.

    Examples:
        >>> DuplicateColumnsError(columns=["outlook", "windy", "outlook"]).duplicate_columns
        ['outlook']
    """

    columns: list[str]
    duplicate_columns: list[str]

    def __init__(self, columns: list[str]) -> None:
        """Initialize DuplicateColumnsError.

        Args:
            columns (list[str]): The selection containing repeated names.
        """
        super().__init__("Duplicate column names are not allowed")
        self.columns = columns
        self.duplicate_columns = [name for name, count in Counter(columns).items() if count > 1]
