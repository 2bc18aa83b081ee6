"""Conversion between Polars DataFrames and labeled records."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from id3tree.exceptions import ColumnsNotFoundError, DuplicateColumnsError
from id3tree.models import Record


def records_from_dataframe(
    df: pl.DataFrame,
    label: str,
    features: Sequence[str] | None = None,
) -> list[Record]:
    """Convert the rows of a DataFrame into labeled records.

    Every feature cell is cast to a string. Null feature cells are left out of
    the record, so the tree builder sees them as the absent marker.

    Args:
        df (pl.DataFrame): Source DataFrame, one example per row.
        label (str): Name of the column holding the class label.
        features (Sequence[str] | None): Feature columns to use, in order.
            When `None`, every column except `label` is used.

    Returns:
        list[Record]: One record per row, in row order.

    Raises:
        ValueError: If `features` is empty, contains `label`, a row has a
            null label, or a row has only null feature cells.
        DuplicateColumnsError: If `features` contains duplicates.
        ColumnsNotFoundError: If `label` or any feature column does not exist.
        pydantic.ValidationError: If a cell holds text `Record` does not accept,
            such as a value containing `":"`.

    Examples:
        >>> df = pl.DataFrame({"outlook": ["sunny", "rainy"], "play": ["yes", "no"]})
        >>> [str(r) for r in records_from_dataframe(df, label="play")]
        ['{outlook: sunny} - yes', '{outlook: rainy} - no']
    """
    feature_columns = list(features) if features is not None else [col for col in df.columns if col != label]
    _validate_record_columns(df, label, feature_columns)

    if df[label].null_count() > 0:
        raise ValueError(f"Label column '{label}' contains null values.")

    string_df = df.select([pl.col(col).cast(pl.String) for col in [*feature_columns, label]])
    records: list[Record] = []
    for row_index, row in enumerate(string_df.iter_rows(named=True)):
        row_features = {col: row[col] for col in feature_columns if row[col] is not None}
        if not row_features:
            raise ValueError(f"Row {row_index} has no non-null feature values.")
        records.append(Record(features=row_features, label=row[label]))
    return records


def records_to_dataframe(records: Sequence[Record], label: str = "label") -> pl.DataFrame:
    """Convert labeled records into a DataFrame of string columns.

    Feature columns appear in the order they are first seen across `records`,
    followed by the label column. Features a record does not carry become null.

    Args:
        records (Sequence[Record]): The records to convert.
        label (str): Name of the label column. Defaults to `"label"`.

    Returns:
        pl.DataFrame: One row per record.

    Raises:
        ValueError: If a record has a feature named `label`.
    """
    feature_columns: list[str] = []
    for record in records:
        feature_columns.extend(name for name in record.features if name not in feature_columns)
    if label in feature_columns:
        raise ValueError(f"Label column name '{label}' collides with a feature name.")

    data: dict[str, list[str | None]] = {
        col: [record.features.get(col) for record in records] for col in feature_columns
    }
    data[label] = [record.label for record in records]
    return pl.DataFrame(data, schema=dict.fromkeys(data, pl.String))


def _validate_record_columns(df: pl.DataFrame, label: str, feature_columns: Sequence[str]) -> None:
    """Validate the label and feature columns used to build records.

    Args:
        df (pl.DataFrame): The DataFrame to validate against.
        label (str): Label column name.
        feature_columns (Sequence[str]): Feature column names.

    Raises:
        ValueError: If no feature columns are given or `label` is among them.
        DuplicateColumnsError: If feature columns contain duplicates.
        ColumnsNotFoundError: If any column does not exist in the DataFrame.
    """
    if len(feature_columns) == 0:
        raise ValueError("At least one feature column is required")
    if label in feature_columns:
        raise ValueError(f"Label column '{label}' cannot also be a feature column")
    if len(feature_columns) != len(set(feature_columns)):
        raise DuplicateColumnsError(columns=list(feature_columns))
    missing_columns = [col for col in [*feature_columns, label] if col not in df.columns]
    if missing_columns:
        raise ColumnsNotFoundError(
            missing_columns=missing_columns,
            available_columns=list(df.columns),
        )
