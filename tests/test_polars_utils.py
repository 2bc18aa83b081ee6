"""Tests for polars_utils module: DataFrame <-> Record conversion."""

from __future__ import annotations

import polars as pl
import pytest
from pytest_check import check

from id3tree.exceptions import ColumnsNotFoundError, DuplicateColumnsError
from id3tree.models import Record
from id3tree.polars_utils import records_from_dataframe, records_to_dataframe


class TestRecordsFromDataframe:
    """Test suite for records_from_dataframe function."""

    def test_default_uses_all_non_label_columns(self) -> None:
        """Given a DataFrame, When no features are given, Then every other column is a feature."""
        # Arrange
        df = pl.DataFrame({
            "outlook": ["sunny", "rainy"],
            "windy": ["false", "true"],
            "play": ["yes", "no"],
        })

        # Act
        records = records_from_dataframe(df, label="play")

        # Assert
        with check:
            assert records[0] == Record(features={"outlook": "sunny", "windy": "false"}, label="yes")
        with check:
            assert records[1] == Record(features={"outlook": "rainy", "windy": "true"}, label="no")

    def test_selected_features_keep_requested_order(self) -> None:
        """Given explicit features, When converted, Then only those appear in that order."""
        # Arrange
        df = pl.DataFrame({
            "outlook": ["sunny"],
            "humidity": ["high"],
            "windy": ["false"],
            "play": ["no"],
        })

        # Act
        (record,) = records_from_dataframe(df, label="play", features=["windy", "outlook"])

        # Assert
        assert list(record.features) == ["windy", "outlook"]

    def test_non_string_values_are_cast(self) -> None:
        """Given numeric and boolean columns, When converted, Then values become strings."""
        # Arrange
        df = pl.DataFrame({"rooms": [3, 4], "garden": [True, False], "label": [1, 0]})

        # Act
        records = records_from_dataframe(df, label="label")

        # Assert
        with check:
            assert records[0].features == {"rooms": "3", "garden": "true"}
        with check:
            assert [record.label for record in records] == ["1", "0"]

    def test_null_features_are_omitted(self) -> None:
        """Given a null feature cell, When converted, Then the record lacks that feature."""
        # Arrange
        df = pl.DataFrame({
            "colour": ["red", None],
            "size": ["big", "small"],
            "fruit": ["apple", "grape"],
        })

        # Act
        records = records_from_dataframe(df, label="fruit")

        # Assert
        assert records[1].features == {"size": "small"}

    def test_null_label_raises(self) -> None:
        """Given a null label, When converted, Then ValueError is raised."""
        # Arrange
        df = pl.DataFrame({"colour": ["red", "green"], "fruit": ["apple", None]})

        # Act / Assert
        with pytest.raises(ValueError, match="null"):
            records_from_dataframe(df, label="fruit")

    def test_row_with_only_null_features_raises(self) -> None:
        """Given a row whose feature cells are all null, When converted, Then ValueError names the row."""
        # Arrange
        df = pl.DataFrame({
            "colour": ["red", None],
            "size": ["big", None],
            "fruit": ["apple", "grape"],
        })

        # Act / Assert
        with pytest.raises(ValueError, match="Row 1 has no non-null feature values"):
            records_from_dataframe(df, label="fruit")

    def test_missing_columns_raise(self) -> None:
        """Given unknown columns, When converted, Then ColumnsNotFoundError lists them."""
        # Arrange
        df = pl.DataFrame({"colour": ["red"], "fruit": ["apple"]})

        # Act
        with pytest.raises(ColumnsNotFoundError) as exc_info:
            records_from_dataframe(df, label="kind", features=["colour", "size"])

        # Assert
        with check:
            assert exc_info.value.missing_columns == ["size", "kind"]
        with check:
            assert exc_info.value.available_columns == ["colour", "fruit"]

    def test_duplicate_features_raise(self) -> None:
        """Given duplicate feature names, When converted, Then DuplicateColumnsError is raised."""
        # Arrange
        df = pl.DataFrame({"colour": ["red"], "fruit": ["apple"]})

        # Act / Assert
        with pytest.raises(DuplicateColumnsError):
            records_from_dataframe(df, label="fruit", features=["colour", "colour"])

    @pytest.mark.parametrize(
        "features",
        [[], ["fruit"], ["colour", "fruit"]],
        ids=["empty", "label-only", "label-among-features"],
    )
    def test_invalid_feature_selection_raises(self, features: list[str]) -> None:
        """Given no features or the label as a feature, When converted, Then ValueError is raised."""
        # Arrange
        df = pl.DataFrame({"colour": ["red"], "fruit": ["apple"]})

        # Act / Assert
        with pytest.raises(ValueError):
            records_from_dataframe(df, label="fruit", features=features)


class TestRecordsToDataframe:
    """Test suite for records_to_dataframe function."""

    def test_columns_follow_first_seen_order(self) -> None:
        """Given records, When converted, Then features come first in order and the label last."""
        # Arrange
        records = [
            Record(features={"outlook": "sunny", "windy": "false"}, label="yes"),
            Record(features={"outlook": "rainy", "windy": "true"}, label="no"),
        ]

        # Act
        df = records_to_dataframe(records, label="play")

        # Assert
        with check:
            assert df.columns == ["outlook", "windy", "play"]
        with check:
            assert df["play"].to_list() == ["yes", "no"]
        with check:
            assert all(dtype == pl.String for dtype in df.dtypes)

    def test_missing_features_become_null(self) -> None:
        """Given records with different feature sets, When converted, Then gaps are null."""
        # Arrange
        records = [
            Record(features={"colour": "red"}, label="apple"),
            Record(features={"size": "small"}, label="grape"),
        ]

        # Act
        df = records_to_dataframe(records)

        # Assert
        with check:
            assert df["colour"].to_list() == ["red", None]
        with check:
            assert df["size"].to_list() == [None, "small"]

    def test_round_trip_with_records_from_dataframe(self) -> None:
        """Given records, When converted to a DataFrame and back, Then they are unchanged."""
        # Arrange
        records = [
            Record(features={"colour": "red", "size": "big"}, label="apple"),
            Record(features={"size": "small"}, label="grape"),
        ]

        # Act
        restored = records_from_dataframe(records_to_dataframe(records), label="label")

        # Assert
        assert restored == records

    def test_label_name_collision_raises(self) -> None:
        """Given a label column name used by a feature, When converted, Then ValueError is raised."""
        # Arrange
        records = [Record(features={"label": "x"}, label="yes")]

        # Act / Assert
        with pytest.raises(ValueError, match="collides"):
            records_to_dataframe(records)
