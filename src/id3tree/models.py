"""The labeled example consumed by the tree builder."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Substrings that would be read back as structure by the line format.
_FORBIDDEN_IN_FEATURES: tuple[str, ...] = (":", ", ", "{", "}", "\n", "\r")
_FORBIDDEN_IN_LABEL: tuple[str, ...] = ("} - ", "\n", "\r")


class Record(BaseModel):
    """A single labeled training example.

    Records are immutable once created: fields cannot be reassigned and
    `features` is a read-only mapping. Every record of a dataset is expected
    to carry the same feature names; a record that lacks a feature is treated
    as having the absent marker (`None`) for it.

    Feature names, values and the label are restricted to text the line
    format of `parse_records` can hold, so `str(record)` always parses back
    to an equal record. They must not have leading or trailing whitespace;
    feature names and values must not contain `":"`, `", "`, `"{"` or `"}"`;
    the label must not contain `"} - "`. Line breaks are not allowed anywhere.

    Attributes:
        features (Mapping[str, str]): Read-only mapping of feature name to
            categorical value, e.g. `{"outlook": "sunny", "windy": "false"}`.
        label (str): Class label of the example, e.g. `"play"`.

    Examples:
        >>> record = Record(features={"outlook": "sunny", "windy": "false"}, label="play")
        >>> str(record)
        '{outlook: sunny, windy: false} - play'
    """

    model_config = ConfigDict(frozen=True)

    features: Mapping[str, str] = Field(
        min_length=1,
        description="Mapping of feature name to categorical value.",
    )
    label: str = Field(
        min_length=1,
        description="Class label of the example.",
    )

    @field_validator("features", mode="after")
    @classmethod
    def _freeze_features(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        """Check every name and value, then wrap the mapping read-only.

        Args:
            value (Mapping[str, str]): The validated feature mapping.

        Returns:
            Mapping[str, str]: A read-only copy of `value`.

        Raises:
            ValueError: If a name or value cannot be written in the line format.
        """
        for name, feature_value in value.items():
            _check_line_safe(name, _FORBIDDEN_IN_FEATURES, "Feature name")
            _check_line_safe(feature_value, _FORBIDDEN_IN_FEATURES, f"Value of feature {name!r}")
        return MappingProxyType(dict(value))

    @field_validator("label", mode="after")
    @classmethod
    def _validate_label(cls, value: str) -> str:
        """Check that the label can be written in the line format.

        Args:
            value (str): The label to validate.

        Returns:
            str: The unchanged label.

        Raises:
            ValueError: If the label cannot be written in the line format.
        """
        _check_line_safe(value, _FORBIDDEN_IN_LABEL, "Label")
        return value

    @field_serializer("features")
    def _serialize_features(self, value: Mapping[str, str]) -> dict[str, str]:
        """Dump the read-only features as a plain dict.

        Args:
            value (Mapping[str, str]): The stored feature mapping.

        Returns:
            dict[str, str]: A mutable copy for serialisation.
        """
        return dict(value)

    def __str__(self) -> str:
        """Return the record in the line format read by `parse_records`.

        Returns:
            str: `"{name: value, ...} - label"`.
        """
        pairs = ", ".join(f"{name}: {value}" for name, value in self.features.items())
        return f"{{{pairs}}} - {self.label}"


def _check_line_safe(text: str, forbidden: tuple[str, ...], what: str) -> None:
    """Reject text that the line format would strip or read as structure.

    Args:
        text (str): Name, value or label to check.
        forbidden (tuple[str, ...]): Substrings that must not occur in `text`.
        what (str): Description of `text` used in the error message.

    Raises:
        ValueError: If `text` has surrounding whitespace or a forbidden substring.
    """
    if text != text.strip():
        raise ValueError(f"{what} {text!r} has leading or trailing whitespace")
    for token in forbidden:
        if token in text:
            raise ValueError(f"{what} {text!r} contains reserved text {token!r}")
