"""Label entropy, partitioning and majority vote over labeled records."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import numpy as np

from id3tree.decision_tree.models import BranchValue
from id3tree.exceptions import EmptyDatasetError
from id3tree.models import Record

_LN_2: float = float(np.log(2.0))


def partition_by_feature(records: Sequence[Record], feature: str) -> dict[BranchValue, list[Record]]:
    """Group records by their value of `feature`.

    Args:
        records (Sequence[Record]): The records to group.
        feature (str): Feature to group by. Records without it are grouped
            under `None`.

    Returns:
        dict[BranchValue, list[Record]]: Feature value to records mapping,
            ordered by first occurrence of each value.
    """
    partitions: dict[BranchValue, list[Record]] = {}
    for record in records:
        partitions.setdefault(record.features.get(feature), []).append(record)
    return partitions


def label_entropy(records: Sequence[Record]) -> float:
    """Compute the base-2 Shannon entropy of the label distribution.

    Args:
        records (Sequence[Record]): A non-empty collection of records.

    Returns:
        float: Entropy in bits; 0.0 when every record has the same label.

    Raises:
        EmptyDatasetError: If `records` is empty.

    Examples:
        >>> label_entropy([Record(features={"a": "x"}, label=label) for label in ("yes", "no")])
        1.0
    """
    if not records:
        raise EmptyDatasetError("label_entropy")
    counts = np.fromiter(Counter(record.label for record in records).values(), dtype=np.float64)
    probabilities = counts / counts.sum()
    # Every probability comes from a positive count, so log is always defined.
    entropy = -float(np.sum(probabilities * (np.log(probabilities) / _LN_2)))
    return entropy + 0.0  # normalise -0.0


def expected_entropy(records: Sequence[Record], feature: str) -> float:
    """Compute the size-weighted label entropy after splitting on `feature`.

    Args:
        records (Sequence[Record]): A non-empty collection of records.
        feature (str): The feature to split on.

    Returns:
        float: `sum(|partition| / |records| * label_entropy(partition))`.

    Raises:
        EmptyDatasetError: If `records` is empty.
    """
    if not records:
        raise EmptyDatasetError("expected_entropy")
    total = len(records)
    return sum(
        len(partition) / total * label_entropy(partition)
        for partition in partition_by_feature(records, feature).values()
    )


def majority_label(records: Sequence[Record]) -> str | None:
    """Return the most frequent label.

    Ties are broken in favour of the label encountered first.

    Args:
        records (Sequence[Record]): The records to vote over.

    Returns:
        str | None: The majority label, or `None` when `records` is empty.
    """
    if not records:
        return None
    counts = Counter(record.label for record in records)
    return max(counts, key=counts.__getitem__)
