"""Decision tree construction, rule extraction, metrics computation, and summary assembly."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from sklearn.metrics import accuracy_score

from id3tree.config import BuilderSettings
from id3tree.decision_tree.entropy import expected_entropy, majority_label
from id3tree.decision_tree.models import (
    UNKNOWN_LABEL,
    BranchValue,
    ClassificationRule,
    DecisionTreeNode,
    DecisionTreeResult,
    Predicate,
)
from id3tree.exceptions import EmptyDatasetError
from id3tree.logging import SPLIT_LEVEL
from id3tree.models import Record

# ---------------------------------------------------------------------------
# Public interface -- Tree construction
# ---------------------------------------------------------------------------


class TreeBuilder:
    """Builds a categorical decision tree by minimising expected entropy.

    At every node the builder splits on the remaining feature with the lowest
    size-weighted label entropy. One branch is created for every value the
    chosen feature takes anywhere in the training data, so a branch may have
    no examples in the current subset; such a branch ends in an
    `UNKNOWN_LABEL` leaf. A branch becomes a majority-label leaf once the
    label entropy of its subset drops below `entropy_threshold`, or when no
    features are left to split on.

    The candidate features, in order, are the feature names of the first
    record. Records are expected to share that feature set.

    Args:
        records (Sequence[Record]): Training examples. Must not be empty.
        entropy_threshold (float | None): Stopping threshold. When `None`, the
            value is taken from `BuilderSettings` (environment or default 0.1).

    Raises:
        EmptyDatasetError: If `records` is empty.
        pydantic.ValidationError: If `entropy_threshold` is negative.

    Examples:
        >>> records = [
        ...     Record(features={"weather": "sunny"}, label="play"),
        ...     Record(features={"weather": "rainy"}, label="no-play"),
        ... ]
        >>> TreeBuilder(records, entropy_threshold=0.1).build_tree().get_child("sunny").value
        'play'
    """

    def __init__(self, records: Sequence[Record], entropy_threshold: float | None = None) -> None:
        """Store the training data and derive each feature's value domain.

        Args:
            records (Sequence[Record]): Training examples. Must not be empty.
            entropy_threshold (float | None): Stopping threshold, or `None` for
                the `BuilderSettings` value.
        """
        if not records:
            raise EmptyDatasetError("TreeBuilder")
        if entropy_threshold is None:
            settings = BuilderSettings()
        else:
            settings = BuilderSettings(entropy_threshold=entropy_threshold)
        self._records: tuple[Record, ...] = tuple(records)
        self._features: tuple[str, ...] = tuple(records[0].features)
        self._entropy_threshold: float = settings.entropy_threshold
        self._feature_domains: dict[str, list[BranchValue]] = {
            feature: list(dict.fromkeys(record.features.get(feature) for record in self._records))
            for feature in self._features
        }
        self._warn_on_inconsistent_features()

    @property
    def features(self) -> list[str]:
        """list[str]: Candidate feature names, in split-priority order."""
        return list(self._features)

    @property
    def entropy_threshold(self) -> float:
        """float: Subset entropy below which a branch becomes a leaf."""
        return self._entropy_threshold

    def feature_values(self, feature: str) -> list[BranchValue]:
        """Return the distinct values of `feature` across the whole training data.

        Args:
            feature (str): One of `features`.

        Returns:
            list[BranchValue]: Values in order of first occurrence; `None`
                is included when some record lacks the feature.
        """
        return list(self._feature_domains[feature])

    def build_tree(self) -> DecisionTreeNode:
        """Build the decision tree and return its root.

        Calling this more than once yields structurally identical trees.

        Returns:
            DecisionTreeNode: The root of the tree.
        """
        logger.info(
            "Building decision tree",
            records=len(self._records),
            features=len(self._features),
            entropy_threshold=self._entropy_threshold,
        )
        root = self._build(self._records, self._features)
        logger.info("Decision tree built", depth=root.depth(), leaves=root.leaf_count())
        return root

    def choose_best_feature(self, records: Sequence[Record], candidate_features: Sequence[str]) -> str | None:
        """Pick the feature whose split leaves the lowest expected entropy.

        Ties go to the candidate listed first.

        Args:
            records (Sequence[Record]): A non-empty subset of the training data.
            candidate_features (Sequence[str]): Features still available.

        Returns:
            str | None: The best feature, or `None` when there are no candidates.
        """
        best_feature: str | None = None
        best_entropy = float("inf")
        for feature in candidate_features:
            entropy = expected_entropy(records, feature)
            logger.debug("Candidate feature scored", feature=feature, expected_entropy=entropy)
            if entropy < best_entropy:
                best_feature, best_entropy = feature, entropy
        return best_feature

    def _build(self, records: Sequence[Record], remaining_features: Sequence[str]) -> DecisionTreeNode:
        """Recursively build the subtree for a non-empty subset of records.

        Args:
            records (Sequence[Record]): Non-empty subset reaching this node.
            remaining_features (Sequence[str]): Features not yet used on the
                path from the root.

        Returns:
            DecisionTreeNode: The subtree root.
        """
        best_feature = self.choose_best_feature(records, remaining_features)
        if best_feature is None:
            label = majority_label(records) or UNKNOWN_LABEL
            logger.debug("Features exhausted, creating majority leaf", label=label, records=len(records))
            return DecisionTreeNode(label)

        logger.log(SPLIT_LEVEL, "Splitting on feature", feature=best_feature, records=len(records))
        next_features = [feature for feature in remaining_features if feature != best_feature]
        children: dict[BranchValue, DecisionTreeNode] = {}
        for value in self._feature_domains[best_feature]:
            subset = [record for record in records if record.features.get(best_feature) == value]
            if not subset:
                logger.debug("Empty branch, creating unknown leaf", feature=best_feature, branch=value)
                children[value] = DecisionTreeNode(UNKNOWN_LABEL)
                continue

            # The subset is homogeneous in best_feature, so this is its label entropy.
            if expected_entropy(subset, best_feature) < self._entropy_threshold:
                label = majority_label(subset) or UNKNOWN_LABEL
                logger.debug("Creating leaf", feature=best_feature, branch=value, label=label)
                children[value] = DecisionTreeNode(label)
                continue

            children[value] = self._build(subset, next_features)
        return DecisionTreeNode(best_feature, children)

    def _warn_on_inconsistent_features(self) -> None:
        """Log a warning when some records carry a different feature set than the first."""
        expected = set(self._features)
        inconsistent = sum(1 for record in self._records if set(record.features) != expected)
        if inconsistent:
            logger.warning(
                "Records do not share the feature set of the first record",
                inconsistent_records=inconsistent,
                features=list(self._features),
            )


def build_decision_tree(
    records: Sequence[Record],
    *,
    entropy_threshold: float | None = None,
) -> DecisionTreeNode:
    """Build a decision tree from labeled records.

    Args:
        records (Sequence[Record]): Training examples. Must not be empty.
        entropy_threshold (float | None): Stopping threshold; see `TreeBuilder`.

    Returns:
        DecisionTreeNode: The root of the tree.
    """
    return TreeBuilder(records, entropy_threshold=entropy_threshold).build_tree()


# ---------------------------------------------------------------------------
# Public interface -- Rule extraction
# ---------------------------------------------------------------------------


def extract_rules(root: DecisionTreeNode) -> list[ClassificationRule]:
    """Extract one human-readable rule per leaf, in rendering order.

    Args:
        root (DecisionTreeNode): Root of a built tree.

    Returns:
        list[ClassificationRule]: Rules whose predicates describe the path
            from `root` to each leaf.
    """
    rules: list[ClassificationRule] = []
    _walk_tree(root, path_predicates=[], rules=rules)
    return rules


# ---------------------------------------------------------------------------
# Public interface -- Metrics and summary
# ---------------------------------------------------------------------------


def compute_accuracy(root: DecisionTreeNode, records: Sequence[Record]) -> float:
    """Compute the fraction of records the tree labels correctly.

    Records the tree cannot route to a leaf count as predicted `UNKNOWN_LABEL`.

    Args:
        root (DecisionTreeNode): Root of a built tree.
        records (Sequence[Record]): Labeled records to evaluate on.

    Returns:
        float: Accuracy between 0.0 and 1.0.

    Raises:
        EmptyDatasetError: If `records` is empty.
    """
    if not records:
        raise EmptyDatasetError("compute_accuracy")
    predictions = [root.classify(record.features) or UNKNOWN_LABEL for record in records]
    labels = [record.label for record in records]
    return float(accuracy_score(labels, predictions))


def summarize_tree(root: DecisionTreeNode, records: Sequence[Record]) -> DecisionTreeResult:
    """Assemble a `DecisionTreeResult` for a built tree.

    Args:
        root (DecisionTreeNode): Root of a built tree.
        records (Sequence[Record]): Labeled records to compute metrics on,
            usually the training data.

    Returns:
        DecisionTreeResult: Rules, metrics and structure of the tree.

    Raises:
        EmptyDatasetError: If `records` is empty.
    """
    accuracy = compute_accuracy(root, records)
    return DecisionTreeResult(
        features_used=list(dict.fromkeys(root.iter_internal_values())),
        rules=extract_rules(root),
        metrics={"accuracy": round(accuracy, 4)},
        sample_count=len(records),
        depth=root.depth(),
        leaf_count=root.leaf_count(),
        tree=root.render(),
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _walk_tree(
    node: DecisionTreeNode,
    *,
    path_predicates: list[Predicate],
    rules: list[ClassificationRule],
) -> None:
    """Recursively walk a node and accumulate leaf rules.

    Args:
        node (DecisionTreeNode): The current node.
        path_predicates (list[Predicate]): Predicates from the root to `node`.
        rules (list[ClassificationRule]): Accumulator; leaf rules are appended in-place.
    """
    if node.is_leaf:
        rules.append(ClassificationRule(predicates=path_predicates, prediction=node.value))
        return
    for value, child in node.children.items():
        predicate = Predicate(variable=node.value, value=value)
        _walk_tree(child, path_predicates=[*path_predicates, predicate], rules=rules)
