"""Decision tree sub-package: tree structure, entropy, and construction."""

from __future__ import annotations

from id3tree.decision_tree.entropy import (
    expected_entropy,
    label_entropy,
    majority_label,
    partition_by_feature,
)
from id3tree.decision_tree.fitting import (
    TreeBuilder,
    build_decision_tree,
    compute_accuracy,
    extract_rules,
    summarize_tree,
)
from id3tree.decision_tree.models import (
    UNKNOWN_LABEL,
    BranchValue,
    ClassificationRule,
    DecisionTreeNode,
    DecisionTreeResult,
    Predicate,
)

__all__ = [
    "UNKNOWN_LABEL",
    "BranchValue",
    "ClassificationRule",
    "DecisionTreeNode",
    "DecisionTreeResult",
    "Predicate",
    "TreeBuilder",
    "build_decision_tree",
    "compute_accuracy",
    "expected_entropy",
    "extract_rules",
    "label_entropy",
    "majority_label",
    "partition_by_feature",
    "summarize_tree",
]
