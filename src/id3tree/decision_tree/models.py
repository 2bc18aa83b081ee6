"""Tree structure, rule models and predicate logic for the decision tree module."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Public constants and type aliases
# ---------------------------------------------------------------------------

UNKNOWN_LABEL: Final[str] = "unknown"  # Leaf value for a branch with no training examples.

# `None` is the branch key for records that do not carry the split feature.
type BranchValue = str | None

_LAST_BRANCH: Final[str] = "└── "
_MIDDLE_BRANCH: Final[str] = "├── "
_LAST_INDENT: Final[str] = "    "
_MIDDLE_INDENT: Final[str] = "│   "

# ---------------------------------------------------------------------------
# Tree structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecisionTreeNode:
    """A node of a categorical decision tree.

    Internal nodes hold the name of the feature they split on; leaves hold a
    class label. The two roles are told apart only by whether the node has
    children. Children are keyed by the feature value that selects the branch
    and keep their insertion order.

    Attributes:
        value (str): Feature name for internal nodes, class label for leaves.
        children (Mapping[BranchValue, DecisionTreeNode]): Read-only,
            insertion-ordered mapping of branch value to child node.

    Examples:
        >>> tree = DecisionTreeNode(
        ...     "weather",
        ...     {"sunny": DecisionTreeNode("play"), "rainy": DecisionTreeNode("no-play")},
        ... )
        >>> print(tree, end="")
        weather
        ├── [sunny]
        │   └── play
        └── [rainy]
            └── no-play
        >>> tree.classify({"weather": "rainy"})
        'no-play'
    """

    value: str
    children: Mapping[BranchValue, DecisionTreeNode] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Freeze the children mapping, keeping its order."""
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    @property
    def is_leaf(self) -> bool:
        """bool: Whether this node has no children."""
        return not self.children

    def get_child(self, key: BranchValue) -> DecisionTreeNode | None:
        """Return the child reached through branch `key`, if any.

        Args:
            key (BranchValue): The branch value to look up.

        Returns:
            DecisionTreeNode | None: The child node, or `None` when no branch
                has that value.
        """
        return self.children.get(key)

    def classify(self, features: Mapping[str, str]) -> str | None:
        """Route an example from this node down to a leaf.

        Args:
            features (Mapping[str, str]): Feature name to value mapping of the
                example. Features missing from the mapping follow the `None`
                branch.

        Returns:
            str | None: The label of the reached leaf, or `None` when the
                example has a value for which the tree has no branch.
        """
        node = self
        while not node.is_leaf:
            child = node.get_child(features.get(node.value))
            if child is None:
                return None
            node = child
        return node.value

    def depth(self) -> int:
        """Return the number of edges on the longest root-to-leaf path.

        Returns:
            int: 0 for a leaf.
        """
        if self.is_leaf:
            return 0
        return 1 + max(child.depth() for child in self.children.values())

    def leaf_count(self) -> int:
        """Return the number of leaves in the subtree rooted here.

        Returns:
            int: 1 for a leaf.
        """
        if self.is_leaf:
            return 1
        return sum(child.leaf_count() for child in self.children.values())

    def iter_internal_values(self) -> Iterator[str]:
        """Yield the values of internal nodes in pre-order.

        Yields:
            str: Feature names of the internal nodes of this subtree.
        """
        if self.is_leaf:
            return
        yield self.value
        for child in self.children.values():
            yield from child.iter_internal_values()

    def render(self) -> str:
        """Render the subtree as an indented outline with branch labels.

        Returns:
            str: One line per node and per branch, each ending in a newline.
        """
        return self._render("")

    def __str__(self) -> str:
        """Return the rendered outline of the subtree.

        Returns:
            str: Same as `render()`.
        """
        return self.render()

    def _render(self, prefix: str) -> str:
        """Render this subtree below a line prefix.

        The root is called with an empty prefix and prints its value bare.
        Any other node prints its value after `prefix` and a corner connector,
        and its branch lines are indented one step further.

        Args:
            prefix (str): Continuation bars inherited from the ancestors.

        Returns:
            str: The rendered lines of this subtree.
        """
        parts =[prefix, _LAST_BRANCH if prefix else "", self.value, "\n"]
        child_prefix = prefix + (_LAST_INDENT if prefix else "")
        entries = list(self.children.items())
        for index, (key, child) in enumerate(entries):
            last = index == len(entries) - 1
            parts.append(f"{child_prefix}{_LAST_BRANCH if last else _MIDDLE_BRANCH}[{key}]\n")
            parts.append(child._render(child_prefix + (_LAST_INDENT if last else _MIDDLE_INDENT)))
        return "".join(parts)


# ---------------------------------------------------------------------------
# Rule models
# ---------------------------------------------------------------------------


class Predicate(BaseModel):
    """A single equality condition on one feature.

    Attributes:
        variable (str): Feature name the condition applies to, e.g. `"outlook"`.
        value (str | None): Required feature value; `None` matches examples
            that do not carry the feature.

    Examples:
        >>> p = Predicate(variable="outlook", value="sunny")
        >>> str(p)
        'outlook == sunny'
        >>> p.eval("rainy")
        False
    """

    variable: str = Field(description="Feature name the condition applies to, e.g. 'outlook'.")
    value: str | None = Field(
        description="Required feature value; null matches examples that do not carry the feature.",
    )

    def __str__(self) -> str:
        """Return the predicate as `"<variable> == <value>"`.

        Returns:
            str: Human-readable representation.
        """
        return f"{self.variable} == {self.value}"

    def eval(self, x: str | None) -> bool:
        """Evaluate this predicate against a feature value.

        Args:
            x (str | None): The feature value to test.

        Returns:
            bool: `True` if `x` equals the predicate value.
        """
        return x == self.value


class ClassificationRule(BaseModel):
    """The path from the root of a tree to one leaf.

    Attributes:
        predicates (list[Predicate]): Conditions along the root-to-leaf path.
            Empty when the tree is a single leaf.
        prediction (str): Label of the leaf.

    Examples:
        >>> rule = ClassificationRule(
        ...     predicates=[Predicate(variable="outlook", value="sunny")],
        ...     prediction="play",
        ... )
        >>> str(rule)
        'IF outlook == sunny THEN play'
    """

    predicates: list[Predicate] = Field(description="Conditions along the path from root to this leaf.")
    prediction: str = Field(description="Label of the leaf.")

    def __str__(self) -> str:
        """Return the rule as `"IF <p1> AND <p2> THEN <label>"`.

        Returns:
            str: Human-readable representation.
        """
        if not self.predicates:
            return f"THEN {self.prediction}"
        conditions = " AND ".join(str(predicate) for predicate in self.predicates)
        return f"IF {conditions} THEN {self.prediction}"

    def matches(self, features: Mapping[str, str]) -> bool:
        """Check whether an example satisfies every predicate of the rule.

        Args:
            features (Mapping[str, str]): Feature name to value mapping.

        Returns:
            bool: `True` if all predicates hold.
        """
        return all(predicate.eval(features.get(predicate.variable)) for predicate in self.predicates)


class DecisionTreeResult(BaseModel):
    """Summary of a built decision tree.

    Attributes:
        features_used (list[str]): Features that appear as split nodes, in
            pre-order of first appearance.
        rules (list[ClassificationRule]): One rule per leaf.
        metrics (dict[str, float]): Evaluation metrics, e.g. `{"accuracy": 1.0}`.
        sample_count (int): Number of records the metrics were computed on.
        depth (int): Depth of the tree.
        leaf_count (int): Number of leaves of the tree.
        tree (str): Rendered outline of the tree.
    """

    features_used: list[str] = Field(description="Features that appear as split nodes.")
    rules: list[ClassificationRule] = Field(description="One rule per leaf node.")
    metrics: dict[str, float] = Field(description='Evaluation metrics, e.g. {"accuracy": 0.93}.')
    sample_count: int = Field(ge=1, description="Number of records the metrics were computed on.")
    depth: int = Field(ge=0, description="Depth of the tree.")
    leaf_count: int = Field(ge=1, description="Number of leaves of the tree.")
    tree: str = Field(description="Rendered outline of the tree.")

    @model_validator(mode="after")
    def _validate_rules_count_matches_leaf_count(self) -> DecisionTreeResult:
        """Validate that the number of rules equals the number of leaves.

        Returns:
            DecisionTreeResult: The validated model instance.

        Raises:
            ValueError: If `len(rules)` does not equal `leaf_count`.
        """
        if len(self.rules) != self.leaf_count:
            raise ValueError(f"rules length ({len(self.rules)}) must equal leaf_count ({self.leaf_count})")
        return self

    @model_validator(mode="after")
    def _validate_rule_variables_in_features_used(self) -> DecisionTreeResult:
        """Validate that every predicate variable is listed in `features_used`.

        Returns:
            DecisionTreeResult: The validated model instance.

        Raises:
            ValueError: If a rule tests a feature missing from `features_used`.
        """
        used = set(self.features_used)
        unknown = sorted({p.variable for rule in self.rules for p in rule.predicates} - used)
        if unknown:
            raise ValueError(f"rules reference features not in features_used: {unknown}")
        return self
