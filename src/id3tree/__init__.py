"""id3tree: Entropy-based categorical decision trees."""

from loguru import logger

from id3tree.decision_tree import DecisionTreeNode, TreeBuilder, build_decision_tree
from id3tree.logging import PACKAGE_NAME, enable_logging
from id3tree.models import Record
from id3tree.parser import parse_records, read_records

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the id3tree module by default

__all__ = [
    "DecisionTreeNode",
    "Record",
    "TreeBuilder",
    "build_decision_tree",
    "enable_logging",
    "parse_records",
    "read_records",
]
