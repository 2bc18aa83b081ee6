"""Builds a decision tree for the classic play-tennis weather data.

id3tree logging is disabled by default. Users opt in by calling ``enable_logging()``,
which returns a ``LoggingHandle`` usable as a context manager.

Key concepts shown here:

- ``read_records``: parses ``{feature: value, ...} - label`` lines from a file.
- ``level``: the custom ``SPLIT`` level (numeric value 15, between DEBUG and INFO)
  reports every split decision; ``"DEBUG"`` also shows candidate scores.
- ``summarize_tree``: rules, accuracy and the rendered tree in one model.
- ``records_to_dataframe``: the training data as a polars DataFrame.
"""

from pathlib import Path

from id3tree import build_decision_tree, enable_logging, read_records
from id3tree.decision_tree import summarize_tree
from id3tree.polars_utils import records_to_dataframe

DATA_PATH = Path(__file__).parent / "data" / "weather.txt"

records = read_records(DATA_PATH)
for record in records:
    print(record)

print(records_to_dataframe(records, label="play"))

with enable_logging(level="SPLIT", log_format="full"):
    root = build_decision_tree(records, entropy_threshold=0.1)

print(root)

summary = summarize_tree(root, records)
for rule in summary.rules:
    print(rule)
print(f"\nAccuracy: {summary.metrics['accuracy']}")
