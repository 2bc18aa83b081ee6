"""Settings for tree construction."""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_ENTROPY_THRESHOLD: float = 0.1


class BuilderSettings(BaseSettings, env_prefix="ID3TREE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"):
    """Configuration for `TreeBuilder`.

    Values are read from the environment (``ID3TREE_ENTROPY_THRESHOLD``) or a
    ``.env`` file when not passed explicitly.

    Attributes:
        entropy_threshold (float): A branch becomes a leaf when the label
            entropy of its subset is strictly below this value.
    """

    entropy_threshold: float = Field(
        default=DEFAULT_ENTROPY_THRESHOLD,
        ge=0.0,
        description="Branches whose subset entropy is strictly below this value become leaves.",
    )
