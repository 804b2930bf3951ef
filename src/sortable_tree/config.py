"""Configuration defaults for sortable trees."""

from dataclasses import dataclass

# Pixel (or abstract unit) width of one nesting level.
DEFAULT_INDENTATION_WIDTH: int = 50

# No nesting limit unless the host sets one.
DEFAULT_MAX_DEPTH: int | None = None

# Metadata key that marks a node as non-interactive.
LOCKED_METADATA_KEY: str = "locked"


@dataclass(frozen=True)
class TreeConfig:
    """Static configuration for one tree instance."""

    indentation_width: int = DEFAULT_INDENTATION_WIDTH
    max_depth: int | None = DEFAULT_MAX_DEPTH
    can_change_parent: bool = True
    allow_collapse: bool = True

    def __post_init__(self) -> None:
        if self.indentation_width <= 0:
            msg = f"indentation_width must be positive, got {self.indentation_width!r}"
            raise ValueError(msg)
        if self.max_depth is not None and self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth!r}"
            raise ValueError(msg)
