"""Resource module exports."""

from .games import Games
from .tags import Tags

__all__ = [
    "Games",
    "Tags",
]
