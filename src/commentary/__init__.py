"""
Gala Showdown Commentary.

MC lines from an external text-generation service, with a fixed fallback.
"""

from src.commentary.service import (
    EMPTY_COMMENTARY,
    FALLBACK_COMMENTARY,
    CommentaryService,
)

__all__ = ["CommentaryService", "EMPTY_COMMENTARY", "FALLBACK_COMMENTARY"]
