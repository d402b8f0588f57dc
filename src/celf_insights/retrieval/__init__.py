"""Rule-based retrieval of interpretations for computed scores."""

from .matcher import EXPRESSIVE_INDEX, RECEPTIVE_INDEX, InterpretationMatcher

__all__ = [
    'EXPRESSIVE_INDEX',
    'RECEPTIVE_INDEX',
    'InterpretationMatcher',
]
