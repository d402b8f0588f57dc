"""
Student insight generation.

Provides the rule-table report assembler and the independent heuristic
insight layer.
"""

from .assembler import (
    assemble_comparison,
    assemble_report,
    assemble_test_insight,
    focus_report,
    to_insight_entry,
)
from .heuristics import (
    EXPRESSIVE_TESTS,
    RECEPTIVE_TESTS,
    domain_averages,
    format_score,
    heuristic_insights,
    kpi_metrics,
)


__all__ = [
    # Report assembly
    'assemble_comparison',
    'assemble_report',
    'assemble_test_insight',
    'focus_report',
    'to_insight_entry',

    # Heuristics
    'EXPRESSIVE_TESTS',
    'RECEPTIVE_TESTS',
    'domain_averages',
    'format_score',
    'heuristic_insights',
    'kpi_metrics',
]
