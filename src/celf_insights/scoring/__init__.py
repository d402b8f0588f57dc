"""
Scoring for CELF-P3 assessments.

Main components:
- statistics: z-scores, normative bands and percentiles
- rules: the interpretation rule table and its loader
"""

from .statistics import (
    NORMATIVE_PARAMS,
    bell_curve,
    erf,
    normal_pdf,
    normative_band,
    normative_params,
    percentile_from_z,
    score_interpretation,
    score_to_percentile,
    simplified_band,
    z_score,
)
from .rules import (
    COMPOSITE_COMPARISON,
    InterpretationRule,
    RuleTable,
    ScoreRange,
    load_rule_table,
)

__all__ = [
    # Statistics
    'NORMATIVE_PARAMS',
    'bell_curve',
    'erf',
    'normal_pdf',
    'normative_band',
    'normative_params',
    'percentile_from_z',
    'score_interpretation',
    'score_to_percentile',
    'simplified_band',
    'z_score',

    # Rule table
    'COMPOSITE_COMPARISON',
    'InterpretationRule',
    'RuleTable',
    'ScoreRange',
    'load_rule_table',
]
