"""
Interpretation Matcher

Matches a student's scores to entries of the interpretation rule table by
filtering on test type, score range and audience. Matching is deterministic:
every rule whose predicate holds is returned, in table order, with no ranking
or truncation.
"""

import math
from typing import Dict, List, Optional, Sequence, Union
import logging

from ..models.assessment import AssessmentRecord
from ..models.report import Audience
from ..models.utils import latest_assessment
from ..scoring.rules import COMPOSITE_COMPARISON, InterpretationRule, RuleTable
from ..scoring.statistics import z_score

logger = logging.getLogger(__name__)

RECEPTIVE_INDEX = "RLI"
EXPRESSIVE_INDEX = "ELI"


def _missing(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


class InterpretationMatcher:
    """Filters an injected rule table against computed z-scores."""

    def __init__(self, rule_table: RuleTable):
        self.rule_table = rule_table

    def match(
        self,
        test_name: str,
        test_abbreviation: str,
        standard_score: Optional[float],
        audience: Union[Audience, str] = Audience.CLINICIAN,
    ) -> List[InterpretationRule]:
        """
        Retrieve interpretation rules for a single test score.

        Args:
            test_name: Display name, e.g. "Receptive Language Index"
            test_abbreviation: Test code, e.g. "RLI"
            standard_score: Student's standard score
            audience: 'clinician' or 'family'

        Returns:
            Matching rules in table order; empty when the score is missing

        Raises:
            ValueError: audience is not a known audience
        """
        audience = Audience(audience)
        if _missing(standard_score):
            return []

        z = z_score(standard_score, "standard")

        matches = []
        for rule in self.rule_table.filter(audience=audience.value):
            if rule.is_comparison:
                continue
            if rule.test_type != test_name and rule.test_abbreviation != test_abbreviation:
                continue
            if rule.score_range is None or not rule.score_range.contains_z(z):
                continue
            matches.append(rule)

        logger.debug(f"Matched {len(matches)} rules for {test_abbreviation} (z={z:.2f}, {audience.value})")
        return matches

    def match_comparison(
        self,
        receptive_z: Optional[float],
        expressive_z: Optional[float],
        audience: Union[Audience, str] = Audience.CLINICIAN,
    ) -> List[InterpretationRule]:
        """
        Retrieve composite comparison rules for a receptive/expressive z-score pair.

        The rule range is applied to (receptive_z - expressive_z).
        """
        audience = Audience(audience)
        if _missing(receptive_z) or _missing(expressive_z):
            return []

        z_diff = receptive_z - expressive_z
        candidates = self.rule_table.filter(test_type=COMPOSITE_COMPARISON, audience=audience.value)

        matches = [
            rule for rule in candidates
            if rule.score_range is not None and rule.score_range.contains_z_diff(z_diff)
        ]

        logger.debug(f"Matched {len(matches)} comparison rules (z diff={z_diff:.2f}, {audience.value})")
        return matches

    def match_all(
        self,
        assessments: Sequence[AssessmentRecord],
        audience: Union[Audience, str] = Audience.CLINICIAN,
    ) -> Dict[str, List[InterpretationRule]]:
        """
        All matches for the latest assessment, grouped by test code.

        Codes appear in the record's test order and only when at least one
        rule matched; the receptive/expressive comparison follows under
        COMPOSITE_COMPARISON.
        """
        latest = latest_assessment(assessments)
        if latest is None:
            return {}

        grouped: Dict[str, List[InterpretationRule]] = {}
        for code, result in latest.tests.items():
            if result.standard_score is None:
                continue
            rules = self.match(result.test_name or code, code, result.standard_score, audience)
            if rules:
                grouped[code] = rules

        receptive = latest.standard_score(RECEPTIVE_INDEX)
        expressive = latest.standard_score(EXPRESSIVE_INDEX)
        if receptive is not None and expressive is not None:
            rules = self.match_comparison(z_score(receptive), z_score(expressive), audience)
            if rules:
                grouped[COMPOSITE_COMPARISON] = rules

        return grouped
