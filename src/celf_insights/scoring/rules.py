"""
Interpretation Rule Table

This module loads and holds the static table of interpretive rules that the
matcher filters. The table is read once at startup, kept as an immutable
ordered collection and passed to the matcher explicitly.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

import yaml

from ..errors import RuleTableError

logger = logging.getLogger(__name__)

COMPOSITE_COMPARISON = "Composite Comparison"
VALID_AUDIENCES = ("clinician", "family")


def _missing(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class ScoreRange:
    """Inclusive z-score bounds; an absent bound is unconstrained."""

    min_z: Optional[float] = None
    max_z: Optional[float] = None
    min_z_diff: Optional[float] = None
    max_z_diff: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreRange":
        def _bound(key: str) -> Optional[float]:
            value = data.get(key)
            return None if value is None else float(value)

        return cls(
            min_z=_bound("min_z"),
            max_z=_bound("max_z"),
            min_z_diff=_bound("min_z_diff"),
            max_z_diff=_bound("max_z_diff"),
        )

    def contains_z(self, z: Optional[float]) -> bool:
        """Check if a z-score falls within the single-score bounds."""
        if _missing(z):
            return False
        if self.min_z is not None and z < self.min_z:
            return False
        if self.max_z is not None and z > self.max_z:
            return False
        return True

    def contains_z_diff(self, z_diff: Optional[float]) -> bool:
        """Check if a z-score difference falls within the comparison bounds."""
        if _missing(z_diff):
            return False
        if self.min_z_diff is not None and z_diff < self.min_z_diff:
            return False
        if self.max_z_diff is not None and z_diff > self.max_z_diff:
            return False
        return True

    def to_dict(self) -> Dict[str, float]:
        return {k: v for k, v in (
            ("min_z", self.min_z),
            ("max_z", self.max_z),
            ("min_z_diff", self.min_z_diff),
            ("max_z_diff", self.max_z_diff),
        ) if v is not None}


@dataclass(frozen=True)
class InterpretationRule:
    """A single canned interpretation keyed by test, score range and audience."""

    id: str
    test_type: str
    title: str
    summary: str
    source: str
    audience: str
    test_abbreviation: Optional[str] = None
    score_range: Optional[ScoreRange] = None
    details: Optional[str] = None
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate the rule after initialization."""
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Rule ID must be a non-empty string")

        if not self.test_type or not isinstance(self.test_type, str):
            raise ValueError(f"Rule {self.id}: test_type must be a non-empty string")

        if not self.title:
            raise ValueError(f"Rule {self.id}: title must be a non-empty string")

        if self.audience not in VALID_AUDIENCES:
            raise ValueError(f"Rule {self.id}: audience must be one of: {', '.join(VALID_AUDIENCES)}")

    @property
    def is_comparison(self) -> bool:
        return self.test_type == COMPOSITE_COMPARISON

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterpretationRule":
        """Build a rule from its JSON/YAML representation."""
        score_range = data.get("score_range")

        recommendations = data.get("recommendations") or []
        if not isinstance(recommendations, list) or not all(isinstance(r, str) for r in recommendations):
            raise ValueError(f"Rule {data.get('id')}: recommendations must be a list of strings")

        return cls(
            id=str(data.get("id", "")),
            test_type=data.get("test_type", ""),
            test_abbreviation=data.get("test_abbreviation"),
            score_range=ScoreRange.from_dict(score_range) if isinstance(score_range, dict) else None,
            audience=str(data.get("audience", "")).strip().lower(),
            title=data.get("title", ""),
            summary=data.get("summary", ""),
            details=data.get("details"),
            source=data.get("source", ""),
            recommendations=tuple(recommendations),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary format."""
        return {
            "id": self.id,
            "test_type": self.test_type,
            "test_abbreviation": self.test_abbreviation,
            "score_range": self.score_range.to_dict() if self.score_range else None,
            "audience": self.audience,
            "title": self.title,
            "summary": self.summary,
            "details": self.details,
            "source": self.source,
            "recommendations": list(self.recommendations),
        }


class RuleTable:
    """Immutable, ordered collection of interpretation rules."""

    def __init__(self, rules=()):
        self._rules: Tuple[InterpretationRule, ...] = tuple(rules)
        self._validate_rules()

    def _validate_rules(self):
        """Check for duplicate rule ids."""
        ids = set()
        for rule in self._rules:
            if rule.id in ids:
                raise ValueError(f"Duplicate rule ID found: {rule.id}")
            ids.add(rule.id)

    @property
    def rules(self) -> Tuple[InterpretationRule, ...]:
        return self._rules

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get_rule(self, rule_id: str) -> Optional[InterpretationRule]:
        """Get a specific rule by ID."""
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def filter(self, **criteria) -> "RuleTable":
        """Return the rules whose attributes equal every given criterion, in table order."""
        matched = [
            rule for rule in self._rules
            if all(getattr(rule, key, None) == value for key, value in criteria.items())
        ]
        return RuleTable(matched)

    def get_statistics(self) -> Dict[str, Any]:
        """Counts of rules by test type and audience."""
        test_types: Dict[str, int] = {}
        audiences: Dict[str, int] = {}
        for rule in self._rules:
            test_types[rule.test_type] = test_types.get(rule.test_type, 0) + 1
            audiences[rule.audience] = audiences.get(rule.audience, 0) + 1

        return {
            "total_rules": len(self._rules),
            "test_types": test_types,
            "audiences": audiences,
            "comparison_rules": sum(1 for rule in self._rules if rule.is_comparison),
        }


def _read_entries(path: Path) -> List[Any]:
    suffix = path.suffix.lower()
    with open(path, "r", encoding="utf-8") as f:
        if suffix == ".jsonl":
            return [json.loads(line) for line in f if line.strip()]
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if isinstance(data, dict) and "interpretations" in data:
        data = data["interpretations"]
    if not isinstance(data, list):
        raise RuleTableError(f"Rule table must be a list of rules: {path}")
    return data


def load_rule_table(filepath: Union[str, Path]) -> RuleTable:
    """
    Load interpretation rules from a JSON array, JSONL or YAML file.

    Invalid entries are logged and skipped; a missing or unparseable file
    raises RuleTableError.
    """
    path = Path(filepath)

    try:
        entries = _read_entries(path)
    except FileNotFoundError:
        logger.error(f"Rule table not found: {path}")
        raise RuleTableError(f"Rule table not found: {path}")
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError, OSError) as e:
        logger.error(f"Error loading rule table from {path}: {e}")
        raise RuleTableError(f"Could not read rule table {path}: {e}") from e

    rules = []
    seen = set()
    for index, entry in enumerate(entries, 1):
        try:
            if not isinstance(entry, dict):
                raise ValueError("entry is not a mapping")
            rule = InterpretationRule.from_dict(entry)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid rule #{index} in {path}: {e}")
            continue
        if rule.id in seen:
            logger.warning(f"Skipping duplicate rule id {rule.id} in {path}")
            continue
        seen.add(rule.id)
        rules.append(rule)

    logger.info(f"Loaded {len(rules)} interpretation rules from {path}")
    return RuleTable(rules)
