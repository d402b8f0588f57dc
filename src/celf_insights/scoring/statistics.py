"""
Normative score statistics for CELF-P3.

Standard scores have mean 100 and SD 15; scaled (subtest) scores have mean 10
and SD 3. Percentiles come from the standard normal CDF using the
Abramowitz & Stegun 7.1.26 approximation of erf, rounded half-up to one
decimal.
"""

import math
from typing import Dict, List, Optional, Tuple

from ..models.report import NormativeBand

NORMATIVE_PARAMS: Dict[str, Tuple[float, float]] = {
    "standard": (100.0, 15.0),
    "scaled": (10.0, 3.0),
}

# Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def _is_missing(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def normative_params(score_type: str = "standard") -> Tuple[float, float]:
    """Return (mean, sd) for a score type; unknown types use standard norms."""
    return NORMATIVE_PARAMS.get(score_type, NORMATIVE_PARAMS["standard"])


def z_score(score: Optional[float], score_type: str = "standard") -> Optional[float]:
    """Z-score of a score, or None when the score is missing or NaN."""
    if _is_missing(score):
        return None
    mean, sd = normative_params(score_type)
    return (score - mean) / sd


def normative_band(z: Optional[float]) -> NormativeBand:
    """
    Classify a z-score into one of five normative bands.

    Thresholds are closed below: a boundary value belongs to the lower band,
    so z = -1 is "Below Average" and z = 1 is "Average".
    """
    if _is_missing(z):
        return NormativeBand.NO_DATA
    if z <= -2:
        return NormativeBand.SIGNIFICANTLY_BELOW
    elif z <= -1:
        return NormativeBand.BELOW
    elif z <= 1:
        return NormativeBand.AVERAGE
    elif z <= 2:
        return NormativeBand.ABOVE
    else:
        return NormativeBand.SIGNIFICANTLY_ABOVE


def simplified_band(z: Optional[float]) -> Optional[str]:
    """Three-way band ('below', 'average', 'above') used for coarse grouping."""
    if _is_missing(z):
        return None
    if z < -1:
        return "below"
    elif z <= 1:
        return "average"
    else:
        return "above"


def erf(x: float) -> float:
    """Error function approximation (Abramowitz & Stegun 7.1.26)."""
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)

    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)

    return sign * y


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentile_from_z(z: Optional[float]) -> Optional[float]:
    """Percentile rank (0-100, one decimal) of a z-score under the normal curve."""
    if _is_missing(z):
        return None
    percentile = 0.5 * (1 + erf(z / math.sqrt(2))) * 100
    return _round_half_up(percentile, 1)


def score_to_percentile(score: Optional[float], score_type: str = "standard") -> Optional[float]:
    """Percentile rank of a standard or scaled score."""
    return percentile_from_z(z_score(score, score_type))


def score_interpretation(score: Optional[float], score_type: str = "standard") -> NormativeBand:
    """Normative band label for a score."""
    return normative_band(z_score(score, score_type))


def normal_pdf(x: float, mean: float, sd: float) -> float:
    """Normal probability density at x."""
    return math.exp(-0.5 * ((x - mean) / sd) ** 2) / (sd * math.sqrt(2 * math.pi))


def bell_curve(score_type: str = "standard", step: float = 0.5) -> List[Tuple[float, float]]:
    """
    Points of the normative density curve over mean +/- 4 SD.

    Returns (score, density) pairs for a rendering layer to draw.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    mean, sd = normative_params(score_type)
    x_min, x_max = mean - 4 * sd, mean + 4 * sd
    count = int(round((x_max - x_min) / step))
    return [(x_min + i * step, normal_pdf(x_min + i * step, mean, sd)) for i in range(count)]
