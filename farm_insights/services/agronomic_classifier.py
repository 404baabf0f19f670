"""
Agronomic Classifier Service.

Maps scalar soil and labor measurements to discrete semantic bands:
- Soil pH (five-way primary scale plus the simplified field-row scale)
- Organic matter percentage
- Phosphorus, potassium and CEC levels (closed at a domain ceiling)
- Worked hours per shift (overtime bands and progress-ring geometry)

Every threshold lives in agronomic_rules and is evaluated by a single
first-matching-range lookup. All operations are pure and stateless; the
module-level singleton only holds immutable tables.
"""
from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union
import logging

from farm_insights.services.agronomic_rules import (
    PH_RANGES,
    PH_SIMPLIFIED_RANGES,
    PH_SPECTRUM_MIN,
    PH_SPECTRUM_MAX,
    ORGANIC_MATTER_RANGES,
    NUTRIENT_RANGES,
    NUTRIENT_LEVEL_TEMPLATES,
    OUT_OF_RANGE_NOTE,
    WORKED_HOURS_RANGES,
    HOURS_PER_DAY,
    SEVERITY_COLORS,
)
from farm_insights.services.lease_payment_service import is_lease_payment_due

logger = logging.getLogger(__name__)


class OutOfRangeError(ValueError):
    """Raised when a value falls outside every range of a threshold table."""


class UnknownNutrientError(KeyError):
    """Raised when a nutrient name has no threshold table."""


# ==================== ENUMS ====================

class Severity(str, Enum):
    """Display urgency derived from a band."""
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class ColorBand(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"


class PhBand(str, Enum):
    VERY_ACIDIC = "very_acidic"
    SLIGHTLY_ACIDIC = "slightly_acidic"
    OPTIMAL = "optimal"
    SLIGHTLY_ALKALINE = "slightly_alkaline"
    ALKALINE = "alkaline"
    VERY_ALKALINE = "very_alkaline"


class OrganicMatterBand(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"
    VERY_HIGH = "very_high"


class NutrientBand(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class HoursBand(str, Enum):
    REGULAR = "regular"
    FIRST_OVERTIME = "first_overtime"
    SECOND_OVERTIME = "second_overtime"
    EXCESSIVE = "excessive"


class Nutrient(str, Enum):
    """Soil nutrients with a level table."""
    PHOSPHORUS = "phosphorus"
    POTASSIUM = "potassium"
    CEC = "cec"
    ORGANIC_MATTER = "organic_matter"


# ==================== RANGE LOOKUP ====================

@dataclass(frozen=True)
class ThresholdRange:
    """One row of a threshold table."""
    band: Enum
    severity: Severity
    note: str = ""
    lower: Optional[float] = None
    upper: Optional[float] = None
    lower_inclusive: bool = True
    upper_inclusive: bool = False
    color: Optional[ColorBand] = None

    @classmethod
    def from_rule(cls, rule: Dict[str, Any], band_type: Type[Enum]) -> "ThresholdRange":
        severity = Severity(rule["severity"])
        return cls(
            band=band_type(rule["band"]),
            severity=severity,
            note=rule.get("note", ""),
            lower=rule.get("lower"),
            upper=rule.get("upper"),
            lower_inclusive=rule.get("lower_inclusive", True),
            upper_inclusive=rule.get("upper_inclusive", False),
            color=ColorBand(rule.get("color", SEVERITY_COLORS[severity.value])),
        )

    def contains(self, value: float) -> bool:
        if self.lower is not None:
            if self.lower_inclusive and not value >= self.lower:
                return False
            if not self.lower_inclusive and not value > self.lower:
                return False
        if self.upper is not None:
            if self.upper_inclusive and not value <= self.upper:
                return False
            if not self.upper_inclusive and not value < self.upper:
                return False
        return True


def build_ranges(rules: List[Dict[str, Any]], band_type: Type[Enum]) -> List[ThresholdRange]:
    """Convert a rules table into ordered ThresholdRange rows."""
    return [ThresholdRange.from_rule(rule, band_type) for rule in rules]


def find_matching_range(value: float, ranges: List[ThresholdRange]) -> ThresholdRange:
    """
    Return the first range containing value.

    Raises:
        OutOfRangeError: if no range contains the value (including NaN).
    """
    for threshold in ranges:
        if threshold.contains(value):
            return threshold
    raise OutOfRangeError(f"Value {value} is outside every classification range")


# ==================== RESULTS ====================

@dataclass
class Classification:
    """Band, severity and note for one measured value."""
    metric: str
    value: float
    band: Optional[Enum]
    severity: Optional[Severity]
    note: str
    color: Optional[ColorBand] = None

    @property
    def out_of_range(self) -> bool:
        return self.band is None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("band", "severity", "color"):
            if isinstance(data[key], Enum):
                data[key] = data[key].value
        data["out_of_range"] = self.out_of_range
        return data


def _classification(metric: str, value: float, threshold: ThresholdRange) -> Classification:
    return Classification(
        metric=metric,
        value=value,
        band=threshold.band,
        severity=threshold.severity,
        note=threshold.note,
        color=threshold.color,
    )


class AgronomicClassifier:
    """
    Classifier for soil test values and worked hours.

    Tables are built once from agronomic_rules. Nutrient tables are closed at
    a ceiling; every other table is open-ended so those classifiers are total
    over finite inputs.
    """

    PH_TABLE = build_ranges(PH_RANGES, PhBand)
    PH_SIMPLIFIED_TABLE = build_ranges(PH_SIMPLIFIED_RANGES, PhBand)
    ORGANIC_MATTER_TABLE = build_ranges(ORGANIC_MATTER_RANGES, OrganicMatterBand)
    NUTRIENT_TABLES = {
        Nutrient(key): build_ranges(config["ranges"], NutrientBand)
        for key, config in NUTRIENT_RANGES.items()
    }
    WORKED_HOURS_TABLE = build_ranges(WORKED_HOURS_RANGES, HoursBand)

    def classify_ph(self, ph: float) -> Classification:
        """
        Classify soil pH on the six-band scale.

        pH 7.0 resolves to optimal. Values outside [0, 14] are not clamped and
        fall into the extreme bands.
        """
        threshold = find_matching_range(ph, self.PH_TABLE)
        logger.debug(f"[Classifier] pH {ph} -> {threshold.band.value}")
        return _classification("ph", ph, threshold)

    def classify_ph_simplified(self, ph: float) -> Classification:
        """Legacy field-row scale: error below 5.5 or from 8.0, warning next to those."""
        threshold = find_matching_range(ph, self.PH_SIMPLIFIED_TABLE)
        return _classification("ph", ph, threshold)

    def classify_organic_matter(self, pct: float) -> Classification:
        threshold = find_matching_range(pct, self.ORGANIC_MATTER_TABLE)
        logger.debug(f"[Classifier] OM {pct}% -> {threshold.band.value}")
        return _classification("organic_matter", pct, threshold)

    def resolve_nutrient(self, nutrient: Union[Nutrient, str]) -> Nutrient:
        try:
            return Nutrient(str(nutrient.value if isinstance(nutrient, Nutrient) else nutrient).strip().lower())
        except ValueError:
            raise UnknownNutrientError(nutrient)

    def classify_nutrient(self, value: float, nutrient: Union[Nutrient, str]) -> Classification:
        """
        Classify a nutrient level as low, medium or high.

        Values below zero or above the nutrient ceiling return the out-of-range
        sentinel (band and severity None) instead of raising.

        Raises:
            UnknownNutrientError: if the nutrient has no table.
        """
        key = self.resolve_nutrient(nutrient)
        try:
            threshold = find_matching_range(value, self.NUTRIENT_TABLES[key])
        except OutOfRangeError:
            logger.warning(f"[Classifier] {key.value} value {value} is out of range")
            return Classification(
                metric=key.value,
                value=value,
                band=None,
                severity=None,
                note=OUT_OF_RANGE_NOTE,
            )
        result = _classification(key.value, value, threshold)
        result.note = f"{threshold.band.value.capitalize()} level"
        return result

    def nutrient_interpretation(self, result: Classification) -> str:
        """Supplementation text for a nutrient classification."""
        if result.out_of_range:
            return OUT_OF_RANGE_NOTE
        name = NUTRIENT_RANGES[result.metric]["name"].lower()
        return NUTRIENT_LEVEL_TEMPLATES[result.band.value].format(name=name)

    def classify_worked_hours(self, hours: float) -> Classification:
        threshold = find_matching_range(hours, self.WORKED_HOURS_TABLE)
        return _classification("worked_hours", hours, threshold)

    def ring_angle_for_hours(self, hours: float) -> float:
        """Degrees of a 24-hour ring covered by hours. Not clamped above 360."""
        return (hours / HOURS_PER_DAY) * 360.0

    def ring_fraction_for_hours(self, hours: float) -> float:
        """Drawable fraction of the 24-hour ring, clamped to [0, 1]."""
        return max(0.0, min(1.0, hours / HOURS_PER_DAY))

    def ph_spectrum_position(self, ph: float) -> float:
        """Relative position of pH on the 4.0-9.0 spectrum bar."""
        clamped = max(PH_SPECTRUM_MIN, min(PH_SPECTRUM_MAX, ph))
        return (clamped - PH_SPECTRUM_MIN) / (PH_SPECTRUM_MAX - PH_SPECTRUM_MIN)

    def is_lease_payment_due(self, lease: Any, as_of: date) -> bool:
        return is_lease_payment_due(lease, as_of)

    def classify_soil(self, measurement: Any) -> Dict[str, Classification]:
        """Classify every metric of a soil measurement."""
        return {
            "ph": self.classify_ph(measurement.ph),
            "organic_matter": self.classify_organic_matter(measurement.organic_matter_pct),
            "phosphorus": self.classify_nutrient(measurement.phosphorus_ppm, Nutrient.PHOSPHORUS),
            "potassium": self.classify_nutrient(measurement.potassium_ppm, Nutrient.POTASSIUM),
            "cec": self.classify_nutrient(measurement.cec, Nutrient.CEC),
        }


agronomic_classifier = AgronomicClassifier()

classify_ph = agronomic_classifier.classify_ph
classify_ph_simplified = agronomic_classifier.classify_ph_simplified
classify_organic_matter = agronomic_classifier.classify_organic_matter
classify_nutrient = agronomic_classifier.classify_nutrient
classify_worked_hours = agronomic_classifier.classify_worked_hours
ring_angle_for_hours = agronomic_classifier.ring_angle_for_hours
