"""
Soil Report Service.

Builds a soil test report from one measurement:
- pH interpretation and liming/acidifying recommendation
- Organic matter interpretation and building recommendation
- Phosphorus / potassium / CEC summary with amendment suggestions
- Soil biology outlook combining organic matter and pH

Long-form texts are loaded from data/soil_interpretations.json. If the file
cannot be read, built-in texts are used and pH and organic matter fall
back to the short classifier notes.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import json
import os
import logging

from farm_insights.services.agronomic_classifier import (
    Classification,
    Nutrient,
    agronomic_classifier,
)
from farm_insights.services.agronomic_rules import (
    PHOSPHORUS_MIN_PPM,
    POTASSIUM_MIN_PPM,
    CEC_MIN,
    OUT_OF_RANGE_NOTE,
)

logger = logging.getLogger(__name__)

SOIL_INTERPRETATIONS_PATH = os.environ.get(
    "FARM_INSIGHTS_INTERPRETATIONS_PATH",
    os.path.join(os.path.dirname(__file__), "..", "data", "soil_interpretations.json"),
)

# Used when the texts file cannot be read. pH and organic matter
# interpretations are left out so the classifier notes are shown instead.
DEFAULT_SOIL_INTERPRETATIONS = {
    "ph": {
        "recommendations": {
            "raise": "Apply agricultural lime to raise pH.",
            "light_lime": "Light lime application if growing most vegetables.",
            "maintain": "Maintain current pH with balanced organic matter additions.",
            "lower": "Apply sulfur or organic acids to lower pH.",
        },
    },
    "organic_matter": {
        "recommendations": {
            "low": "Increase compost applications, plant cover crops and reduce tillage.",
            "moderate": "Continue building with compost and maintain cover crops.",
            "maintain": "Maintain with light compost applications.",
        },
    },
    "nutrients": {
        "recommendations": {
            "phosphorus": "Add phosphorus through bone meal or rock phosphate",
            "potassium": "Increase potassium with wood ash or greensand",
            "cec": "Build CEC with organic matter and clay amendments",
            "maintain": "Maintain current nutrient levels with balanced fertilization",
        },
    },
    "biology": {
        "interpretations": {
            "excellent": "Excellent conditions for soil microorganisms.",
            "good": "Good soil biology potential with some limitations.",
            "limited": "Soil biology may be limited by low organic matter or pH extremes.",
        },
        "recommendations": {
            "organic_matter": "Increase organic matter to feed soil microorganisms",
            "ph": "Adjust pH to optimize microbial activity",
            "practices": ["Use compost and mycorrhizal inoculants"],
        },
    },
}

_soil_interpretations_cache = None


def clear_soil_interpretations_cache():
    """Clear the cache to reload interpretation texts on next call."""
    global _soil_interpretations_cache
    _soil_interpretations_cache = None


def load_soil_interpretations() -> Dict:
    """Load interpretation and recommendation texts from JSON file."""
    global _soil_interpretations_cache
    if _soil_interpretations_cache is not None:
        return _soil_interpretations_cache

    try:
        with open(SOIL_INTERPRETATIONS_PATH, "r", encoding="utf-8") as f:
            _soil_interpretations_cache = json.load(f)
            return _soil_interpretations_cache
    except Exception as e:
        logger.error(f"Error loading soil interpretations: {e}")
        _soil_interpretations_cache = DEFAULT_SOIL_INTERPRETATIONS
        return _soil_interpretations_cache


def _text(section: str, kind: str, key: str, default: Any = "") -> Any:
    return load_soil_interpretations().get(section, {}).get(kind, {}).get(key, default)


class InterpretationStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"


@dataclass
class ReportSection:
    title: str
    interpretation: str
    recommendation: str
    status: InterpretationStatus

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "interpretation": self.interpretation,
            "recommendation": self.recommendation,
            "status": self.status.value,
        }


@dataclass
class SoilReport:
    """Interpreted soil test, one section per soil aspect."""
    sampled_on: Optional[Any]
    ph_spectrum_position: float
    classifications: Dict[str, Classification] = field(default_factory=dict)
    sections: Dict[str, ReportSection] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sampled_on": self.sampled_on.isoformat() if self.sampled_on else None,
            "ph_spectrum_position": round(self.ph_spectrum_position, 4),
            "classifications": {k: v.to_dict() for k, v in self.classifications.items()},
            "sections": {k: v.to_dict() for k, v in self.sections.items()},
        }


def _ph_optimal(ph: float) -> bool:
    return 6.0 <= ph <= 7.5


def ph_status(ph: float) -> InterpretationStatus:
    if _ph_optimal(ph):
        return InterpretationStatus.GOOD
    if 5.5 <= ph < 6.0 or 7.5 < ph <= 8.0:
        return InterpretationStatus.WARNING
    return InterpretationStatus.POOR


def ph_recommendation(ph: float) -> str:
    if ph < 5.5:
        key = "raise"
    elif ph < 6.0:
        key = "light_lime"
    elif ph <= 7.5:
        key = "maintain"
    else:
        key = "lower"
    return _text("ph", "recommendations", key)


def organic_matter_status(pct: float) -> InterpretationStatus:
    if pct < 2.0:
        return InterpretationStatus.POOR
    if pct < 3.0:
        return InterpretationStatus.WARNING
    return InterpretationStatus.GOOD


def organic_matter_recommendation(pct: float) -> str:
    if pct < 2.0:
        key = "low"
    elif pct < 3.0:
        key = "moderate"
    else:
        key = "maintain"
    return _text("organic_matter", "recommendations", key)


def _level_label(result: Classification) -> str:
    return OUT_OF_RANGE_NOTE if result.out_of_range else result.band.value.capitalize()


def nutrient_summary(phosphorus: Classification, potassium: Classification, cec: Classification) -> str:
    summary = (
        f"Phosphorus: {_level_label(phosphorus)}, "
        f"Potassium: {_level_label(potassium)}, "
        f"CEC: {_level_label(cec)}."
    )
    suffix = load_soil_interpretations().get("nutrients", {}).get("summary_suffix")
    return f"{summary} {suffix}" if suffix else summary


def nutrient_recommendations(phosphorus_ppm: float, potassium_ppm: float, cec: float) -> str:
    recommendations = []
    if phosphorus_ppm < PHOSPHORUS_MIN_PPM:
        recommendations.append(_text("nutrients", "recommendations", "phosphorus"))
    if potassium_ppm < POTASSIUM_MIN_PPM:
        recommendations.append(_text("nutrients", "recommendations", "potassium"))
    if cec < CEC_MIN:
        recommendations.append(_text("nutrients", "recommendations", "cec"))

    recommendations = [r for r in recommendations if r]
    if not recommendations:
        return _text("nutrients", "recommendations", "maintain")
    return ". ".join(recommendations)


def nutrient_status(phosphorus_ppm: float, potassium_ppm: float, cec: float) -> InterpretationStatus:
    sufficient = sum([
        phosphorus_ppm >= PHOSPHORUS_MIN_PPM,
        potassium_ppm >= POTASSIUM_MIN_PPM,
        cec >= CEC_MIN,
    ])
    if sufficient == 3:
        return InterpretationStatus.GOOD
    if sufficient >= 1:
        return InterpretationStatus.WARNING
    return InterpretationStatus.POOR


def biology_interpretation(organic_matter_pct: float, ph: float) -> str:
    if organic_matter_pct >= 3.0 and _ph_optimal(ph):
        key = "excellent"
    elif organic_matter_pct >= 2.0 and 5.5 <= ph <= 8.0:
        key = "good"
    else:
        key = "limited"
    return _text("biology", "interpretations", key)


def biology_recommendations(organic_matter_pct: float, ph: float) -> str:
    recommendations: List[str] = []
    if organic_matter_pct < 3.0:
        recommendations.append(_text("biology", "recommendations", "organic_matter"))
    if not _ph_optimal(ph):
        recommendations.append(_text("biology", "recommendations", "ph"))
    recommendations.extend(_text("biology", "recommendations", "practices", []))
    return ". ".join(r for r in recommendations if r)


def biology_status(organic_matter_pct: float, ph: float) -> InterpretationStatus:
    om_good = organic_matter_pct >= 3.0
    ph_good = _ph_optimal(ph)
    if om_good and ph_good:
        return InterpretationStatus.GOOD
    if om_good or ph_good:
        return InterpretationStatus.WARNING
    return InterpretationStatus.POOR


def build_soil_report(measurement: Any) -> SoilReport:
    """
    Build the full soil report for a measurement.

    Args:
        measurement: object exposing ph, organic_matter_pct, phosphorus_ppm,
            potassium_ppm, cec and (optionally) sampled_on

    Returns:
        SoilReport with classifier results and four interpreted sections.
    """
    ph = measurement.ph
    om = measurement.organic_matter_pct
    classifications = agronomic_classifier.classify_soil(measurement)
    ph_result = classifications["ph"]
    om_result = classifications["organic_matter"]

    sections = {
        "ph": ReportSection(
            title="pH Analysis",
            interpretation=_text("ph", "interpretations", ph_result.band.value, ph_result.note),
            recommendation=ph_recommendation(ph),
            status=ph_status(ph),
        ),
        "organic_matter": ReportSection(
            title="Organic Matter",
            interpretation=_text("organic_matter", "interpretations", om_result.band.value, om_result.note),
            recommendation=organic_matter_recommendation(om),
            status=organic_matter_status(om),
        ),
        "nutrients": ReportSection(
            title="Nutrient Levels",
            interpretation=nutrient_summary(
                classifications["phosphorus"], classifications["potassium"], classifications["cec"]
            ),
            recommendation=nutrient_recommendations(
                measurement.phosphorus_ppm, measurement.potassium_ppm, measurement.cec
            ),
            status=nutrient_status(measurement.phosphorus_ppm, measurement.potassium_ppm, measurement.cec),
        ),
        "biology": ReportSection(
            title="Soil Biology",
            interpretation=biology_interpretation(om, ph),
            recommendation=biology_recommendations(om, ph),
            status=biology_status(om, ph),
        ),
    }

    logger.info(
        f"[SoilReport] pH={ph} ({sections['ph'].status.value}), OM={om}% "
        f"({sections['organic_matter'].status.value}), nutrients={sections['nutrients'].status.value}"
    )
    return SoilReport(
        sampled_on=getattr(measurement, "sampled_on", None),
        ph_spectrum_position=agronomic_classifier.ph_spectrum_position(ph),
        classifications=classifications,
        sections=sections,
    )


def nutrient_level_indicator(value: float, nutrient: Nutrient) -> Dict[str, Any]:
    """Level, color and supplementation text for one nutrient bar."""
    result = agronomic_classifier.classify_nutrient(value, nutrient)
    return {
        **result.to_dict(),
        "interpretation": agronomic_classifier.nutrient_interpretation(result),
    }
