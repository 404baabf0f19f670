"""
Deterministic agronomic rules and thresholds for soil, labor and lease hints.

This module centralizes every threshold table so classification logic stays
deterministic, auditable, and consistent across services and tests.

Each table is an ordered list of ranges. A range matches when the value sits
inside its bounds; lower bounds are inclusive and upper bounds exclusive unless
the entry says otherwise. ``None`` marks an open end. The first matching entry
wins, so an overlapping boundary always resolves to the earlier entry.
"""

# ==================== SOIL pH ====================

PH_RANGES = [
    {"upper": 5.5, "band": "very_acidic", "severity": "error",
     "note": "Very acidic - may limit nutrient availability"},
    {"lower": 5.5, "upper": 6.0, "band": "slightly_acidic", "severity": "warning",
     "note": "Slightly acidic - good for blueberries, potatoes"},
    {"lower": 6.0, "upper": 7.0, "upper_inclusive": True, "band": "optimal", "severity": "success",
     "note": "Optimal range for most crops"},
    {"lower": 7.0, "lower_inclusive": False, "upper": 7.5, "upper_inclusive": True,
     "band": "slightly_alkaline", "severity": "success",
     "note": "Slightly alkaline - good for brassicas"},
    {"lower": 7.5, "lower_inclusive": False, "upper": 8.0, "upper_inclusive": True,
     "band": "alkaline", "severity": "warning",
     "note": "Alkaline - may reduce iron availability"},
    {"lower": 8.0, "lower_inclusive": False, "band": "very_alkaline", "severity": "error",
     "note": "Very alkaline - significant nutrient limitations"},
]

# Two-bucket severity used by compact field rows
PH_SIMPLIFIED_RANGES = [
    {"upper": 5.5, "band": "very_acidic", "severity": "error"},
    {"lower": 5.5, "upper": 6.0, "band": "slightly_acidic", "severity": "warning"},
    {"lower": 6.0, "upper": 7.5, "band": "optimal", "severity": "success"},
    {"lower": 7.5, "upper": 8.0, "band": "alkaline", "severity": "warning"},
    {"lower": 8.0, "band": "very_alkaline", "severity": "error"},
]

PH_SPECTRUM_MIN = 4.0
PH_SPECTRUM_MAX = 9.0

# ==================== ORGANIC MATTER (%) ====================

ORGANIC_MATTER_RANGES = [
    {"upper": 2.0, "band": "low", "severity": "error",
     "note": "Low - needs organic matter additions"},
    {"lower": 2.0, "upper": 3.0, "band": "moderate", "severity": "warning",
     "note": "Moderate - continue building with compost"},
    {"lower": 3.0, "upper": 5.0, "upper_inclusive": True, "band": "good", "severity": "success",
     "note": "Good - maintain with organic practices"},
    {"lower": 5.0, "lower_inclusive": False, "band": "very_high", "severity": "info",
     "note": "Very high - excellent soil biology"},
]

# ==================== NUTRIENT LEVELS ====================
# Closed at a domain ceiling; anything above (or below zero) is out of range.

NUTRIENT_RANGES = {
    "phosphorus": {
        "name": "Phosphorus",
        "unit": "ppm",
        "ranges": [
            {"lower": 0.0, "upper": 15.0, "band": "low", "severity": "error"},
            {"lower": 15.0, "upper": 30.0, "band": "medium", "severity": "warning"},
            {"lower": 30.0, "upper": 200.0, "upper_inclusive": True, "band": "high", "severity": "success"},
        ],
    },
    "potassium": {
        "name": "Potassium",
        "unit": "ppm",
        "ranges": [
            {"lower": 0.0, "upper": 100.0, "band": "low", "severity": "error"},
            {"lower": 100.0, "upper": 200.0, "band": "medium", "severity": "warning"},
            {"lower": 200.0, "upper": 500.0, "upper_inclusive": True, "band": "high", "severity": "success"},
        ],
    },
    "cec": {
        "name": "CEC",
        "unit": "meq/100g",
        "ranges": [
            {"lower": 0.0, "upper": 10.0, "band": "low", "severity": "error"},
            {"lower": 10.0, "upper": 20.0, "band": "medium", "severity": "warning"},
            {"lower": 20.0, "upper": 40.0, "upper_inclusive": True, "band": "high", "severity": "success"},
        ],
    },
    "organic_matter": {
        "name": "Organic Matter",
        "unit": "%",
        "ranges": [
            {"lower": 0.0, "upper": 2.0, "band": "low", "severity": "error"},
            {"lower": 2.0, "upper": 3.0, "band": "medium", "severity": "warning"},
            {"lower": 3.0, "upper": 10.0, "upper_inclusive": True, "band": "high", "severity": "success"},
        ],
    },
}

NUTRIENT_LEVEL_TEMPLATES = {
    "low": "May need {name} supplementation",
    "medium": "Adequate {name} levels",
    "high": "Sufficient {name} for most crops",
}

OUT_OF_RANGE_NOTE = "Out of range"

# Minimums below which the soil report recommends an amendment
PHOSPHORUS_MIN_PPM = 15.0
POTASSIUM_MIN_PPM = 100.0
CEC_MIN = 10.0

# ==================== WORKED HOURS ====================

HOURS_PER_DAY = 24.0
REGULAR_HOURS = 8.0
FIRST_OVERTIME_HOURS = 9.0
SECOND_OVERTIME_HOURS = 12.0
WEEKLY_OVERTIME_HOURS = 40.0

WORKED_HOURS_RANGES = [
    {"upper": REGULAR_HOURS, "band": "regular", "severity": "success", "color": "green",
     "note": "Regular hours"},
    {"lower": REGULAR_HOURS, "upper": FIRST_OVERTIME_HOURS, "band": "first_overtime",
     "severity": "warning", "color": "yellow", "note": "First overtime hour"},
    {"lower": FIRST_OVERTIME_HOURS, "upper": SECOND_OVERTIME_HOURS, "band": "second_overtime",
     "severity": "warning", "color": "orange", "note": "Extended overtime"},
    {"lower": SECOND_OVERTIME_HOURS, "band": "excessive", "severity": "error", "color": "red",
     "note": "Excessive hours"},
]

# ==================== SEVERITY COLORS ====================

SEVERITY_COLORS = {
    "error": "red",
    "warning": "yellow",
    "success": "green",
    "info": "blue",
}

# ==================== LEASES ====================

UPCOMING_PAYMENT_WINDOW_DAYS = 30
QUARTERLY_PAYMENT_MONTHS = [1, 4, 7, 10]
SEMI_ANNUAL_PAYMENT_MONTHS = [3, 9]
