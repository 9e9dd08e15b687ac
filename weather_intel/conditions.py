# ABOUTME: Maps WMO weather codes reported by Open-Meteo to semantic condition labels.
# ABOUTME: Pure and total: every integer maps to a label, unknown codes to UNCLASSIFIED.

from weather_intel.models import ConditionLabel

# Inclusive code ranges, checked in order.
_CODE_RANGES: tuple[tuple[int, int, ConditionLabel], ...] = (
    (0, 0, ConditionLabel.CLEAR_SKY),
    (1, 3, ConditionLabel.PARTLY_CLOUDY),
    (45, 48, ConditionLabel.FOGGY),
    (51, 55, ConditionLabel.DRIZZLE),
    (61, 67, ConditionLabel.RAIN),
    (71, 77, ConditionLabel.SNOW),
    (80, 82, ConditionLabel.SHOWERS),
    (95, 99, ConditionLabel.THUNDERSTORM),
)


def classify_condition(code: int) -> ConditionLabel:
    """Return the condition label for a WMO weather code."""
    for low, high, label in _CODE_RANGES:
        if low <= code <= high:
            return label
    return ConditionLabel.UNCLASSIFIED
