"""
Trend calculation over a patient's ordered vitals and labs.

Each tracked metric is described once in `TRACKED_METRICS`: where its readings
live, which attribute holds them, and when its latest state is concerning.
`calculate_trends` walks that table in order, so the output order is fixed.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Literal

import structlog

from postop_radar.domain.models import LabValues, Patient, TrendData, TrendDirection, VitalSigns

logger = structlog.get_logger(__name__)

DEFAULT_STABLE_CHANGE_PERCENT = 5.0


class MetricLabel(str, Enum):
    """Display labels of tracked metrics; rules look trends up by these."""

    HEART_RATE = "Heart Rate"
    SYSTOLIC_BP = "Systolic BP"
    TEMPERATURE = "Temperature"
    URINE_OUTPUT = "Urine Output"
    WBC = "WBC"
    HEMOGLOBIN = "Hemoglobin"
    CREATININE = "Creatinine"
    LACTATE = "Lactate"


@dataclass(frozen=True)
class MetricSpec:
    """How to extract and judge one tracked metric."""

    label: MetricLabel
    source: Literal["vitals", "labs"]
    attribute: str
    is_concerning: Callable[[float, TrendDirection], bool]


TRACKED_METRICS: tuple[MetricSpec, ...] = (
    MetricSpec(
        MetricLabel.HEART_RATE,
        "vitals",
        "heart_rate",
        lambda latest, trend: latest > 100 or trend is TrendDirection.RISING,
    ),
    MetricSpec(
        MetricLabel.SYSTOLIC_BP,
        "vitals",
        "systolic_bp",
        lambda latest, trend: latest < 100 or trend is TrendDirection.FALLING,
    ),
    MetricSpec(
        MetricLabel.TEMPERATURE,
        "vitals",
        "temperature",
        lambda latest, trend: latest >= 38.0,
    ),
    MetricSpec(
        MetricLabel.URINE_OUTPUT,
        "vitals",
        "urine_output",
        lambda latest, trend: latest < 30 or trend is TrendDirection.FALLING,
    ),
    MetricSpec(
        MetricLabel.WBC,
        "labs",
        "wbc",
        lambda latest, trend: latest > 12 or trend is TrendDirection.RISING,
    ),
    MetricSpec(
        MetricLabel.HEMOGLOBIN,
        "labs",
        "hemoglobin",
        lambda latest, trend: latest < 10 or trend is TrendDirection.FALLING,
    ),
    MetricSpec(
        MetricLabel.CREATININE,
        "labs",
        "creatinine",
        lambda latest, trend: latest > 1.2 or trend is TrendDirection.RISING,
    ),
    MetricSpec(
        MetricLabel.LACTATE,
        "labs",
        "lactate",
        lambda latest, trend: latest > 2.0 or trend is TrendDirection.RISING,
    ),
)


def determine_trend(
    values: Sequence[float], stable_change_percent: float = DEFAULT_STABLE_CHANGE_PERCENT
) -> TrendDirection:
    """
    Classify the change from the first to the last value.

    A change smaller than `stable_change_percent` of the first value is stable.
    A zero first value has no meaningful percent change: an unchanged zero is
    stable, anything else takes the direction of the change.
    """
    if len(values) < 2:
        return TrendDirection.STABLE

    first, last = values[0], values[-1]
    change = last - first

    if first == 0:
        if change == 0:
            return TrendDirection.STABLE
    elif abs(change / first) * 100 < stable_change_percent:
        return TrendDirection.STABLE

    return TrendDirection.RISING if change > 0 else TrendDirection.FALLING


def _series_values(
    readings: Sequence[VitalSigns] | Sequence[LabValues], attribute: str
) -> list[float] | None:
    """Values of one attribute, or None if any reading lacks it."""
    values = [getattr(reading, attribute) for reading in readings]
    if any(value is None for value in values):
        return None
    return values


def _build_trend(
    spec: MetricSpec,
    readings: Sequence[VitalSigns] | Sequence[LabValues],
    stable_change_percent: float,
) -> TrendData | None:
    if len(readings) < 2:
        return None

    values = _series_values(readings, spec.attribute)
    if values is None:
        return None

    trend = determine_trend(values, stable_change_percent)
    return TrendData(
        label=spec.label.value,
        values=values,
        timestamps=[reading.timestamp for reading in readings],
        trend=trend,
        concerning=spec.is_concerning(values[-1], trend),
    )


def calculate_trends(
    patient: Patient, *, stable_change_percent: float = DEFAULT_STABLE_CHANGE_PERCENT
) -> list[TrendData]:
    """
    Trends for every tracked metric with at least two readings.

    Optional metrics (urine output, lactate) are all-or-nothing: one missing
    reading anywhere in the series drops the metric entirely.
    """
    trends: list[TrendData] = []
    for spec in TRACKED_METRICS:
        readings = patient.vitals if spec.source == "vitals" else patient.labs
        trend = _build_trend(spec, readings, stable_change_percent)
        if trend is not None:
            trends.append(trend)

    logger.debug(
        "trends_calculated",
        patient_id=patient.id,
        labels=[trend.label for trend in trends],
        concerning=[trend.label for trend in trends if trend.concerning],
    )
    return trends


def find_trend(trends: Sequence[TrendData], label: MetricLabel) -> TrendData | None:
    """First trend with the given label, if it was calculated."""
    return next((trend for trend in trends if trend.label == label.value), None)
