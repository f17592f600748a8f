"""
Reference-range auto status.

Independent of the trend rules, a patient can be scored by counting how many
of the latest vitals and lab readings fall outside adult reference ranges:
none is green, one is yellow, two or more is red. Ranges are expressed in the
same units as `VitalSigns` and `LabValues`.
"""

from datetime import datetime

import structlog

from postop_radar.domain.models import (
    AbnormalValue,
    AlertStatus,
    AutoStatusResult,
    LabValues,
    Patient,
    ReferenceRange,
    VitalSigns,
)

logger = structlog.get_logger(__name__)

# attribute -> (label, range)
VITAL_RANGES: dict[str, tuple[str, ReferenceRange]] = {
    "heart_rate": ("HR", ReferenceRange(min=60, max=100, unit="bpm")),
    "systolic_bp": ("Systolic BP", ReferenceRange(min=90, max=140, unit="mmHg")),
    "diastolic_bp": ("Diastolic BP", ReferenceRange(min=60, max=90, unit="mmHg")),
    "temperature": ("Temperature", ReferenceRange(min=36.1, max=37.2, unit="°C")),
    "urine_output": ("Urine Output", ReferenceRange(min=30, max=200, unit="ml/hr")),
}

LAB_RANGES: dict[str, tuple[str, ReferenceRange]] = {
    "wbc": ("WBC", ReferenceRange(min=4.0, max=11.0, unit="x10⁹/L")),
    "hemoglobin": ("Hb", ReferenceRange(min=12.0, max=16.0, unit="g/dL")),
    "creatinine": ("Creatinine", ReferenceRange(min=0.6, max=1.2, unit="mg/dL")),
    "lactate": ("Lactate", ReferenceRange(min=0.5, max=2.0, unit="mmol/L")),
}


def _check(
    entry: VitalSigns | LabValues, ranges: dict[str, tuple[str, ReferenceRange]]
) -> list[AbnormalValue]:
    abnormalities = []
    for attribute, (label, reference) in ranges.items():
        value = getattr(entry, attribute)
        if value is not None and not reference.contains(value):
            abnormalities.append(
                AbnormalValue(field=attribute, value=value, range=reference, label=label)
            )
    return abnormalities


def check_vital_abnormalities(vitals: VitalSigns) -> list[AbnormalValue]:
    return _check(vitals, VITAL_RANGES)


def check_lab_abnormalities(labs: LabValues) -> list[AbnormalValue]:
    return _check(labs, LAB_RANGES)


def _summarize(abnormalities: list[AbnormalValue]) -> str:
    if not abnormalities:
        return "All values within normal range"
    count = len(abnormalities)
    noun = "abnormality" if count == 1 else "abnormalities"
    labels = ", ".join(a.label for a in abnormalities)
    return f"Auto-status: {count} {noun} ({labels})"


def calculate_auto_status(patient: Patient) -> AutoStatusResult:
    """
    Score the most recent vitals and labs entries against reference ranges.

    Unlike the alert rules, this picks the entry with the greatest timestamp
    in each series rather than the last one stored.
    """
    abnormalities: list[AbnormalValue] = []
    most_recent: datetime | None = None

    if patient.vitals:
        latest_vitals = max(patient.vitals, key=lambda v: v.timestamp)
        found = check_vital_abnormalities(latest_vitals)
        if found:
            abnormalities.extend(found)
            most_recent = latest_vitals.timestamp

    if patient.labs:
        latest_labs = max(patient.labs, key=lambda lab: lab.timestamp)
        found = check_lab_abnormalities(latest_labs)
        if found:
            abnormalities.extend(found)
            if most_recent is None or latest_labs.timestamp > most_recent:
                most_recent = latest_labs.timestamp

    count = len(abnormalities)
    if count == 0:
        status = AlertStatus.GREEN
    elif count == 1:
        status = AlertStatus.YELLOW
    else:
        status = AlertStatus.RED

    summary = _summarize(abnormalities)
    logger.debug("auto_status_calculated", patient_id=patient.id, status=status.value, summary=summary)
    return AutoStatusResult(
        status=status,
        abnormal_count=count,
        abnormalities=abnormalities,
        summary=summary,
        most_recent_abnormal_timestamp=most_recent,
    )


def get_effective_status(patient: Patient, computed: AlertStatus | None = None) -> AlertStatus:
    """Manual override first, then the computed status, then the stored one."""
    if patient.status_mode == "manual" and patient.manual_status is not None:
        return patient.manual_status
    if computed is not None:
        return computed
    return patient.alert_status
