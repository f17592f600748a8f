"""Reduce a patient's alerts to one traffic-light status."""

from collections.abc import Iterable

from postop_radar.domain.models import Alert, AlertStatus, Patient
from postop_radar.services.alert_rules import generate_alerts
from postop_radar.services.trends import DEFAULT_STABLE_CHANGE_PERCENT


def worst_severity(alerts: Iterable[Alert]) -> AlertStatus:
    """Highest severity among the alerts; green when there are none."""
    return max((alert.severity for alert in alerts), key=lambda s: s.rank, default=AlertStatus.GREEN)


def calculate_alert_status(
    patient: Patient, *, stable_change_percent: float = DEFAULT_STABLE_CHANGE_PERCENT
) -> AlertStatus:
    """Worst severity among the patient's alerts: red, then yellow, else green."""
    return worst_severity(generate_alerts(patient, stable_change_percent=stable_change_percent))
