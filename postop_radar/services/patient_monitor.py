"""
Patient evaluation facade.

Combines the trend calculator, the alert rules, the status reducer and the
reference-range auto status into one call per patient. The monitor holds only
configuration, so one instance can serve any number of patients concurrently.
"""

import structlog

from postop_radar.config import AppConfig, get_config
from postop_radar.domain.models import Patient, PatientAssessment
from postop_radar.services.alert_rules import AlertRuleEngine
from postop_radar.services.alert_status import worst_severity
from postop_radar.services.reference_ranges import calculate_auto_status, get_effective_status
from postop_radar.services.trends import calculate_trends

logger = structlog.get_logger(__name__)


class PatientMonitor:
    """Evaluates patients and reports trends, alerts and status together."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self.rule_engine = AlertRuleEngine(self.config.engine.stable_change_percent)
        self.logger = logger.bind(component="patient_monitor")

    def assess(self, patient: Patient) -> PatientAssessment:
        trends = calculate_trends(
            patient, stable_change_percent=self.config.engine.stable_change_percent
        )
        alerts = self.rule_engine.evaluate(patient, trends)
        alert_status = worst_severity(alerts)
        auto_status = calculate_auto_status(patient)

        assessment = PatientAssessment(
            patient_id=patient.id,
            trends=trends,
            alerts=alerts,
            alert_status=alert_status,
            auto_status=auto_status,
            effective_status=get_effective_status(patient, auto_status.status),
        )

        self.logger.info(
            "patient_assessed",
            patient_id=patient.id,
            post_op_day=patient.post_op_day,
            alert_status=alert_status.value,
            alert_count=len(alerts),
            alert_ids=[alert.id for alert in alerts],
            auto_status=auto_status.status.value,
            effective_status=assessment.effective_status.value,
        )
        return assessment

    def apply_assessment(self, patient: Patient) -> Patient:
        """
        Copy of the patient with `alert_status` set from its current alerts.

        A patient in manual status mode keeps the status a clinician chose.
        """
        if patient.status_mode == "manual":
            self.logger.debug("status_update_skipped_manual_mode", patient_id=patient.id)
            return patient.model_copy()
        alert_status = worst_severity(self.rule_engine.evaluate(patient))
        return patient.model_copy(update={"alert_status": alert_status})
