"""
Rule-based alert generation - transparent and explainable.

Five independent rules run in a fixed order. Each one reads the patient's
trends plus the latest vitals and labs entry and raises at most one alert.
Several rules may fire for the same patient; every fired rule contributes to
the alert list because the status reducer needs all of them.

The wording of each alert lives in `postop_radar.domain.clinical_content`;
rules here only decide whether to fire and which readings explain it.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from postop_radar.domain.clinical_content import ALERT_TEMPLATES, AlertTemplate, RuleId
from postop_radar.domain.models import (
    Alert,
    LabValues,
    Patient,
    TrendData,
    TrendDirection,
    VitalSigns,
)
from postop_radar.domain.result import InsufficientDataError, Result
from postop_radar.services.trends import (
    DEFAULT_STABLE_CHANGE_PERCENT,
    MetricLabel,
    calculate_trends,
    find_trend,
)

logger = structlog.get_logger(__name__)


def format_reading(value: float) -> str:
    """Render a raw reading the way it was charted: `95`, `95.5`."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_decimal(value: float) -> str:
    """Render a reading to one decimal place: `13.0`."""
    return f"{value:.1f}"


def latest_observations(
    patient: Patient,
) -> Result[tuple[VitalSigns, LabValues], InsufficientDataError]:
    """The last vitals and labs entries, or the series that are empty."""
    missing = [
        name
        for name, series in (("vitals", patient.vitals), ("labs", patient.labs))
        if not series
    ]
    if missing:
        return Result.err(InsufficientDataError(patient.id, missing))
    return Result.ok((patient.vitals[-1], patient.labs[-1]))


@dataclass
class RuleContext:
    """Everything a rule may read for one evaluation."""

    patient: Patient
    trends: Sequence[TrendData]
    latest_vitals: VitalSigns
    latest_labs: LabValues
    alerts: list[Alert] = field(default_factory=list)

    def trend(self, label: MetricLabel) -> TrendData | None:
        return find_trend(self.trends, label)


class AlertRule:
    """Base class for alert rules"""

    rule_id: RuleId

    @property
    def template(self) -> AlertTemplate:
        return ALERT_TEMPLATES[self.rule_id]

    def evaluate(self, context: RuleContext) -> Alert | None:
        """
        Evaluate the rule for one patient.

        Args:
            context: Trends, latest observations and alerts raised so far

        Returns:
            The alert if the rule fires, otherwise None
        """
        raise NotImplementedError("Subclasses must implement evaluate()")

    def _create_alert(self, context: RuleContext, triggered_by: list[str]) -> Alert:
        template = self.template
        return Alert(
            id=f"alert-{context.patient.id}-{self.rule_id.value}",
            patient_id=context.patient.id,
            severity=template.severity,
            title=template.title,
            description=template.description,
            triggered_by=triggered_by,
            considerations=list(template.considerations),
            cognitive_prompts=list(template.cognitive_prompts),
            timestamp=datetime.now(UTC),
        )


class EarlyInfectionRule(AlertRule):
    """Rising heart rate with rising WBC on POD 3-5."""

    rule_id = RuleId.EARLY_INFECTION

    def evaluate(self, context: RuleContext) -> Alert | None:
        if not 3 <= context.patient.post_op_day <= 5:
            return None

        hr_trend = context.trend(MetricLabel.HEART_RATE)
        wbc_trend = context.trend(MetricLabel.WBC)
        if hr_trend is None or wbc_trend is None:
            return None
        if hr_trend.trend is not TrendDirection.RISING:
            return None
        if wbc_trend.trend is not TrendDirection.RISING:
            return None

        if hr_trend.latest > 90 and wbc_trend.latest > 12:
            return self._create_alert(
                context,
                [
                    f"Rising heart rate ({format_reading(hr_trend.first)} → "
                    f"{format_reading(hr_trend.latest)} bpm)",
                    f"Rising WBC ({format_decimal(wbc_trend.first)} → "
                    f"{format_decimal(wbc_trend.latest)})",
                ],
            )
        return None


class BleedingRule(AlertRule):
    """Falling hemoglobin with tachycardia."""

    rule_id = RuleId.BLEEDING

    def evaluate(self, context: RuleContext) -> Alert | None:
        hgb_trend = context.trend(MetricLabel.HEMOGLOBIN)
        hr_trend = context.trend(MetricLabel.HEART_RATE)
        if hgb_trend is None or hr_trend is None:
            return None
        if hgb_trend.trend is not TrendDirection.FALLING:
            return None

        hgb_drop = hgb_trend.first - hgb_trend.latest
        if hgb_drop > 1.5 and hr_trend.latest > 100:
            return self._create_alert(
                context,
                [
                    f"Decreasing hemoglobin ({format_decimal(hgb_trend.first)} → "
                    f"{format_decimal(hgb_trend.latest)})",
                    f"Tachycardia ({format_reading(hr_trend.latest)} bpm)",
                ],
            )
        return None


class PersistentFeverRule(AlertRule):
    """Fever still present beyond POD 2."""

    rule_id = RuleId.PERSISTENT_FEVER

    def evaluate(self, context: RuleContext) -> Alert | None:
        if context.patient.post_op_day <= 2:
            return None

        temp_trend = context.trend(MetricLabel.TEMPERATURE)
        if temp_trend is None or temp_trend.latest < 38.0:
            return None

        # Skip when an earlier alert already reported the fever.
        if any("fever" in reason for alert in context.alerts for reason in alert.triggered_by):
            return None

        return self._create_alert(
            context, [f"Persistent fever ({format_decimal(temp_trend.latest)}°C)"]
        )


class AcuteKidneyInjuryRule(AlertRule):
    """Rising creatinine with falling urine output."""

    rule_id = RuleId.ACUTE_KIDNEY_INJURY

    def evaluate(self, context: RuleContext) -> Alert | None:
        creat_trend = context.trend(MetricLabel.CREATININE)
        uo_trend = context.trend(MetricLabel.URINE_OUTPUT)
        if creat_trend is None or uo_trend is None:
            return None
        if creat_trend.trend is not TrendDirection.RISING:
            return None
        if uo_trend.trend is not TrendDirection.FALLING:
            return None

        if creat_trend.latest > 1.2 and uo_trend.latest < 30:
            return self._create_alert(
                context,
                [
                    f"Rising creatinine ({format_decimal(creat_trend.first)} → "
                    f"{format_decimal(creat_trend.latest)})",
                    f"Reduced urine output ({format_reading(uo_trend.latest)} ml/hr)",
                ],
            )
        return None


class MultiSystemSepsisRule(AlertRule):
    """Three or more severe abnormalities on the latest vitals and labs."""

    rule_id = RuleId.MULTI_SYSTEM_SEPSIS
    min_findings = 3

    def severe_findings(self, vitals: VitalSigns, labs: LabValues) -> list[str]:
        findings: list[str] = []
        if vitals.heart_rate > 110:
            findings.append(f"Severe tachycardia ({format_reading(vitals.heart_rate)} bpm)")
        if vitals.temperature >= 38.5:
            findings.append(f"High fever ({format_decimal(vitals.temperature)}°C)")
        if labs.wbc > 15:
            findings.append(f"Significantly elevated WBC ({format_decimal(labs.wbc)})")
        if labs.lactate is not None and labs.lactate > 2.5:
            findings.append(f"Elevated lactate ({format_decimal(labs.lactate)})")
        return findings

    def evaluate(self, context: RuleContext) -> Alert | None:
        findings = self.severe_findings(context.latest_vitals, context.latest_labs)
        if len(findings) >= self.min_findings:
            return self._create_alert(context, findings)
        return None


class AlertRuleEngine:
    """Runs every alert rule, in order, against one patient at a time."""

    def __init__(self, stable_change_percent: float = DEFAULT_STABLE_CHANGE_PERCENT) -> None:
        self.stable_change_percent = stable_change_percent
        self.rules: list[AlertRule] = [
            EarlyInfectionRule(),
            BleedingRule(),
            PersistentFeverRule(),
            AcuteKidneyInjuryRule(),
            MultiSystemSepsisRule(),
        ]

    def evaluate(self, patient: Patient, trends: Sequence[TrendData] | None = None) -> list[Alert]:
        """Alerts for the patient; empty when vitals or labs are missing."""
        log = logger.bind(patient_id=patient.id)

        latest = latest_observations(patient)
        if latest.is_err():
            log.debug("alerts_skipped_insufficient_data", reason=str(latest.unwrap_err()))
            return []
        latest_vitals, latest_labs = latest.unwrap()

        if trends is None:
            trends = calculate_trends(patient, stable_change_percent=self.stable_change_percent)

        context = RuleContext(
            patient=patient,
            trends=trends,
            latest_vitals=latest_vitals,
            latest_labs=latest_labs,
        )
        for rule in self.rules:
            alert = rule.evaluate(context)
            if alert is not None:
                log.debug("alert_rule_fired", rule=rule.rule_id.name, severity=alert.severity.value)
                context.alerts.append(alert)

        log.debug("alerts_generated", count=len(context.alerts))
        return context.alerts


def generate_alerts(
    patient: Patient, *, stable_change_percent: float = DEFAULT_STABLE_CHANGE_PERCENT
) -> list[Alert]:
    """Evaluate all alert rules for a patient."""
    return AlertRuleEngine(stable_change_percent).evaluate(patient)
