"""
Static clinical content for each alert rule.

The wording here is reviewed separately from the triggering logic in
`postop_radar.services.alert_rules`; rules only supply the readings that
explain why they fired.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict

from postop_radar.domain.models import AlertStatus


class RuleId(IntEnum):
    """Alert rules in evaluation order. The value is part of the alert id."""

    EARLY_INFECTION = 1
    BLEEDING = 2
    PERSISTENT_FEVER = 3
    ACUTE_KIDNEY_INJURY = 4
    MULTI_SYSTEM_SEPSIS = 5


class AlertTemplate(BaseModel):
    """Fixed text and severity attached to every alert a rule raises."""

    model_config = ConfigDict(frozen=True)

    severity: AlertStatus
    title: str
    description: str
    considerations: tuple[str, ...]
    cognitive_prompts: tuple[str, ...]


MONITOR_CLOSELY = "Monitor Closely"
REASSESS_AND_ESCALATE = "Consider Reassessment and Escalation"

ALERT_TEMPLATES: dict[RuleId, AlertTemplate] = {
    RuleId.EARLY_INFECTION: AlertTemplate(
        severity=AlertStatus.YELLOW,
        title=MONITOR_CLOSELY,
        description="Pattern concerning for possible clinical deterioration",
        considerations=(
            "Surgical site infection",
            "Intra-abdominal abscess",
            "Pneumonia",
            "Urinary tract infection",
        ),
        cognitive_prompts=(
            "Re-examine the patient",
            "Review recent labs and imaging",
            "Consider discussing with senior resident",
        ),
    ),
    RuleId.BLEEDING: AlertTemplate(
        severity=AlertStatus.RED,
        title=REASSESS_AND_ESCALATE,
        description="Pattern concerning for possible bleeding",
        considerations=(
            "Post-operative bleeding",
            "Intra-abdominal hemorrhage",
            "Anastomotic bleeding",
        ),
        cognitive_prompts=(
            "URGENT: Re-examine patient immediately",
            "Check for signs of bleeding",
            "Discuss with attending surgeon",
            "Consider need for imaging or return to OR",
        ),
    ),
    RuleId.PERSISTENT_FEVER: AlertTemplate(
        severity=AlertStatus.YELLOW,
        title=MONITOR_CLOSELY,
        description="Persistent fever beyond POD 2",
        considerations=(
            "Surgical site infection",
            "Pneumonia",
            "Urinary tract infection",
            "Deep vein thrombosis",
        ),
        cognitive_prompts=(
            "Re-examine the patient",
            "Review wound site",
            "Consider chest X-ray",
            "Consider urinalysis",
        ),
    ),
    RuleId.ACUTE_KIDNEY_INJURY: AlertTemplate(
        severity=AlertStatus.RED,
        title=REASSESS_AND_ESCALATE,
        description="Pattern concerning for acute kidney injury",
        considerations=(
            "Acute kidney injury",
            "Hypovolemia",
            "Sepsis",
            "Medication-related",
        ),
        cognitive_prompts=(
            "Re-examine patient for volume status",
            "Review fluid balance",
            "Discuss with senior resident",
            "Consider nephrology consultation",
        ),
    ),
    RuleId.MULTI_SYSTEM_SEPSIS: AlertTemplate(
        severity=AlertStatus.RED,
        title=REASSESS_AND_ESCALATE,
        description="Multiple concerning trends detected",
        considerations=(
            "Sepsis",
            "Severe infection",
            "Anastomotic leak",
            "Intra-abdominal abscess",
        ),
        cognitive_prompts=(
            "URGENT: Re-examine patient immediately",
            "Consider ICU consultation",
            "Discuss with attending surgeon NOW",
            "Initiate sepsis protocol if indicated",
        ),
    ),
}
