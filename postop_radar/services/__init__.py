"""
Core services for the engine.

This package contains the trend calculator, the alert rules, the status
reducer and the patient monitor that ties them together.
"""

from .alert_rules import AlertRule, AlertRuleEngine, generate_alerts, latest_observations
from .alert_status import calculate_alert_status, worst_severity
from .patient_monitor import PatientMonitor
from .reference_ranges import calculate_auto_status, get_effective_status
from .trends import MetricLabel, calculate_trends, determine_trend, find_trend

__all__ = [
    "AlertRule",
    "AlertRuleEngine",
    "MetricLabel",
    "PatientMonitor",
    "calculate_alert_status",
    "calculate_auto_status",
    "calculate_trends",
    "determine_trend",
    "find_trend",
    "generate_alerts",
    "get_effective_status",
    "latest_observations",
    "worst_severity",
]
