"""Post-operative patient monitoring engine.

This package turns a patient's ordered vitals and labs into trend
classifications, explainable alerts and a traffic-light status. It holds no
state and performs no I/O; callers fetch and store patients themselves.
"""

from .services.alert_rules import generate_alerts
from .services.alert_status import calculate_alert_status
from .services.trends import calculate_trends, determine_trend

__all__ = [
    "calculate_alert_status",
    "calculate_trends",
    "determine_trend",
    "generate_alerts",
]
