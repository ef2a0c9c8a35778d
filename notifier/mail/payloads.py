"""Template context builders.

Each function turns a validated payload into the flat dictionary its Jinja2
templates expect. Values are passed raw; escaping happens in the templates.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Union

from .models import AlertLevel, EvacuationStatus
from .schemas import ContactFormSubmission, EmergencyAlertPayload, EvacuationCenterUpdate

SEVERITY_COLORS = {
    AlertLevel.LOW: "#28a745",
    AlertLevel.MEDIUM: "#ffc107",
    AlertLevel.HIGH: "#fd7e14",
    AlertLevel.CRITICAL: "#dc3545",
}

# Only reachable if an unvalidated level slips through
NEUTRAL_COLOR = "#007bff"

PRIORITY_LABELS = {
    AlertLevel.LOW: "Advisory Notice",
    AlertLevel.MEDIUM: "Important Notice",
    AlertLevel.HIGH: "Urgent Alert",
    AlertLevel.CRITICAL: "🚨 EMERGENCY ALERT",
}

STATUS_MESSAGES = {
    EvacuationStatus.OPEN: "The evacuation center is now open and accepting evacuees.",
    EvacuationStatus.FULL: (
        "The evacuation center has reached capacity and is no longer accepting new evacuees."
    ),
    EvacuationStatus.CLOSED: "The evacuation center is now closed.",
    EvacuationStatus.MAINTENANCE: (
        "The evacuation center is temporarily closed for maintenance."
    ),
}


def _as_level(level: Union[AlertLevel, str]) -> Optional[AlertLevel]:
    try:
        return AlertLevel(level)
    except ValueError:
        return None


def severity_color(level: Union[AlertLevel, str]) -> str:
    """Banner color for an alert level, neutral blue for anything unknown."""
    return SEVERITY_COLORS.get(_as_level(level), NEUTRAL_COLOR)


def build_contact_form_context(submission: ContactFormSubmission) -> Dict:
    """Context for the contact_form templates."""
    return {
        "name": submission.name,
        "email": submission.email,
        "subject": submission.subject,
        "message": submission.message,
        "inquiry_type": submission.inquiry_type,
    }


def build_emergency_alert_context(alert: EmergencyAlertPayload) -> Dict:
    """Context for the emergency_alert templates.

    Keys:
        title, content, location: alert text (location may be None)
        level: lower-case level value
        level_label: upper-case level for badges and the subject line
        color: banner color for the level
    """
    level = alert.alert_level.value if isinstance(alert.alert_level, AlertLevel) else str(alert.alert_level)
    return {
        "title": alert.title,
        "content": alert.content,
        "location": alert.location,
        "level": level,
        "level_label": level.upper(),
        "color": severity_color(level),
    }


def build_evacuation_update_context(update: EvacuationCenterUpdate) -> Dict:
    """Context for the evacuation_update templates.

    The capacity line is only present when a capacity is known.
    """
    capacity_line = None
    if update.capacity:
        capacity_line = f"{update.current_occupancy or 0}/{update.capacity}"

    return {
        "name": update.name,
        "address": update.address,
        "status_label": update.status.value.upper(),
        "status_message": STATUS_MESSAGES[update.status],
        "capacity_line": capacity_line,
    }


def build_priority_notice_context(message: str, level: Union[AlertLevel, str]) -> Dict:
    """Context for the priority_notice templates."""
    resolved = _as_level(level) or AlertLevel.MEDIUM
    return {
        "message": message,
        "label": PRIORITY_LABELS[resolved],
    }


def build_subscription_context(user_name: Optional[str] = None) -> Dict:
    """Context for the subscription_welcome templates."""
    return {"user_name": (user_name or "").strip() or None}


def build_test_message_context(environment: str, sent_at: Optional[datetime] = None) -> Dict:
    """Context for the transport_test templates."""
    sent_at = sent_at or datetime.now(timezone.utc)
    return {
        "environment": environment,
        "timestamp": sent_at.isoformat(),
    }
