"""
Proctoring Logger - One-line audit records for session lifecycle
and violations

Every record starts with "[PROCTOR] session=<id> event=<name>" so the
audit trail for one exam can be grepped out of the service log.
"""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Violation severities that are logged as warnings
_LOUD_SEVERITIES = {"high"}


def log_proctor_event(
    session_id: str,
    event_type: str,
    details: Optional[Dict[str, Any]] = None,
    level: int = logging.INFO
):
    """
    Emit a proctoring audit record.

    Args:
        session_id: Proctoring session ID
        event_type: session_start, violation, suspension, session_end
        details: Extra key=value pairs appended in insertion order
        level: logging level for the record
    """
    message = f"[PROCTOR] session={session_id} event={event_type}"

    if details:
        message += " " + " ".join(f"{k}={v}" for k, v in details.items())

    logger.log(level, message)


def log_session_start(session_id: str, assessment_id: str, student_id: str):
    log_proctor_event(
        session_id,
        "session_start",
        {"assessment_id": assessment_id, "student_id": student_id}
    )


def log_session_end(session_id: str, violations: int, warnings: int, frames: int):
    log_proctor_event(
        session_id,
        "session_end",
        {
            "violations": violations,
            "multi_person_warnings": warnings,
            "frames_processed": frames
        }
    )


def log_violation(session_id: str, violation_type: str, severity: str, description: str):
    """Record an emitted violation; high severity is logged as a warning"""
    log_proctor_event(
        session_id,
        "violation",
        {"type": violation_type, "severity": severity, "description": repr(description)},
        level=logging.WARNING if severity in _LOUD_SEVERITIES else logging.INFO
    )


def log_suspension(session_id: str, warnings: int):
    log_proctor_event(
        session_id,
        "suspension",
        {"multi_person_warnings": warnings},
        level=logging.WARNING
    )
