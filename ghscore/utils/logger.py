"""
Logging for GH Score.

Everything goes through Loguru. ``setup_logging()`` installs three sinks:

- console: colored, for operators running ``ghscore serve``
- service log: rotating file with every record at the configured level
- audit trail: a separate file that only receives records bound with an
  ``audit_type``; each line carries the tenant so a recruiting decision
  (a score, a stage move, a vacancy closing) can be traced per customer
"""

import sys
from typing import Any

from loguru import logger

from ghscore.utils.config import LoggingSettings, get_settings
from ghscore.utils.constants import AuditAction, AuditType

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)
AUDIT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[audit_type]: <10} | "
    "tenant={extra[tenant_id]} | {message}"
)

# Key fragments whose values never reach a log line
REDACTED_KEYS = frozenset({
    "password", "pwd", "secret", "token", "api_key", "auth", "credential",
    "email", "phone",
})
REDACTED = "***REDACTED***"


def _is_audit_record(record: dict) -> bool:
    return "audit_type" in record["extra"]


def _add_console_sink(log_settings: LoggingSettings, diagnose: bool) -> None:
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=log_settings.level,
        colorize=True,
        backtrace=True,
        diagnose=diagnose,
    )


def _add_file_sinks(log_settings: LoggingSettings, diagnose: bool) -> None:
    log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_settings.file_path,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=diagnose,
        enqueue=True,
    )

    log_settings.audit_file_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_settings.audit_file_path,
        format=AUDIT_FORMAT,
        level="INFO",
        filter=_is_audit_record,
        rotation="1 week",
        retention=log_settings.audit_retention,
        compression="zip",
        enqueue=True,
    )


def setup_logging() -> None:
    """Replace Loguru's default handler with the configured sinks."""
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()
    logger.configure(extra={"name": "ghscore", "tenant_id": "-"})

    # variable values in tracebacks only while developing locally
    diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        _add_console_sink(log_settings, diagnose)
    if log_settings.file_output:
        _add_file_sinks(log_settings, diagnose)

    logger.info(
        "Logging ready (level={}, console={}, files={})",
        log_settings.level,
        log_settings.console_output,
        log_settings.file_output,
    )


def get_logger(name: str) -> Any:
    return logger.bind(name=name)


def redact(data: Any) -> Any:
    """Mask credentials and applicant contact details, recursively."""
    if isinstance(data, dict):
        return {
            key: REDACTED
            if any(fragment in str(key).lower() for fragment in REDACTED_KEYS)
            else redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(item) for item in data]
    return data


def audit_log(
    action: AuditAction | str,
    details: dict[str, Any],
    audit_type: AuditType | str = AuditType.DECISION,
) -> None:
    """
    Write an entry to the audit trail.

    Args:
        action: What happened, usually an AuditAction
        details: Context for the entry; a ``tenant_id`` key is lifted into
            the line prefix, sensitive keys are redacted
        audit_type: DECISION for automated judgements (scores),
            TRANSITION for state changes, ACCESS for account administration
    """
    action = action.value if isinstance(action, AuditAction) else action
    logger.bind(
        audit_type=AuditType(audit_type).value,
        tenant_id=details.get("tenant_id", "-"),
    ).info("{} | {}", action, redact(details))


class LoggerMixin:
    """Gives a class a ``logger`` bound to its own name."""

    @property
    def logger(self) -> Any:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


log = logger
