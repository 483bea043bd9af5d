"""
Utility modules for GH Score.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Enums and thresholds
"""

from ghscore.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
)
from ghscore.utils.constants import (
    ApplicationState,
    AuditAction,
    AuditType,
    CandidateStage,
    NotificationType,
    UserRole,
    VacancyPriority,
    VacancyState,
)
from ghscore.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    # Constants
    "ApplicationState",
    "AuditAction",
    "AuditType",
    "CandidateStage",
    "NotificationType",
    "UserRole",
    "VacancyPriority",
    "VacancyState",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
    "log",
]
