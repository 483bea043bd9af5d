"""
Public application intake and tracking.
"""

from .service import ApplicationService, get_application_service

__all__ = ["ApplicationService", "get_application_service"]
