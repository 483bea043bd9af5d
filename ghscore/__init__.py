"""
GH Score: vacancy and candidate pipeline service.

Tracks job requisitions and the candidates moving through them, computing
SLA adherence, cost exposure and candidate match scores.
"""

__app_name__ = "GH Score"
__version__ = "0.1.0"
