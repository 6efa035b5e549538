"""RF Link Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geodesy: Points, great-circle distance, bearing, interpolation
- coverage: Fresnel zone geometry along a link
- network: Towers, links, connection rules and the pending-link workflow
"""

# Imports alphabetized per project style (isort)
from domain import coverage, geodesy, network

__all__ = ["coverage", "geodesy", "network"]
