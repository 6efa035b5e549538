"""Geodesy Bounded Context.

Responsible for positions on the Earth's surface:
- Value Objects: GeoPoint
- Services: distance_km (haversine), azimuth_deg, interpolate, midpoint
"""
