"""Coverage Bounded Context.

Responsible for RF propagation geometry along a link:
- Value Objects: FresnelSample, FresnelAnalysis
- Services: wavelength_m, fresnel_radius, max_fresnel_radius,
  fresnel_profile, analyze
"""
