"""Application and infrastructure layers.

- application: PlanningSession (interaction modes, overlay state) and
  PlannerSettings
- infrastructure: project export/import and file helpers
"""
