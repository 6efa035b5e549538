"""Network Bounded Context.

Responsible for the planned RF network and its consistency rules:
- Entities: Tower, Link
- Value Objects: PendingLink, ConnectionCheck, LinkSummary
- Services: TowerRegistry, LinkRegistry (pending-link state machine)
- Ports: PlanView (view collaborator), LinkIndex
"""
