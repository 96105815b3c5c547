"""Services Layer — one class per concept plus the cross-concept synchronizations.

Invariants:
    - A concept service touches only its own tables
    - Only synchronize.py calls more than one concept
    - Services flush; routes and synchronizations commit

Design Decisions:
    - One file per concept for locality (ADR: no god objects)
"""
