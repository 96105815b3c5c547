"""Core Layer — pure domain rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Rule checks return a Rejection (or None); they never raise

Design Decisions:
    - Functional core separated from imperative shell: services/ reads rows,
      asks core/ whether the action is allowed, then writes
"""
