"""Core Layer — domain entities, rules and error hierarchy. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Rule functions are pure: they inspect facts gathered by the shell and raise typed errors

Design Decisions:
    - Functional core separated from imperative shell: services gather facts through
      repository protocols, core decides
"""
