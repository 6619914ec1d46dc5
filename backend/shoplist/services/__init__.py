"""Services Layer — stateful orchestration over core rules and repository Protocols.

Invariants:
    - Services receive repositories, mailer and clock through __init__ (no globals)
    - Business rules are delegated to core/enforce_*.py; services gather the facts

Design Decisions:
    - One service class per component: magic link, tokens, invitations, lists, items,
      sign-in, setup
"""
