"""Infrastructure Layer — database sessions, repositories, mail delivery and logging.

Invariants:
    - Infrastructure implements core/repository_protocols.py; it holds no business rules
    - All SMTP calls are bounded by a timeout and mapped to MailDeliveryError

Design Decisions:
    - Repositories split by concern (auth vs. lists) for locality
"""
