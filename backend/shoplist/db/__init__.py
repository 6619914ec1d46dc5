"""Database Infrastructure — SQLAlchemy declarative Base shared by all ORM models.

Invariants:
    - Single async engine per process (initialized via infrastructure.database.init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite by default, asyncpg when DATABASE_URL points at PostgreSQL
"""
