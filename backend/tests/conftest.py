"""Root conftest — shared test configuration."""

import os

# Settings are read at import time by shoplist.main; keep tests off real SMTP
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("MAIL_ENABLED", "false")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
