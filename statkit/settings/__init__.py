"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("STATKIT_DB_PATH", "stats.duckdb")

# Logging
LOG_DIR = Path(os.getenv("STATKIT_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("STATKIT_LOG_LEVEL", "INFO")

# Retry (transient backend conflicts)
RETRY_MAX_ATTEMPTS = int(os.getenv("STATKIT_RETRY_MAX_ATTEMPTS", "3"))
RETRY_BASE_INTERVAL = float(os.getenv("STATKIT_RETRY_BASE_INTERVAL", "0.1"))
RETRY_MAX_INTERVAL = float(os.getenv("STATKIT_RETRY_MAX_INTERVAL", "2.0"))

# Cache: "memory" or "duckdb"
CACHE_BACKEND = os.getenv("STATKIT_CACHE_BACKEND", "memory")
