"""Statistic cache table - key/value storage for computed values."""

STAT_CACHE_DDL = """
CREATE TABLE IF NOT EXISTS stat_cache (
    key VARCHAR PRIMARY KEY,
    data JSON NOT NULL,
    written_at TIMESTAMP NOT NULL
)
"""
