"""Local SQLite (aiosqlite) implementations."""
