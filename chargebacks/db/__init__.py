"""Database Infrastructure — SQLAlchemy Base for the embedded SQLite file.

Invariants:
    - One engine per open StorageEngine; no module-level engine

Design Decisions:
    - SQLite over a server database: single local file, in-process, no network hop
"""
