"""Unified path constants for ticket-deployer.

All local state lives under the .ticket-deployer directory:
- .ticket-deployer/session/   # staged artifact record (survives restarts)
- .ticket-deployer/exports/   # code exported with `ticket-deployer export`
"""

from pathlib import Path

BASE_DIR = Path(".ticket-deployer")

SESSION_DIR = BASE_DIR / "session"
EXPORTS_DIR = BASE_DIR / "exports"
SESSION_FILE = SESSION_DIR / "storage.json"


def get_exports_dir() -> Path:
    EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
    return EXPORTS_DIR
