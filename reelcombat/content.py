"""
Packaged content - default enemy templates and moves.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from engine.resources.database import Database
from reelcombat.battle.moves import MoveRegistry

DATA_PATH = Path(__file__).parent / "data"


def load_content(path: Optional[Path | str] = None) -> tuple[Database, MoveRegistry]:
    """
    Load and validate a content directory.

    Args:
        path: Content root (schemas/ + database/). None uses the packaged data.

    Returns:
        (Database, MoveRegistry built from its moves)
    """
    database = Database(path or DATA_PATH)
    database.load_all()
    return database, MoveRegistry.from_database(database)
