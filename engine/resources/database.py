"""
Content Database.

Loads and validates static combat content (enemy templates, enemy moves)
from JSON. The combat core never reads files itself; it is handed the
records this class produces.

Layout under data_path:
    schemas/<name>.schema.json
    database/<category>/*.json   (one record or a list of records per file)
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class ContentError(ValueError):
    """Raised when content is requested from a category that was never declared."""


# category folder -> schema file name
CATEGORIES: dict[str, str] = {
    "enemies": "enemy.schema.json",
    "moves": "move.schema.json",
}


class Database:
    """
    Central storage for static content.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}
        self._stores: dict[str, dict[str, dict[str, Any]]] = {
            category: {} for category in CATEGORIES
        }

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    @property
    def enemies(self) -> dict[str, dict[str, Any]]:
        return self._stores["enemies"]

    @property
    def moves(self) -> dict[str, dict[str, Any]]:
        return self._stores["moves"]

    def load_all(self) -> None:
        """Load every category from disk."""
        self._load_schemas()

        for category, schema_name in CATEGORIES.items():
            self._stores[category] = self._load_category(category, schema_name)

        self.logger.info(
            f"Loaded {len(self.enemies)} enemies, "
            f"{len(self.moves)} moves from {self._data_path}."
        )

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> dict[str, dict[str, Any]]:
        """Load all JSON files in a category folder, keeping only valid records."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, dict[str, Any]] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if schema is None:
            self.logger.warning(f"No schema found for {folder} ({schema_name}); skipping category")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            records = data if isinstance(data, list) else [data]
            for record in records:
                try:
                    jsonschema.validate(instance=record, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue
                data_store[record['id']] = record

        return data_store

    def get(self, category: str, record_id: str) -> dict[str, Any] | None:
        """Get one record from a category."""
        if category not in self._stores:
            raise ContentError(f"Unknown content category: {category}")
        return self._stores[category].get(record_id)

    def get_enemy(self, enemy_id: str) -> dict[str, Any] | None:
        return self.enemies.get(enemy_id)

    def get_move(self, move_id: str) -> dict[str, Any] | None:
        return self.moves.get(move_id)
