"""
Data loading module for the weekly digest

Reads the catalog snapshot: a list of model descriptors and a mapping from
owner/name to that model's daily run counts.

Expected layout:
    models.json: [{"owner": ..., "name": ..., "url": ..., "description": ..., "run_count": ...}, ...]
    stats.json:  {"owner/name": [{"date": "2026-10-01", "dailyRuns": 123}, ...], ...}
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from weekly_digest.core import get_logger
from weekly_digest.domain import DailyStatEntry, ModelDescriptor

logger = get_logger(__name__)


class CatalogError(Exception):
    """Raised when a catalog file is missing or unreadable."""


@dataclass
class Catalog:
    """One run's snapshot of models and their daily stats."""

    models: list[ModelDescriptor] = field(default_factory=list)
    stats: dict[str, list[DailyStatEntry]] = field(default_factory=dict)

    def stats_for(self, key: str) -> list[DailyStatEntry]:
        """Daily stats for a model key; empty when the model has none."""
        return self.stats.get(key, [])


def descriptor_from_dict(raw: dict[str, Any]) -> ModelDescriptor:
    return ModelDescriptor(
        owner=raw["owner"],
        name=raw["name"],
        url=raw.get("url") or "",
        description=raw.get("description"),
        run_count=raw.get("run_count") or 0,
    )


def stats_from_list(raw: list[dict[str, Any]]) -> list[DailyStatEntry]:
    # A missing or null dailyRuns counts as zero
    return [DailyStatEntry(date=entry["date"], daily_runs=entry.get("dailyRuns") or 0) for entry in raw]


class CatalogLoader:
    """Loads the model catalog snapshot from JSON files"""

    def __init__(self, models_file: str | Path = "data/models.json", stats_file: str | Path = "data/stats.json"):
        """
        Initialize data loader

        Args:
            models_file: Path to the model descriptor list
            stats_file: Path to the per-model daily stats mapping
        """
        self.models_file = models_file
        self.stats_file = stats_file

    def _load_json(self, file_path: str | Path, expected_type: type) -> Any:
        """Load a JSON file and check its top-level type

        Raises:
            CatalogError: If the file is missing, empty, not JSON, or has the wrong shape
        """
        if not os.path.exists(file_path):
            raise CatalogError(f"Catalog file not found: {file_path}")

        file_size = os.path.getsize(file_path)
        if file_size == 0:
            raise CatalogError(f"Catalog file is empty: {file_path}")

        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{file_path}: JSON decode error - {e}") from e
        except UnicodeDecodeError as e:
            raise CatalogError(f"{file_path}: Unicode decode error - {e}") from e

        if not isinstance(data, expected_type):
            raise CatalogError(
                f"{file_path}: Invalid data structure (expected {expected_type.__name__}, got {type(data).__name__})"
            )

        logger.info(f"Loaded {file_path} ({file_size:,} bytes)")
        return data

    def load_models(self) -> list[ModelDescriptor]:
        raw_models = self._load_json(self.models_file, list)
        return [descriptor_from_dict(raw) for raw in raw_models]

    def load_stats(self) -> dict[str, list[DailyStatEntry]]:
        raw_stats = self._load_json(self.stats_file, dict)
        return {key: stats_from_list(entries) for key, entries in raw_stats.items()}

    def load_catalog(self) -> Catalog:
        """
        Load models and stats together

        Returns:
            Catalog with descriptors in file order and stats keyed by owner/name
        """
        catalog = Catalog(models=self.load_models(), stats=self.load_stats())
        logger.info(f"Catalog loaded: {len(catalog.models):,} models, {len(catalog.stats):,} with stats")
        return catalog
