"""Bundled JSON fixtures used to seed empty collections."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ellaia.shared.errors import FixtureError

logger = logging.getLogger(__name__)

DEFAULT_FIXTURES_DIR = Path(__file__).resolve().parents[1] / "assets" / "mock-data"


class FixtureLoader:
    """Reads ``<directory>/<name>.json`` fixture arrays."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or DEFAULT_FIXTURES_DIR

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, name: str) -> Path:
        return self._directory / f"{name}.json"

    def load(self, name: str) -> list[dict[str, Any]]:
        """Return the fixture records for collection *name*.

        Raises FixtureError if the file is missing, unreadable, not JSON,
        or does not hold a JSON array of objects.
        """
        path = self.path_for(name)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FixtureError(f"No fixture for {name} at {path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise FixtureError(f"Could not read fixture {path}: {exc}") from exc

        if not isinstance(raw, list) or not all(isinstance(r, dict) for r in raw):
            raise FixtureError(f"Fixture {path} must be a JSON array of objects")
        logger.debug("Loaded %d %s from %s", len(raw), name, path)
        return raw
