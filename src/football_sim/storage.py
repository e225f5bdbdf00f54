from __future__ import annotations

import copy
import json
import logging
import shutil
from pathlib import Path
from typing import Any, Protocol

from .codec import league_from_dict, league_to_dict
from .models import League

logger = logging.getLogger(__name__)

SAVE_VERSION = 1


class LeagueStore(Protocol):
    def load(self) -> list[League]: ...

    def save(self, leagues: list[League], active_league_id: str | None) -> None: ...

    def load_active_id(self) -> str | None: ...

    def save_active_id(self, league_id: str | None) -> None: ...


class MemoryLeagueStore:
    def __init__(self, leagues: list[League] | None = None, active_id: str | None = None) -> None:
        self._leagues = copy.deepcopy(leagues or [])
        self._active_id = active_id
        self.last_load_error: str = ""

    def load(self) -> list[League]:
        return copy.deepcopy(self._leagues)

    def save(self, leagues: list[League], active_league_id: str | None) -> None:
        self._leagues = copy.deepcopy(leagues)
        self._active_id = active_league_id

    def load_active_id(self) -> str | None:
        return self._active_id

    def save_active_id(self, league_id: str | None) -> None:
        self._active_id = league_id


class JsonLeagueStore:
    """League collection kept in one versioned JSON file with a ``.bak`` copy."""

    SAVE_VERSION = SAVE_VERSION

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.last_load_error: str = ""

    def _read_payload(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            self.last_load_error = f"Failed to load leagues ({exc}); starting with no leagues."
            logger.warning(self.last_load_error)
            return {}
        if isinstance(raw, list):
            return {"leagues": raw}
        if not isinstance(raw, dict):
            self.last_load_error = "League file has invalid format; starting with no leagues."
            logger.warning(self.last_load_error)
            return {}
        try:
            version = int(raw.get("save_version", 1) or 1)
        except (TypeError, ValueError):
            version = 1
        if version > self.SAVE_VERSION:
            self.last_load_error = (
                f"Unsupported league save version {version}; app supports up to {self.SAVE_VERSION}."
            )
            logger.warning(self.last_load_error)
            return {}
        return raw

    def load(self) -> list[League]:
        payload = self._read_payload()
        raw_leagues = payload.get("leagues", [])
        if not isinstance(raw_leagues, list):
            self.last_load_error = "League payload is invalid; starting with no leagues."
            return []
        return [league_from_dict(row) for row in raw_leagues if isinstance(row, dict)]

    def load_active_id(self) -> str | None:
        active = self._read_payload().get("active_league_id")
        return active if isinstance(active, str) and active else None

    def save(self, leagues: list[League], active_league_id: str | None) -> None:
        # Leagues and active id go out in one write; .bak holds the previous save.
        self._write(leagues=[league_to_dict(lg) for lg in leagues], active_league_id=active_league_id)

    def save_active_id(self, league_id: str | None) -> None:
        self._write(active_league_id=league_id)

    def _write(self, **updates: Any) -> None:
        current = self._read_payload()
        payload = {
            "save_version": self.SAVE_VERSION,
            "leagues": current.get("leagues", []),
            "active_league_id": current.get("active_league_id"),
        }
        payload.update(updates)
        self._write_json_with_backup(payload)

    def _write_json_with_backup(self, payload: Any) -> None:
        if self.path.exists():
            backup = self.path.with_suffix(self.path.suffix + ".bak")
            try:
                shutil.copy2(self.path, backup)
            except OSError as exc:
                logger.warning("Could not refresh backup %s: %s", backup, exc)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Saved league file %s", self.path)
