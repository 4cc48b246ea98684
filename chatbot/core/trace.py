"""Daily JSON trace files.

Every completed exchange is appended to ``traces-YYYY-MM-DD.json`` under the
logs directory. Each file holds a single JSON array that is rewritten in full
on every write.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from chatbot.errors import PersistenceError


logger = logging.getLogger("recipebot.trace")


class TraceRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str
    session_id: str = Field(..., alias="sessionId")
    user_input: str = Field(..., alias="userInput")
    ai_response: str = Field(..., alias="aiResponse")
    processing_time: int = Field(..., alias="processingTime", description="milliseconds")
    model: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class TraceLogger:
    def __init__(self, logs_dir: Union[str, Path]) -> None:
        self.logs_dir = Path(logs_dir)
        self._locks: Dict[Path, asyncio.Lock] = {}

    def ensure_directory(self) -> None:
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Failed to create logs directory %s: %s", self.logs_dir, exc)

    def path_for(self, day: Optional[date] = None) -> Path:
        day = day or datetime.now(timezone.utc).date()
        return self.logs_dir / f"traces-{day.isoformat()}.json"

    def _lock_for(self, path: Path) -> asyncio.Lock:
        lock = self._locks.get(path)
        if lock is None:
            lock = self._locks[path] = asyncio.Lock()
        return lock

    def _load(self, path: Path) -> List[Dict[str, Any]]:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise PersistenceError(f"Could not read {path}: {exc}") from exc
        except UnicodeDecodeError:
            logger.warning("Trace file %s is not valid UTF-8, starting a new list", path)
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Trace file %s is malformed, starting a new list", path)
            return []
        if not isinstance(data, list):
            logger.warning("Trace file %s does not hold a JSON array, starting a new list", path)
            return []
        return data

    def _append(self, path: Path, entry: Dict[str, Any]) -> None:
        records = self._load(path)
        records.append(entry)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not write {path}: {exc}") from exc

    async def record(self, entry: TraceRecord) -> bool:
        """Append ``entry`` to today's file. Returns False if the write failed."""
        path = self.path_for()
        try:
            async with self._lock_for(path):
                await asyncio.to_thread(self._append, path, entry.to_dict())
        except PersistenceError as exc:
            logger.error("Failed to log trace: %s", exc)
            return False
        except Exception:
            # Tracing never fails the chat response.
            logger.exception("Failed to log trace: unexpected error writing %s", path)
            return False
        logger.info("Trace logged successfully")
        return True

    async def read(self, day: Optional[date] = None) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._load, self.path_for(day))
