"""Settings and profile key-value store - JSON file storage."""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from baby_tracker.errors import StorageUnavailable
from baby_tracker.models import Profile

logger = logging.getLogger(__name__)

PROFILE_KEY = "name"


class BaseSettingsStore(ABC):
    """Key-value sub-store for the profile and app settings."""

    def __init__(self, default_name: str = "Baby") -> None:
        self._default_name = default_name

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """Value for key, or default when unset."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Overwrite the value for key. Value must be JSON-serializable."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key. Returns False if it was not set."""
        ...

    async def get_profile(self) -> Profile:
        name = await self.get(PROFILE_KEY)
        if not isinstance(name, str) or not name.strip():
            return Profile(name=self._default_name)
        return Profile(name=name)

    async def save_profile(self, profile: Profile) -> None:
        await self.set(PROFILE_KEY, profile.name)
        logger.info("Profile saved")

    async def close(self) -> None:
        """Release backend resources. Nothing to do for file storage."""
        return None


class SettingsStore(BaseSettingsStore):
    """File-based settings store. One JSON object per device."""

    def __init__(self, data_dir: Path, default_name: str = "Baby") -> None:
        super().__init__(default_name)
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._data_dir / "settings.json"

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open() as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Could not parse settings %s, starting empty: %s", self._path, e)
            return {}
        except OSError as e:
            logger.error("Could not read settings %s: %s", self._path, e)
            raise StorageUnavailable(f"Cannot read {self._path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        tmp_path = self._path.with_suffix(".json.tmp")
        try:
            with tmp_path.open("w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error("Could not save settings %s: %s", self._path, e)
            raise StorageUnavailable(f"Cannot write {self._path}: {e}") from e

    async def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    async def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    async def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        return True
