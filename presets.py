"""
Named creature presets persisted through an injected key-value store.
"""
from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from models import TraitSelection

logger = logging.getLogger(__name__)

PRESETS_KEY = "dinosaur-presets"
MAX_PRESETS = 20
AGE_STAGES = ("juvenile", "adult")


class PresetStorageError(Exception):
    """Writing presets to the backing store failed."""


class PresetNotFoundError(LookupError):
    """No preset with the requested id."""


# ===== KEY-VALUE STORES =====

class KeyValueStore:
    """Minimal string key-value store interface."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store, handy for tests and short sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object on disk.

    The whole document is rewritten on every set/delete, which is fine for
    the handful of keys this application keeps.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.path = Path(filepath)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: expected a JSON object")
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> List[str]:
        return list(self._read().keys())


# ===== PRESET MODELS =====

@dataclass
class PresetSnapshot:
    """Everything needed to rebuild one creature configuration."""
    dinosaurs: List[str] = field(default_factory=list)  # species ids
    selected_colors: List[str] = field(default_factory=list)
    selected_pattern: str = ""
    color_effects: List[str] = field(default_factory=list)
    selected_texture: str = ""
    creature_size: int = 100
    age_stage: str = "adult"
    traits: TraitSelection = field(default_factory=TraitSelection)

    def __post_init__(self):
        """Validate age stage and coerce trait lists."""
        if self.age_stage not in AGE_STAGES:
            raise ValueError(f"age_stage must be one of {AGE_STAGES}, got {self.age_stage!r}")
        if not isinstance(self.traits, TraitSelection):
            self.traits = TraitSelection(tuple(self.traits))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dinosaurs': list(self.dinosaurs),
            'selectedColors': list(self.selected_colors),
            'selectedPattern': self.selected_pattern,
            'colorEffects': list(self.color_effects),
            'selectedTexture': self.selected_texture,
            'creatureSize': self.creature_size,
            'ageStage': self.age_stage,
            'traits': self.traits.to_list(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PresetSnapshot":
        return cls(
            dinosaurs=list(data.get('dinosaurs', [])),
            selected_colors=list(data.get('selectedColors', [])),
            selected_pattern=data.get('selectedPattern', ''),
            color_effects=list(data.get('colorEffects', [])),
            selected_texture=data.get('selectedTexture', ''),
            creature_size=int(data.get('creatureSize', 100)),
            age_stage=data.get('ageStage', 'adult'),
            traits=TraitSelection(tuple(data.get('traits', []))),
        )


@dataclass
class Preset:
    """A saved, named snapshot."""
    id: str
    name: str
    timestamp: int  # milliseconds since epoch
    snapshot: PresetSnapshot
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'timestamp': self.timestamp,
        }
        data.update(self.snapshot.to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        return cls(
            id=data['id'],
            name=data['name'],
            timestamp=int(data.get('timestamp', 0)),
            snapshot=PresetSnapshot.from_dict(data),
            description=data.get('description', ''),
        )


# ===== PRESET STORE =====

class PresetStore:
    """
    Bounded collection of presets, newest first.

    Saving beyond `max_presets` drops the oldest entries.
    """

    def __init__(self, store: KeyValueStore, key: str = PRESETS_KEY, max_presets: int = MAX_PRESETS):
        if max_presets < 1:
            raise ValueError(f"max_presets must be at least 1, got {max_presets}")
        self.store = store
        self.key = key
        self.max_presets = max_presets

    def _read(self) -> List[Preset]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError as e:
            logger.error(f"Discarding unreadable presets under '{self.key}': {e}")
            return []
        if not isinstance(items, list):
            logger.error(f"Discarding presets under '{self.key}': expected a JSON list")
            return []

        presets = []
        for item in items:
            try:
                presets.append(Preset.from_dict(item))
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error(f"Skipping unreadable preset under '{self.key}': {e}")
        return presets

    def _write(self, presets: List[Preset]) -> None:
        payload = json.dumps([p.to_dict() for p in presets])
        try:
            self.store.set(self.key, payload)
        except OSError as e:
            logger.error(f"Failed to save presets: {e}")
            raise PresetStorageError(f"Failed to save presets: {e}") from e

    def list(self) -> List[Preset]:
        """All presets, newest first."""
        return self._read()

    def save(self, name: str, snapshot: PresetSnapshot, description: str = "") -> Preset:
        """
        Save a snapshot under a new generated id.

        Args:
            name: Display name for the preset
            snapshot: Creature configuration to store
            description: Optional free text

        Returns:
            The stored Preset
        """
        if not name or not name.strip():
            raise ValueError("Preset name must not be empty")

        preset = Preset(
            id=str(uuid.uuid4()),
            name=name.strip(),
            timestamp=int(time.time() * 1000),
            snapshot=snapshot,
            description=description,
        )

        presets = [preset] + self._read()
        if len(presets) > self.max_presets:
            logger.info(f"Preset limit {self.max_presets} reached, dropping {len(presets) - self.max_presets} oldest")
            presets = presets[:self.max_presets]

        self._write(presets)
        return preset

    def load(self, preset_id: str) -> PresetSnapshot:
        """
        Get the snapshot stored under `preset_id`.

        Raises:
            PresetNotFoundError: If no preset has that id
        """
        for preset in self._read():
            if preset.id == preset_id:
                return preset.snapshot
        raise PresetNotFoundError(preset_id)

    def delete(self, preset_id: str) -> None:
        """Remove a preset; unknown ids are ignored."""
        presets = self._read()
        remaining = [p for p in presets if p.id != preset_id]
        if len(remaining) != len(presets):
            self._write(remaining)
