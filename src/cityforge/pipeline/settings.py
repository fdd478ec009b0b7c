"""
City generation settings and their JSON persistence.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# Accepted JSON value types per field annotation
_JSON_TYPES = {
    'int': (int,),
    'float': (int, float),
    'bool': (bool,),
}


class PipelineError(Exception):
    pass


@dataclass
class CitySettings:
    # Randomness
    seed: int = 1234

    # Area and subdivision
    city_size_x: float = 100.0
    city_size_z: float = 100.0
    min_block_size: float = 20.0
    max_depth: int = 5
    split_jitter: float = 0.1   # 0 .. 0.4
    node_jitter: float = 1.0    # 0 .. 5

    # Roads
    road_width: float = 2.0

    # Lots
    subdivision_depth: int = 2
    min_lot_area: float = 100.0
    lot_split_jitter: float = 0.2   # 0 .. 0.45

    # Buildings
    min_building_height: float = 9.0
    max_building_height: float = 30.0
    floor_height: float = 0.0   # > 0 snaps heights to whole storeys

    # Run invariant checks after generation
    validate: bool = True

    def validation_errors(self) -> List[str]:
        errors = []
        if self.city_size_x <= 0 or self.city_size_z <= 0:
            errors.append("City size must be positive")
        if self.min_block_size <= 0:
            errors.append("Minimum block size must be positive")
        if self.max_depth < 0:
            errors.append("Max depth cannot be negative")
        if not 0.0 <= self.split_jitter <= 0.4:
            errors.append("Split jitter must be between 0 and 0.4")
        if not 0.0 <= self.node_jitter <= 5.0:
            errors.append("Node jitter must be between 0 and 5")
        if self.road_width < 0:
            errors.append("Road width cannot be negative")
        if self.subdivision_depth < 0:
            errors.append("Subdivision depth cannot be negative")
        if self.min_lot_area < 0:
            errors.append("Minimum lot area cannot be negative")
        if not 0.0 <= self.lot_split_jitter <= 0.45:
            errors.append("Lot split jitter must be between 0 and 0.45")
        if self.min_building_height < 0:
            errors.append("Minimum building height cannot be negative")
        if self.max_building_height < self.min_building_height:
            errors.append("Maximum building height must be >= minimum building height")
        if self.floor_height < 0:
            errors.append("Floor height cannot be negative")
        return errors

    def check(self):
        """Raise PipelineError listing every invalid field."""
        errors = self.validation_errors()
        if errors:
            raise PipelineError(f"Invalid settings: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CitySettings':
        """Build settings from a dictionary, ignoring unknown keys.

        Raises:
            PipelineError: If a known key holds a value of the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        errors = []
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown setting '%s'", key)
                continue
            type_name = known[key].type
            # bool is an int subclass, so it only counts for bool fields
            if isinstance(value, bool) != (type_name == 'bool') or \
                    not isinstance(value, _JSON_TYPES[type_name]):
                errors.append(f"{key} must be {type_name}, got {type(value).__name__}")
                continue
            kwargs[key] = float(value) if type_name == 'float' else value
        if errors:
            raise PipelineError(f"Invalid settings: {'; '.join(errors)}")
        return cls(**kwargs)


def save_settings(settings: CitySettings, path) -> Path:
    """
    Save settings as JSON.

    Raises:
        IOError: If the file cannot be written
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
    return file_path


def load_settings(path) -> CitySettings:
    """
    Load settings from a JSON file.

    Raises:
        PipelineError: If the file is missing or not a JSON object
    """
    file_path = Path(path)
    if not file_path.exists():
        raise PipelineError(f"Settings file not found: {file_path}")
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise PipelineError(f"Invalid settings file {file_path}: {e}") from e
    if not isinstance(data, dict):
        raise PipelineError(f"Settings file {file_path} must contain a JSON object")
    return CitySettings.from_dict(data)
