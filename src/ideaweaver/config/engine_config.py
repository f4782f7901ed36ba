#!/usr/bin/env python3
# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
"""
Engine configuration - layout, collision, viewport and gesture constants.

Usage:
    from ideaweaver.config import load_engine_config

    config = load_engine_config()
    print(config.seeding.branch_radius)

    # Explicit override file on top of project/user config
    config = load_engine_config(path='my_mindmap.yaml')

Configuration is layered: dataclass defaults, then project defaults, then
user overrides, then an explicit path (or $IDEAWEAVER_CONFIG). Each YAML file
holds sections named after the dataclass fields, e.g.::

    seeding:
      branch_radius: 360
    viewport:
      zoom_max: 2.0
"""

import os
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'IDEAWEAVER_CONFIG'


@dataclass
class NodeSize:
    """Default half extents for one node kind."""
    half_width: float
    half_height: float


@dataclass
class SeedingConfig:
    """Initial placement of nodes lacking a position."""
    branch_radius: float = 320.0          # R1, branches attached to Root
    nested_radius: float = 120.0          # R2, branches under another node
    child_radius: float = 120.0           # leaves under an explicit idea parent
    child_min_slots: int = 4
    ring_capacity: int = 5
    ring_offset: float = 0.35             # radians added per ring
    ring_base: float = 140.0
    ring_spacing: float = 80.0
    leaf_start_angle: float = -1.5707963267948966


@dataclass
class CollisionConfig:
    """Overlap relaxation parameters."""
    padding: float = 6.0
    settle_passes: int = 10
    drag_passes: int = 12
    root_size: NodeSize = field(default_factory=lambda: NodeSize(160.0, 70.0))
    branch_size: NodeSize = field(default_factory=lambda: NodeSize(120.0, 56.0))
    leaf_size: NodeSize = field(default_factory=lambda: NodeSize(100.0, 44.0))
    measure_tolerance: float = 1.0        # ignore size changes below this


@dataclass
class ViewportConfig:
    """Camera bounds and wheel sensitivity."""
    zoom_min: float = 0.6
    zoom_max: float = 1.6
    zoom_initial: float = 1.0
    wheel_divisor: float = 1600.0
    wheel_floor: float = 0.01
    wheel_step_max: float = 0.045
    button_delta: float = 120.0           # raw delta used by zoom in/out buttons
    fit_padding: float = 50.0


@dataclass
class InteractionConfig:
    """Gesture and persistence behaviour."""
    capture_radius: float = 160.0         # proximity reassignment on drop
    palette_size: int = 6                 # branch colour slots
    status_ttl: float = 4.0               # seconds a status message stays current
    persist_workers: int = 1              # >1 lets batches land out of order


@dataclass
class EngineConfig:
    """All tunables of the mindmap engine."""
    seeding: SeedingConfig = field(default_factory=SeedingConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)

    def validate(self) -> 'EngineConfig':
        vp = self.viewport
        if vp.zoom_min <= 0 or vp.zoom_max <= 0:
            raise ValueError("zoom bounds must be positive")
        if vp.zoom_min > vp.zoom_max:
            raise ValueError(
                f"zoom_min ({vp.zoom_min}) exceeds zoom_max ({vp.zoom_max})")
        if self.seeding.ring_capacity < 1:
            raise ValueError("ring_capacity must be at least 1")
        vp.zoom_initial = min(vp.zoom_max, max(vp.zoom_min, vp.zoom_initial))
        return self


# Project defaults (fallback)
PROJECT_DEFAULTS = [
    'config/mindmap_defaults.yaml',
]

# User overrides (loaded on top of defaults)
USER_CONFIG_ORDER = [
    '.ideaweaver.yaml',            # Root, user private
    '.local/mindmap.yaml',         # .local directory
    'config/mindmap.yaml',         # User's config (gitignored)
]


def _find_project_root() -> Path:
    """Find project root by looking for markers."""
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / 'pyproject.toml').exists() and (parent / 'src').exists():
            return parent
        if (parent / '.git').exists():
            return parent
    return current


def _load_yaml_file(path: Path) -> Optional[Dict]:
    """Load a YAML file if it exists."""
    if not path.exists():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top level is not a mapping")
        return None
    return data


def _apply_overrides(target: Any, data: Dict[str, Any], where: str) -> None:
    """Recursively copy known keys from ``data`` into dataclass ``target``."""
    known = {f.name: f for f in fields(target)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Unknown config key '{where}{key}' ignored")
            continue
        current = getattr(target, key)
        if is_dataclass(current):
            if isinstance(value, dict):
                _apply_overrides(current, value, f"{where}{key}.")
            else:
                logger.warning(f"Config key '{where}{key}' expects a mapping")
            continue
        if isinstance(current, bool):
            setattr(target, key, bool(value))
        elif isinstance(current, int):
            setattr(target, key, int(value))
        elif isinstance(current, float):
            setattr(target, key, float(value))
        else:
            setattr(target, key, value)


def config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build a validated config from a plain mapping."""
    config = EngineConfig()
    _apply_overrides(config, data, '')
    return config.validate()


def load_engine_config(
    project_root: Optional[Path] = None,
    path: Optional[Union[str, Path]] = None
) -> EngineConfig:
    """
    Load engine configuration.

    Args:
        project_root: Directory holding config/ (default: auto-detected)
        path: Explicit YAML file applied last (default: $IDEAWEAVER_CONFIG)

    Returns:
        Validated EngineConfig.
    """
    root = Path(project_root) if project_root else _find_project_root()
    config = EngineConfig()

    sources: List[Path] = [root / p for p in PROJECT_DEFAULTS]
    sources += [root / p for p in USER_CONFIG_ORDER]

    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        explicit_path = Path(os.path.expandvars(os.path.expanduser(str(explicit))))
        if not explicit_path.exists():
            logger.warning(f"Config file {explicit_path} not found")
        sources.append(explicit_path)

    for source in sources:
        data = _load_yaml_file(source)
        if data:
            logger.debug(f"Applying config from {source}")
            _apply_overrides(config, data, '')

    return config.validate()
