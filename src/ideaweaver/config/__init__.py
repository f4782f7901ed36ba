"""IdeaWeaver configuration modules."""

from .engine_config import (
    EngineConfig,
    SeedingConfig,
    CollisionConfig,
    ViewportConfig,
    InteractionConfig,
    NodeSize,
    config_from_dict,
    load_engine_config,
)

__all__ = [
    'EngineConfig',
    'SeedingConfig',
    'CollisionConfig',
    'ViewportConfig',
    'InteractionConfig',
    'NodeSize',
    'config_from_dict',
    'load_engine_config',
]
