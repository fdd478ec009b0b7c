"""
City generation pipeline module.

Provides settings, the staged CityGenerator and its result types.
"""

from .settings import (
    CitySettings,
    PipelineError,
    load_settings,
    save_settings,
)

from .city_pipeline import (
    CityGenerator,
    CityResult,
    PipelineProgress,
    PipelineStage,
    generate_city,
)

__all__ = [
    # Settings
    'CitySettings',
    'PipelineError',
    'load_settings',
    'save_settings',
    # Pipeline core
    'CityGenerator',
    'CityResult',
    'PipelineProgress',
    'PipelineStage',
    'generate_city',
]
