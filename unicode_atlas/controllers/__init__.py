"""
Controller package exports.

This file exists to make controller modules discoverable to static analysis
and to provide a stable import surface for the presentation layer.
"""

from .atlas_controller import AtlasController  # noqa: F401
from .font_coverage_sampler import FontCoverageSampler  # noqa: F401
from .view_state_sync import ViewStateSynchronizer  # noqa: F401
from .window_manager import WindowManager  # noqa: F401

__all__ = [
    "AtlasController",
    "FontCoverageSampler",
    "ViewStateSynchronizer",
    "WindowManager",
]
