"""Linecraft - prompt refinement for black-and-white coloring pages."""

__version__ = "0.1.0"

from linecraft.core.config import LinecraftConfig, config
from linecraft.core.refinement import PromptRefinementService

__all__ = [
    "LinecraftConfig",
    "PromptRefinementService",
    "config",
]
