"""Configuration loaders for JSON exercise and generator files."""

from .json_loader import Exercise, load_exercise, load_generator_config

__all__ = ["Exercise", "load_exercise", "load_generator_config"]
