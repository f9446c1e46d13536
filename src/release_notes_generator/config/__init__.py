"""
Configuration loading for release_notes_generator.

Provides a loader for the optional user configuration file. See
:mod:`release_notes_generator.config.loader` for details.
"""

from .loader import ConfigError, load_config  # noqa: F401
