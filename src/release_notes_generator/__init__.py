"""
Top-level package for release_notes_generator.

The classification and rendering pipeline lives in
:mod:`release_notes_generator.parsing` and
:mod:`release_notes_generator.rendering`; the CLI entry point is
``release_notes_generator.cli.main``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
