"""
Document rendering for release_notes_generator.

See :mod:`release_notes_generator.rendering.markdown` for the release
notes and changelog renderers.
"""

from .markdown import generate_changelog, generate_release_notes  # noqa: F401
