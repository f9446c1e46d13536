#!/usr/bin/env python
"""
Thin wrapper script to invoke the release_notes_generator CLI.

Running ``python relnotes.py`` is equivalent to running the
``relnotes`` console script installed via ``pyproject.toml``.
"""

from release_notes_generator.cli import main


if __name__ == "__main__":
    main(prog_name="relnotes")
