from unittest.mock import patch

import pytest


@pytest.fixture(scope="session", autouse=True)
def isolate_user_config(tmp_path_factory):
    """Point the configuration directory at an empty temporary directory.

    Tests expect default configuration. A developer's own
    ``~/.relnotes/config.json`` must not leak into them. Individual tests
    may still patch ``_get_config_directory`` themselves.
    """
    config_dir = tmp_path_factory.mktemp("relnotes_config")
    patcher = patch(
        "release_notes_generator.config.loader._get_config_directory",
        return_value=config_dir,
    )
    patcher.start()
    try:
        yield config_dir
    finally:
        patcher.stop()
