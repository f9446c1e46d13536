import json
import logging
import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import patch

import requests
from click.testing import CliRunner

import release_notes_generator.cli as cli
from release_notes_generator.config.loader import DEFAULT_CONFIG, ConfigError
from release_notes_generator.parsing.models import RawCommit
from release_notes_generator.providers.base import ErrorKind, ProviderError, RepositoryInfo
from release_notes_generator.service import GeneratedDocuments


BASE_ARGS = ["--repo", "https://github.com/octo/hello", "--since", "2024-01-01", "--until", "2024-01-31"]


class DummyProvider:
    def __init__(self, commits=None, error=None):
        self.commits = commits or []
        self.error = error
        self.tokens = []

    def parse_repository_url(self, url):
        return RepositoryInfo(owner="octo", repo="hello")

    def fetch_commits(self, repo, start_date, end_date, token=None):
        self.tokens.append(token)
        if self.error:
            raise self.error
        return self.commits

    def fetch_pull_requests(self, repo, start_date, end_date, token=None):
        return []


def sample_commits():
    return [
        RawCommit(hash="1111111aaa", author="a", date=datetime(2024, 1, 2, tzinfo=timezone.utc), message="feat: add X"),
        RawCommit(hash="2222222bbb", author="b", date=datetime(2024, 1, 3, tzinfo=timezone.utc), message="docs: z"),
    ]


def reset_logging():
    """Undo the logging setup done by the CLI so later tests start clean."""
    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)
    for name, item in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("release_notes_generator") and isinstance(item, logging.Logger):
            item.propagate = False


class TestCLI(unittest.TestCase):
    def tearDown(self) -> None:
        reset_logging()

    def _invoke(self, args, provider=None, env=None):
        runner = CliRunner()
        provider = provider or DummyProvider(sample_commits())
        with patch.object(cli, "select_provider", return_value=provider):
            return runner.invoke(cli.main, args, env=env or {"GITHUB_TOKEN": ""})

    def test_cli_success_markdown(self) -> None:
        result = self._invoke(BASE_ARGS)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("# Release Notes\n\n## Features\n\n- add X (1111111)\n", result.output)
        self.assertIn("# Changelog\n\n## Features\n\n- add X (1111111)\n\n## Documentation\n\n- z (2222222)\n",
                      result.output)

    def test_cli_single_document(self) -> None:
        result = self._invoke(BASE_ARGS + ["--document", "changelog"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("# Changelog", result.output)
        self.assertNotIn("# Release Notes", result.output)

    def test_cli_token_from_option_and_env(self) -> None:
        provider = DummyProvider(sample_commits())
        result = self._invoke(BASE_ARGS + ["--token", "opt-token"], provider=provider)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertEqual(provider.tokens, ["opt-token"])
        self.assertNotIn("opt-token", result.output)

        provider = DummyProvider(sample_commits())
        result = self._invoke(BASE_ARGS, provider=provider, env={"GITHUB_TOKEN": "env-token"})
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertEqual(provider.tokens, ["env-token"])

    def test_cli_invalid_request(self) -> None:
        result = self._invoke(["--repo", "https://example.com/x/y", "--since", "2024-01-01", "--until", "2024-01-31"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_USAGE)
        self.assertIn("Invalid repository URL format", result.output)

    def test_cli_reversed_dates(self) -> None:
        result = self._invoke(["--repo", "https://github.com/octo/hello", "--since", "2024-02-01", "--until", "2024-01-01"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_USAGE)

    def test_cli_missing_option(self) -> None:
        result = CliRunner().invoke(cli.main, ["--since", "2024-01-01", "--until", "2024-01-31"])
        self.assertEqual(result.exit_code, 2)

    def test_cli_config_error(self) -> None:
        with patch.object(cli, "load_config", side_effect=ConfigError("bad config")):
            result = self._invoke(BASE_ARGS)
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertIn("bad config", result.output)

    def test_cli_provider_error_exit_codes(self) -> None:
        for kind, code in cli.PROVIDER_EXIT_CODES.items():
            with self.subTest(kind=kind):
                provider = DummyProvider(error=ProviderError(kind, f"failure {kind.value}"))
                result = self._invoke(BASE_ARGS, provider=provider)
                self.assertEqual(result.exit_code, code)
                self.assertIn(f"failure {kind.value}", result.output)
                self.assertIn(cli.PROVIDER_HINTS[kind], result.output)

    def test_cli_exit_codes_are_distinct(self) -> None:
        codes = list(cli.PROVIDER_EXIT_CODES.values())
        self.assertEqual(len(codes), len(set(codes)))
        self.assertEqual(cli.PROVIDER_EXIT_CODES[ErrorKind.NOT_FOUND], cli.EXIT_NOT_FOUND)

    def test_cli_pull_request_source_from_config(self) -> None:
        config = dict(DEFAULT_CONFIG, source="pull-requests")
        documents = GeneratedDocuments(release_notes="RN\n", changelog="CL\n", commit_count=0)
        with patch.object(cli, "load_config", return_value=config):
            with patch.object(cli, "generate_documents", return_value=documents) as mock_generate:
                result = self._invoke(BASE_ARGS)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertEqual(mock_generate.call_args[1]["source"], "pull-requests")
        self.assertIn("No commits found", result.output)

    def test_cli_unexpected_error(self) -> None:
        with patch.object(cli, "generate_documents", side_effect=RuntimeError("kaboom")):
            result = self._invoke(BASE_ARGS)
        self.assertEqual(result.exit_code, cli.EXIT_GENERIC_ERROR)


class TestCLILogging(unittest.TestCase):
    def tearDown(self) -> None:
        reset_logging()

    def test_verbose_shows_package_logs(self) -> None:
        runner = CliRunner()
        provider = DummyProvider(sample_commits())
        with patch.object(cli, "select_provider", return_value=provider):
            result = runner.invoke(cli.main, BASE_ARGS + ["--verbose", "--token", "hidden-token"],
                                   env={"GITHUB_TOKEN": ""})
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("Generating release notes for https://github.com/octo/hello", result.output)
        self.assertIn("DEBUG: Categorized 2 commit(s)", result.output)
        self.assertNotIn("hidden-token", result.output)

    def test_package_loggers_propagate_after_setup(self) -> None:
        import release_notes_generator.service as service

        service.logger.propagate = False
        cli.enable_package_logging()
        self.assertTrue(service.logger.propagate)
        self.assertTrue(logging.getLogger("release_notes_generator.providers.github").propagate)

    def test_provider_errors_are_logged(self) -> None:
        runner = CliRunner()
        with patch("release_notes_generator.providers.github.requests.get",
                   side_effect=requests.ConnectionError("refused")):
            result = runner.invoke(cli.main, BASE_ARGS, env={"GITHUB_TOKEN": ""})
        self.assertEqual(result.exit_code, cli.EXIT_NETWORK_ERROR)
        self.assertIn("ERROR: Failed to connect to GitHub", result.output)


class TestCLIMalformedResponse(unittest.TestCase):
    def tearDown(self) -> None:
        reset_logging()

    def test_malformed_commit_exits_with_provider_error(self) -> None:
        body = [{"sha": "abcdef1234", "commit": {"message": "feat: x", "author": {"name": "a", "date": "not-a-date"}}}]
        response = SimpleNamespace(status_code=200, text=json.dumps(body), headers={}, json=lambda: body)
        runner = CliRunner()
        with patch("release_notes_generator.providers.github.requests.get", return_value=response):
            result = runner.invoke(cli.main, BASE_ARGS, env={"GITHUB_TOKEN": ""})
        self.assertEqual(result.exit_code, cli.EXIT_PROVIDER_ERROR, result.output)
        self.assertIn("Failed to parse GitHub response", result.output)
        self.assertIn(cli.PROVIDER_HINTS[ErrorKind.OTHER], result.output)
        self.assertNotIn("Unexpected error", result.output)


class TestRenderOutput(unittest.TestCase):
    def setUp(self) -> None:
        self.documents = GeneratedDocuments(release_notes="# Release Notes\n\nR\n", changelog="# Changelog\n\nC\n")

    def test_markdown_both(self) -> None:
        self.assertEqual(
            cli.render_output(self.documents, "both", "markdown"),
            "# Release Notes\n\nR\n\n# Changelog\n\nC\n",
        )

    def test_markdown_release_notes_only(self) -> None:
        self.assertEqual(cli.render_output(self.documents, "release-notes", "markdown"), "# Release Notes\n\nR\n")

    def test_json_payload(self) -> None:
        payload = json.loads(cli.render_output(self.documents, "both", "json"))
        self.assertEqual(payload, {"releaseNotes": "# Release Notes\n\nR\n", "changelog": "# Changelog\n\nC\n"})
        payload = json.loads(cli.render_output(self.documents, "changelog", "json"))
        self.assertEqual(list(payload), ["changelog"])


if __name__ == "__main__":
    unittest.main()
