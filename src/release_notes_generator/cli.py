"""
Command line interface for the release_notes_generator tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``relnotes`` command. It validates the request,
loads configuration, fetches commits from the hosting service and prints
the generated release notes and changelog. Status output goes to stderr
so that stdout carries only the documents.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

import click

from release_notes_generator import __version__
from release_notes_generator.config.loader import ConfigError, load_config
from release_notes_generator.providers.base import ErrorKind, ProviderError
from release_notes_generator.providers.factory import select_provider
from release_notes_generator.service import (
    SOURCE_COMMITS,
    SOURCE_PULL_REQUESTS,
    GeneratedDocuments,
    generate_documents,
)
from release_notes_generator.validation import ValidationError, validate_generate_request

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_CONFIG_ERROR = 3
EXIT_NOT_FOUND = 4
EXIT_AUTH_FAILED = 5
EXIT_RATE_LIMITED = 6
EXIT_NETWORK_ERROR = 7
EXIT_PROVIDER_ERROR = 8

PROVIDER_EXIT_CODES = {
    ErrorKind.NOT_FOUND: EXIT_NOT_FOUND,
    ErrorKind.AUTH_FAILED: EXIT_AUTH_FAILED,
    ErrorKind.RATE_LIMITED: EXIT_RATE_LIMITED,
    ErrorKind.NETWORK_ERROR: EXIT_NETWORK_ERROR,
    ErrorKind.OTHER: EXIT_PROVIDER_ERROR,
}

PROVIDER_HINTS = {
    ErrorKind.NOT_FOUND: "The repository does not exist or you do not have access to it.",
    ErrorKind.AUTH_FAILED: "Check your access token and its permissions.",
    ErrorKind.RATE_LIMITED: "Try again later or provide an access token for higher rate limits.",
    ErrorKind.NETWORK_ERROR: "Check your internet connection and try again.",
    ErrorKind.OTHER: "Run again with --verbose for details.",
}

DOCUMENT_CHOICES = ("both", "release-notes", "changelog")

PACKAGE_LOGGER = "release_notes_generator"


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback, written to stderr."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"⠋ {self.message}...", nl=False, err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        if exc_type is None:
            click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)", err=True)
        else:
            click.echo(f"\r✗ {self.message} (failed after {elapsed:.1f}s)", err=True)
        return False


def enable_package_logging() -> None:
    """Let the package's module loggers propagate to the configured root logger."""
    for name, item in list(logging.Logger.manager.loggerDict.items()):
        if name.split(".")[0] == PACKAGE_LOGGER and isinstance(item, logging.Logger):
            item.propagate = True


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}", err=True)
    click.echo(f"Step {step_num}/{total_steps}: {message}", err=True)
    click.echo(f"{'='*60}", err=True)


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def render_output(documents: GeneratedDocuments, document: str, output_format: str) -> str:
    """Build the text written to stdout.

    Parameters
    ----------
    documents : GeneratedDocuments
        The generated documents.
    document : str
        Which document(s) to include: ``both``, ``release-notes`` or
        ``changelog``.
    output_format : str
        ``markdown`` prints the documents verbatim; ``json`` prints the
        ``releaseNotes``/``changelog`` payload.
    """
    payload = documents.to_dict()
    if document == "release-notes":
        payload.pop("changelog")
    elif document == "changelog":
        payload.pop("releaseNotes")

    if output_format == "json":
        return json.dumps(payload, indent=2) + "\n"
    return "\n".join(payload.values())


@click.command()
@click.option("--repo", "repository_url", required=True, help="Repository URL, e.g. https://github.com/owner/repo.")
@click.option("--since", "start_date", required=True, help="Start of the date range (ISO 8601).")
@click.option("--until", "end_date", required=True, help="End of the date range (ISO 8601).")
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="Access token (defaults to $GITHUB_TOKEN).")
@click.option(
    "--source",
    type=click.Choice([SOURCE_COMMITS, SOURCE_PULL_REQUESTS]),
    default=None,
    help="Read commits directly or from merged pull requests.",
)
@click.option("--document", type=click.Choice(DOCUMENT_CHOICES), default="both", show_default=True,
              help="Which document to print.")
@click.option("--format", "output_format", type=click.Choice(["markdown", "json"]), default="markdown",
              show_default=True, help="Output format.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="relnotes")
def main(
    repository_url: str,
    start_date: str,
    end_date: str,
    token: Optional[str],
    source: Optional[str],
    document: str,
    output_format: str,
    verbose: bool,
) -> None:
    """📝 Generate release notes and a changelog from conventional commits.

    Commits in the given date range are fetched from the hosting service,
    grouped by their feat/fix/docs/chore prefix, and rendered as markdown.
    """
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    enable_package_logging()

    ctx = click.get_current_context(silent=True)

    total_steps = 4
    current_step = 0

    try:
        # Step 1: Validate request
        current_step += 1
        print_step(current_step, total_steps, "Validating Request")

        try:
            request = validate_generate_request(repository_url, start_date, end_date, token)
        except ValidationError as exc:
            print_error(f"Invalid request: {exc}")
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)

        print_success(f"Repository: {request.repository_url}")
        print_info(f"Range: {request.start_date.isoformat()} → {request.end_date.isoformat()}", indent=1)
        print_info(f"Authenticated: {'yes' if request.access_token else 'no'}", indent=1)

        # Step 2: Load configuration
        current_step += 1
        print_step(current_step, total_steps, "Loading Configuration")

        try:
            with ProgressIndicator("Reading configuration"):
                config = load_config()
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        source = source or config["source"]
        print_success("Configuration loaded successfully")
        print_info(f"API: {config['api_url']}", indent=1)
        print_info(f"Source: {source}", indent=1)

        # Step 3: Fetch commits and generate documents
        current_step += 1
        print_step(current_step, total_steps, "Fetching Commits")

        try:
            provider = select_provider(request.repository_url, request.access_token, config)
            with ProgressIndicator(f"Fetching {source} from {request.repository_url}"):
                documents = generate_documents(request, provider=provider, source=source)
        except ValidationError as exc:
            print_error(f"Invalid repository URL: {exc}")
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)
        except ProviderError as exc:
            print_error(f"Failed to fetch commits ({exc.kind.value}): {exc}")
            print_info(PROVIDER_HINTS[exc.kind], indent=1)
            raise click.exceptions.Exit(PROVIDER_EXIT_CODES[exc.kind])

        if documents.commit_count == 0:
            print_warning("No commits found in the requested range.")
        else:
            print_success(
                f"Processed {documents.commit_count} commit{'s' if documents.commit_count != 1 else ''}"
            )

        # Step 4: Output
        current_step += 1
        print_step(current_step, total_steps, "Writing Documents")
        click.echo(render_output(documents, document, output_format), nl=False)

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        # Catch any other unhandled errors
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
