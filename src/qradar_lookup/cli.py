"""Command-line interface for QRadar offense lookups.

Looks up the offenses QRadar reports for each IP given on the command line and
prints the results as JSON. Connection settings come from command-line options
or the matching ``QRADARLOOKUP_*`` environment variables.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys

import click

from qradar_lookup.config import (
    ENV_PREFIX,
    IGNORE_PRIVATE_IPS_ENV,
    MINIMUM_SEVERITY_ENV,
    OPEN_ONLY_ENV,
    PASSWORD_ENV,
    SKIP_TLS_VERIFY_ENV,
    URL_ENV,
    USERNAME_ENV,
    Settings,
)
from qradar_lookup.integration import LookupOutcome, QRadarIntegration
from qradar_lookup.lookup import Entity
from qradar_lookup.observability import initialize_logfire


def _setup_logging(verbose: bool) -> None:
    """Configure global logging and install the credential filter.

    Args:
        verbose: Use *DEBUG* level when True, *WARNING* otherwise so that the
            JSON written to stdout stays easy to read.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level)

    from qradar_lookup.logging_security import install_filter

    install_filter()


def _apply_environment_overrides(
    url: str | None,
    username: str | None,
    password: str | None,
    open_only: bool,
    minimum_severity: int | None,
    ignore_private_ips: bool,
    skip_tls_verify: bool,
) -> None:
    """Copy command-line values into the environment so Settings picks them up."""
    if url:
        os.environ[URL_ENV] = url
    if username:
        os.environ[USERNAME_ENV] = username
    if password:
        os.environ[PASSWORD_ENV] = password
    if open_only:
        os.environ[OPEN_ONLY_ENV] = "true"
    if minimum_severity is not None:
        os.environ[MINIMUM_SEVERITY_ENV] = str(minimum_severity)
    if ignore_private_ips:
        os.environ[IGNORE_PRIVATE_IPS_ENV] = "true"
    if skip_tls_verify:
        os.environ[SKIP_TLS_VERIFY_ENV] = "true"


def _create_settings() -> Settings:
    """Return validated settings, exiting with status 1 on invalid values."""
    try:
        return Settings()
    except Exception as exc:  # pragma: no cover - exact validation exceptions vary
        click.echo(f"✗ Configuration error: {exc}", err=True)
        sys.exit(1)


def _render(outcome: LookupOutcome) -> str:
    return json.dumps(
        [result.model_dump(mode="json", by_alias=True) for result in outcome.results],
        indent=2,
    )


@click.command()
@click.argument("values", nargs=-1, required=True)
@click.option("--url", envvar=URL_ENV, help=f"QRadar console URL (env: {URL_ENV})")
@click.option("--username", envvar=USERNAME_ENV, help=f"QRadar user (env: {USERNAME_ENV})")
@click.option(
    "--password",
    envvar=PASSWORD_ENV,
    help=f"Password of the QRadar user (env: {PASSWORD_ENV})",
)
@click.option("--open-only", is_flag=True, help="Only report offenses in the OPEN state")
@click.option(
    "--minimum-severity",
    type=click.IntRange(min=0),
    default=None,
    help="Drop offenses with a severity below this value",
)
@click.option(
    "--ignore-private-ips",
    is_flag=True,
    help="Do not query QRadar for private, loopback or broadcast addresses",
)
@click.option(
    "--skip-tls-verify",
    is_flag=True,
    help=f"Skip TLS certificate verification (refused unless {ENV_PREFIX}ENV is non-production)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    values: tuple[str, ...],
    url: str | None,
    username: str | None,
    password: str | None,
    open_only: bool,
    minimum_severity: int | None,
    ignore_private_ips: bool,
    skip_tls_verify: bool,
    verbose: bool,
) -> None:
    """Look up QRadar offenses for each IP in VALUES."""
    _setup_logging(verbose)

    _apply_environment_overrides(
        url=url,
        username=username,
        password=password,
        open_only=open_only,
        minimum_severity=minimum_severity,
        ignore_private_ips=ignore_private_ips,
        skip_tls_verify=skip_tls_verify,
    )

    settings = _create_settings()
    initialize_logfire(settings)

    integration = QRadarIntegration()
    integration.startup(logging.getLogger("qradar_lookup"))

    options, errors = integration.validate_options(settings.lookup_options())
    if errors:
        for error in errors:
            click.echo(f"✗ {error.key}: {error.message}", err=True)
        sys.exit(1)

    entities = [Entity.from_value(value) for value in values]
    outcome = asyncio.run(integration.do_lookup(entities, options))
    if outcome.error is not None:
        click.echo(f"✗ Lookup failed: {outcome.error}", err=True)
        sys.exit(1)

    click.echo(_render(outcome))


if __name__ == "__main__":
    main()
