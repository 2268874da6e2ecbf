from __future__ import annotations

import json
import logging
from typing import Any, Dict, NoReturn, Optional, Tuple

import click

from . import __version__
from .api import SalesforceAPI, SFConfig
from .env_loader import load_env_files
from .exceptions import SalesforceError
from .logging_config import configure_logging

_logger = logging.getLogger(__name__)

# Load .env very early, so everything else sees env vars
load_env_files()


def _client() -> SalesforceAPI:
    return SalesforceAPI(SFConfig.from_env())


def _fail(prefix: str, err: Exception) -> NoReturn:
    click.echo(f"❌  {prefix}: {err}", err=True)
    raise click.Abort() from None


def _parse_fields(fields: Tuple[str, ...]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for item in fields:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--field")
        data[name] = value
    return data


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfrest")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Salesforce REST CLI. Use subcommands like 'login', 'query' or 'create'."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("login")
@click.option("--show", is_flag=True, help="Print the full credential instead of a preview.")
def cmd_login(show: bool) -> None:
    """Request an access token using the client-credentials flow."""
    try:
        with _client() as api:
            token = api.get_access_token()
    except SalesforceError as e:
        _fail("Login failed", e)

    click.echo("✅  Salesforce token obtained successfully.")
    if show:
        click.echo(f'SF_ACCESS_TOKEN="{token}"')
    else:
        click.echo(f"Token preview: {token[:10]}...{token[-6:]}")


@cli.command("query")
@click.argument("soql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_query(soql: str, pretty: bool) -> None:
    """Run a SOQL query and print the raw response."""
    try:
        with _client() as api:
            api.connect()
            body = api.query(soql)
    except SalesforceError as e:
        _fail("Query failed", e)

    text = body.decode("utf-8", errors="replace")
    if pretty:
        try:
            text = json.dumps(json.loads(text), indent=2)
        except ValueError:
            _logger.warning("Response is not JSON; printing it unchanged.")
    click.echo(text)


@cli.command("create")
@click.argument("object_name")
@click.option(
    "-f",
    "--field",
    "fields",
    multiple=True,
    metavar="NAME=VALUE",
    help="Field value for the new record (repeatable).",
)
@click.option("--json", "json_text", help="Field values as a JSON object.")
def cmd_create(object_name: str, fields: Tuple[str, ...], json_text: Optional[str]) -> None:
    """Create an OBJECT_NAME record and print its Id."""
    data: Dict[str, Any] = {}
    if json_text:
        try:
            data = json.loads(json_text)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--json") from None
        if not isinstance(data, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--json")
    data.update(_parse_fields(fields))
    if not data:
        raise click.UsageError("Provide at least one --field or --json.")

    try:
        with _client() as api:
            api.connect()
            record_id = api.create(object_name, data)
    except SalesforceError as e:
        _fail("Create failed", e)

    click.echo(record_id)
