"""
Main CLI entry point for the CT enforcement policy tool.

This module provides the command-line interface for the tool, allowing
operators to check which hostnames get CT enforcement under a given set of
security properties and to see which property decided each result.
"""

import json
import logging
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ctpolicy.policy.labels import reversed_labels
from ctpolicy.policy.resolver import CTEnforcementResolver, candidate_keys
from ctpolicy.stores import PROPERTIES_ENV_VAR, SecurityProperties, load_properties
from ctpolicy.utils.logging import get_logger, setup_logging
from ctpolicy.utils.tls import is_literal_ip_address, is_valid_sni_hostname

console = Console()


def _parse_assignment(ctx, param, values: Tuple[str, ...]) -> List[Tuple[str, str]]:
    """Click callback turning KEY=VALUE strings into pairs."""
    pairs = []
    for item in values:
        if '=' not in item:
            raise click.BadParameter(f"Expected KEY=VALUE, got: {item}")
        key, value = item.split('=', 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"Empty property name in: {item}")
        pairs.append((key, value))
    return pairs


def properties_options(func):
    """Attach the --properties and --set options shared by policy commands."""
    func = click.option(
        '--set', '-s', 'assignments', multiple=True, callback=_parse_assignment,
        metavar='KEY=VALUE', help='Set a security property (can be used multiple times)',
    )(func)
    func = click.option(
        '--properties', '-p', envvar=PROPERTIES_ENV_VAR,
        type=click.Path(dir_okay=False),
        help=f'Security properties file (default: ${PROPERTIES_ENV_VAR})',
    )(func)
    return func


def build_store(
    properties: Optional[str],
    assignments: List[Tuple[str, str]],
) -> SecurityProperties:
    """Build the property store for a command from a file and --set overrides."""
    logger = get_logger()
    store = SecurityProperties()

    if properties:
        try:
            store.update(load_properties(properties))
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error reading properties file:[/] {escape(str(e))}")
            logger.debug("Failed to load properties", exc_info=True)
            sys.exit(1)

    for key, value in assignments:
        store.set(key, value)

    return store


@click.group()
@click.version_option(package_name='ct_policy')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-file', help='Log file path')
def cli(debug: bool, log_file: Optional[str]):
    """Certificate Transparency enforcement policy tool.

    Resolves whether SCT verification is required for hostnames from
    conscrypt.ct.* security properties.
    """
    setup_logging(level=logging.DEBUG if debug else logging.WARNING, log_file=log_file, verbose=debug)


@cli.command()
@click.argument('hostnames', nargs=-1, required=True)
@properties_options
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
def check(
    hostnames: Tuple[str, ...],
    properties: Optional[str],
    assignments: List[Tuple[str, str]],
    as_json: bool,
):
    """Check whether CT is enforced for one or more hostnames."""
    resolver = CTEnforcementResolver(build_store(properties, assignments))
    results = {hostname: resolver.is_ct_verification_required(hostname) for hostname in hostnames}

    if as_json:
        click.echo(json.dumps(results, indent=2))
        return

    if not resolver.is_enabled():
        console.print("[bold yellow]Warning:[/] conscrypt.ct.enable is not true, CT is off for every host")

    for hostname, required in results.items():
        if required:
            console.print(f"[bold red]enforce[/] {escape(hostname)}")
        else:
            console.print(f"[green]skip[/]    {escape(hostname)}")


@cli.command()
@click.argument('hostname')
@properties_options
def explain(
    hostname: str,
    properties: Optional[str],
    assignments: List[Tuple[str, str]],
):
    """Show every property consulted for HOSTNAME and which one decided."""
    resolver = CTEnforcementResolver(build_store(properties, assignments))
    trace = resolver.explain(hostname)

    table = Table(title=f"CT policy for {escape(hostname)}")
    table.add_column('#', justify='right', style='dim')
    table.add_column('Property')
    table.add_column('Kind')
    table.add_column('Value')
    table.add_column('Applied')

    for i, lookup in enumerate(trace.lookups):
        if i == 0:
            kind = 'switch'
        else:
            kind = 'wildcard' if lookup.is_wildcard else 'exact'
        value = '[dim]<absent>[/]' if lookup.value is None else escape(repr(lookup.value))
        applied = '[bold]yes[/]' if i == trace.deciding_index else ''
        table.add_row(str(i), escape(lookup.key), kind, value, applied)

    console.print(table)

    if not trace.enabled:
        console.print("[bold yellow]CT is disabled:[/] conscrypt.ct.enable is not true")
    elif trace.deciding_key is None:
        console.print("[dim]No enforce property matched; using the default.[/]")
    else:
        console.print(f"[bold]Decided by:[/] {escape(trace.deciding_key)}")

    verdict = '[bold red]enforce[/]' if trace.decision else '[green]skip[/]'
    console.print(f"[bold]Decision:[/] {verdict}")


@cli.command()
@click.argument('hostname')
def keys(hostname: str):
    """List the property keys looked up for HOSTNAME, in order."""
    for key in candidate_keys(hostname):
        click.echo(key)


@cli.command()
@click.argument('hostname')
def sni(hostname: str):
    """Report how HOSTNAME would be treated for SNI."""
    console.print(f"[bold]Labels (reversed):[/] {escape(repr(reversed_labels(hostname)))}")
    console.print(f"[bold]IP literal:[/] {'yes' if is_literal_ip_address(hostname) else 'no'}")
    if is_valid_sni_hostname(hostname):
        console.print("[bold]SNI:[/] [green]valid[/]")
    else:
        console.print("[bold]SNI:[/] [yellow]not sent[/]")


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Cancelled by user[/]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[bold red]Unexpected error:[/] {escape(str(e))}")
        get_logger().exception("Unhandled exception in main")
        sys.exit(1)


if __name__ == '__main__':
    main()
