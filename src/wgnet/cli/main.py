#!/usr/bin/env python3
"""
wgnet Command Line Interface

wgnet configurations describe a WireGuard interface together with its
routing, NAT and firewall settings; they are not WireGuard configuration
files. The commands below bring such a network up or down as a unit.
"""
import sys
import click
from pathlib import Path
from typing import Optional

from wgnet import __version__
from wgnet.core.unified_logger import configure_logging, get_logger


logger = get_logger(__name__, "cli")


def get_settings_lazy():
    """Lazy import and create settings to improve startup time"""
    from ..config.settings import WgnetSettings
    return WgnetSettings()


def get_config(ctx):
    """Get configuration from context with fallback (lazy loading)"""
    if ctx.obj is None:
        ctx.obj = {'config': get_settings_lazy()}
    elif 'config' not in ctx.obj:
        ctx.obj['config'] = get_settings_lazy()
    return ctx.obj['config']


@click.group(invoke_without_command=True)
@click.option('--path', '-P', 'config_path', type=click.Path(file_okay=False, path_type=Path),
              help='Directory holding wgnet configurations (default /etc/wgnet)')
@click.option('--dry-run', '-D', is_flag=True, help='Log commands instead of executing them')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.version_option(__version__, '--version', '-V', prog_name='wgnet')
@click.pass_context
def cli(ctx, config_path: Optional[Path], dry_run: bool, verbose: bool):
    """wgnet - WireGuard Network Tool"""
    from pydantic import ValidationError

    ctx.ensure_object(dict)

    try:
        settings = get_settings_lazy()
    except ValidationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    overrides = {}
    if config_path is not None:
        overrides['config_path'] = config_path.resolve()
    if dry_run:
        overrides['dry_run'] = True
    if verbose:
        overrides['verbose'] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(verbose=settings.verbose, log_file=settings.log_file)
    logger.debug(f"Settings: config_path={settings.config_path}, dry_run={settings.dry_run}")

    ctx.obj['config'] = settings
    ctx.obj['verbose'] = settings.verbose

    # Bare `wgnet` lists configurations and tunnels
    if ctx.invoked_subcommand is None:
        ctx.invoke(list_networks)


@cli.command(name='list')
@click.pass_context
def list_networks(ctx):
    """List configurations and active tunnels"""
    from .commands import ListCommandHandler

    config = get_config(ctx)
    handler = ListCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute():
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.pass_context
def show(ctx, name: str):
    """Show a configuration

    NAME: configuration name or file path
    """
    from .commands import ConfigCommandHandler

    config = get_config(ctx)
    handler = ConfigCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(action='show', name=name):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.option('--force', '-F', is_flag=True, help='Overwrite an existing configuration')
@click.pass_context
def new(ctx, name: str, force: bool):
    """Create a default configuration

    NAME: configuration name or file path
    """
    from .commands import ConfigCommandHandler

    config = get_config(ctx)
    handler = ConfigCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(action='new', name=name, force=force):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.pass_context
def status(ctx, name: str):
    """Show interface and network status

    NAME: configuration name or file path
    """
    from .commands import StatusCommandHandler

    config = get_config(ctx)
    handler = StatusCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(name=name):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.option('--force', '-F', is_flag=True, help='Re-apply the network policy if the interface is already up')
@click.pass_context
def up(ctx, name: str, force: bool):
    """Bring up the interface and its network policy

    NAME: configuration name or file path
    """
    from .commands import NetworkCommandHandler

    config = get_config(ctx)
    handler = NetworkCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(action='up', name=name, force=force):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.pass_context
def down(ctx, name: str):
    """Remove the network policy and take the interface down

    NAME: configuration name or file path
    """
    from .commands import NetworkCommandHandler

    config = get_config(ctx)
    handler = NetworkCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(action='down', name=name):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.option('--force', '-F', is_flag=True, help='Re-apply the network policy if the interface is still up')
@click.pass_context
def restart(ctx, name: str, force: bool):
    """Take the network down and bring it up again

    NAME: configuration name or file path
    """
    from .commands import NetworkCommandHandler

    config = get_config(ctx)
    handler = NetworkCommandHandler(config, ctx.obj['verbose'])

    if not handler.execute(action='restart', name=name, force=force):
        sys.exit(1)


def main(args=None):
    """Main entry point"""
    try:
        cli(args)
    except KeyboardInterrupt:
        click.echo("\nOperation interrupted by user", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
