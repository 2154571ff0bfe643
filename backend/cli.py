#!/usr/bin/env python3
"""
CLI for route assembly

Commands:
    routes        - Assemble the router and print its URL map
    build-routes  - Byte-compile route modules for compiled mode
    serve         - Run the development server

Usage:
    python cli.py routes
    python cli.py routes --discovery glob --mode source
    python cli.py build-routes --src backend/routes --out build/routes
    python cli.py serve --port 5000
"""

import click
import sys


@click.group()
@click.version_option(version="1.0.0", prog_name="routes-cli")
def cli():
    """Route assembly CLI - inspect and build route modules."""
    pass


@cli.command("routes")
@click.option("--discovery", type=click.Choice(["registry", "glob"]), default=None,
              help="Override ROUTE_DISCOVERY")
@click.option("--mode", type=click.Choice(["source", "compiled"]), default=None,
              help="Override ROUTES_MODE (glob discovery only)")
@click.option("--pattern", default=None, help="Override ROUTES_GLOB")
def routes(discovery, mode, pattern):
    """
    Assemble the router and print every rule.

    Exits with status 1 if a route module fails to load.
    """
    from app import create_app
    from api.route_loader import RouteLoadError

    overrides = {}
    if discovery:
        overrides['ROUTE_DISCOVERY'] = discovery
    if mode:
        overrides['ROUTES_MODE'] = mode
    if pattern:
        overrides['ROUTES_GLOB'] = pattern

    try:
        app = create_app(overrides)
    except RouteLoadError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    rules = sorted(
        (rule for rule in app.url_map.iter_rules() if rule.endpoint != 'static'),
        key=lambda rule: rule.rule,
    )
    for rule in rules:
        methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
        click.echo(f"{methods:<10} {rule.rule:<40} {rule.endpoint}")
    click.echo()
    click.secho(f"{len(rules)} rule(s)", fg="green")


@cli.command("build-routes")
@click.option("--src", "src_dir", default="backend/routes", show_default=True,
              type=click.Path(exists=True, file_okay=False))
@click.option("--out", "out_dir", default="build/routes", show_default=True,
              type=click.Path(file_okay=False))
def build_routes(src_dir, out_dir):
    """Byte-compile route modules into OUT for compiled-mode loading."""
    from api.route_loader import compile_routes

    written = compile_routes(src_dir, out_dir)
    for path in written:
        click.echo(f"  {path}")
    click.secho(f"Compiled {len(written)} route module(s)", fg="green")


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=5000, show_default=True, type=int)
def serve(host, port):
    """Run the Flask development server."""
    from app import create_app

    app = create_app()
    app.run(host=host, port=port, debug=app.config.get('DEBUG', False))


if __name__ == "__main__":
    cli()
