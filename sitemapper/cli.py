# === FILE: sitemapper/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for SiteMapper.

Commands:
  fetch     Crawl a sitemap (index) tree and print/save the flattened URL list
  config    Show the effective configuration

Global options:
  --config PATH       YAML/JSON config file (optional)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Log format (e.g. "%(asctime)s %(levelname)s %(message)s")

fetch options:
  --timeout MS        Per-request timeout in milliseconds (override config)
  --concurrency N     Max concurrent sitemap requests (override config)
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --pretty            Indent JSON output (2 spaces)
  --errors            Include failed sitemap URLs in the JSON output
  --scan-timeout SEC  Timeout for the whole crawl (seconds)

Misc:
  --version, -v       Show the SiteMapper version

Example:
  sitemapper fetch https://example.com/sitemap.xml --timeout 5000 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from sitemapper import __version__
from sitemapper.config import SiteMapperConfig, load_config
from sitemapper.crawler.crawler import SiteMapper
from sitemapper.crawler.models import SitesData
from sitemapper.logger import DEFAULT_FORMAT, init_logging
from sitemapper.report.html_report import render_html
from sitemapper.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def run_fetch(cfg: SiteMapperConfig, url: str | None) -> SitesData:
    """Run one crawl with *cfg*; *url* falls back to ``cfg.url``."""
    async with SiteMapper(cfg) as mapper:
        return await mapper.fetch(url)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMapper command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path) if config_path else SiteMapperConfig()
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('fetch', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option(
    '--timeout', '-t', 'timeout',
    type=click.IntRange(min=1),
    default=None,
    help='Per-request timeout in milliseconds (override config)'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Max concurrent sitemap requests (override config)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output (2 spaces)'
)
@click.option(
    '--errors', 'show_errors', is_flag=True,
    help='Include failed sitemap URLs in the JSON output'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.pass_context
def fetch(ctx, url, timeout, concurrency, json_output, html_output, pretty, show_errors, scan_timeout):
    """Crawl URL (or the configured url) and output every page URL found."""
    try:
        cfg = ctx.obj['config'].with_overrides(timeout=timeout, concurrency=concurrency)
    except Exception as e:
        print_error(f'Invalid options: {e}')
    if not (url or cfg.url):
        print_error('No sitemap URL given and none configured')

    try:
        if scan_timeout:
            result = asyncio.run(
                asyncio.wait_for(run_fetch(cfg, url), timeout=scan_timeout)
            )
        else:
            result = asyncio.run(run_fetch(cfg, url))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {scan_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    # No report files requested: print to stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(result.to_dict(include_errors=show_errors), ensure_ascii=False, indent=indent))
        return

    if json_output:
        try:
            saved_json = render_json(result, json_output, include_errors=show_errors)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(result, html_output)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
