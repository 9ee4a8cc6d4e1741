#!/usr/bin/env python3
"""
Site Mirror - render a website section and save it for offline use.

Starts a headless browser, crawls every in-scope page reachable from the
seed page, saves each page's rendered markup and downloads its assets,
then shuts the browser down.

Usage:
    python -m site_mirror.main
    python -m site_mirror.main --url https://example.com --prefix /docs --output ./mirror

Run without arguments, the fixed defaults in utils/constants.py apply.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError

from site_mirror.config import CrawlScope, RunConfig
from site_mirror.crawler import PageRenderer, SiteCrawler, CrawlResult
from site_mirror.utils.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_SCOPE_PREFIX,
    DEFAULT_SEED_PATH,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SETTLE_DELAY,
    DEFAULT_RENDER_TIMEOUT,
    DEFAULT_CONCURRENCY,
)
from site_mirror.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
    print_info
)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Every option is optional; the defaults are the fixed run constants.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='site_mirror',
        description='Mirror a website section for offline viewing',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s
    %(prog)s --url https://example.com --prefix /docs --seed /docs
    %(prog)s --url https://example.com -o ./backup --settle-delay 0.5 --max-pages 50
        """
    )

    parser.add_argument(
        '--url', '-u',
        type=str,
        default=DEFAULT_BASE_URL,
        help=f'Base URL of the site (default: {DEFAULT_BASE_URL})'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f'Output directory (default: {DEFAULT_OUTPUT_DIR})'
    )

    parser.add_argument(
        '--prefix', '-p',
        type=str,
        default=DEFAULT_SCOPE_PREFIX,
        help=f'Only links whose path starts with this are followed (default: {DEFAULT_SCOPE_PREFIX})'
    )

    parser.add_argument(
        '--seed', '-s',
        type=str,
        default=DEFAULT_SEED_PATH,
        help=f'Path of the first page, appended to the base URL (default: {DEFAULT_SEED_PATH})'
    )

    parser.add_argument(
        '--settle-delay',
        type=float,
        default=DEFAULT_SETTLE_DELAY,
        help=f'Pause after navigation before capturing markup, in seconds (default: {DEFAULT_SETTLE_DELAY})'
    )

    parser.add_argument(
        '--timeout',
        type=int,
        default=DEFAULT_RENDER_TIMEOUT,
        help=f'Page render timeout in milliseconds (default: {DEFAULT_RENDER_TIMEOUT})'
    )

    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f'Maximum concurrent asset downloads per page (default: {DEFAULT_CONCURRENCY})'
    )

    parser.add_argument(
        '--max-pages', '-m',
        type=int,
        default=None,
        help='Stop after this many pages (default: unbounded)'
    )

    parser.add_argument(
        '--max-depth', '-d',
        type=int,
        default=None,
        help='Do not follow links deeper than this (default: unbounded)'
    )

    parser.add_argument(
        '--no-headless',
        action='store_true',
        help='Run browser in visible mode (useful for debugging)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except warnings and errors'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write log records to this file'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RunConfig:
    """
    Build the run configuration from parsed arguments.

    Raises:
        ValueError: If any setting is invalid
    """
    base_url = args.url
    if not base_url.startswith(('http://', 'https://')):
        base_url = 'https://' + base_url
    base_url = base_url.rstrip('/')

    seed_path = args.seed if args.seed.startswith('/') else '/' + args.seed

    return RunConfig(
        base_url=base_url,
        output_dir=args.output,
        scope=CrawlScope(path_prefix=args.prefix, base_url=base_url),
        seed_path=seed_path,
        settle_delay=args.settle_delay,
        render_timeout=args.timeout,
        headless=not args.no_headless,
        concurrency=args.concurrency,
        max_pages=args.max_pages,
        max_depth=args.max_depth,
    )


def print_banner() -> None:
    """Print the application banner."""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                        SITE MIRROR                            ║
║            Render and save a website section offline          ║
╚═══════════════════════════════════════════════════════════════╝
    """
    print_status(banner, "bold cyan")


def print_summary(result: CrawlResult) -> None:
    """
    Print the crawl summary.

    Args:
        result: CrawlResult object
    """
    print("\n" + "=" * 60)
    print_success("CRAWL SUMMARY")
    print("=" * 60)
    print(f"  Pages visited:     {result.pages_crawled}")
    print(f"  Pages saved:       {result.pages_saved}")
    print(f"  Assets downloaded: {result.assets_downloaded}")
    print(f"  Failures:          {len(result.failures)}")
    print(f"  Duration:          {result.duration_seconds:.1f} seconds")
    print("=" * 60 + "\n")


async def mirror(config: RunConfig) -> CrawlResult:
    """
    Run one crawl: start the browser, crawl from the seed, stop the browser.

    Args:
        config: Run configuration

    Returns:
        CrawlResult of the run
    """
    renderer = PageRenderer(
        timeout=config.render_timeout,
        wait_until=config.wait_until,
        headless=config.headless,
        user_agent=config.user_agent
    )
    async with renderer:
        crawler = SiteCrawler(config, renderer)
        return await crawler.crawl()


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the site mirror.

    Returns:
        Exit code (0 once the crawl finishes, 1 for bad input or no browser)
    """
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level, log_file=args.log_file)

    if not args.quiet:
        print_banner()

    try:
        config = build_config(args)
    except ValueError as e:
        print_error(f"Invalid input: {e}")
        return 1

    if not args.quiet:
        print_info(f"Seed URL: {config.seed_url}")
        print_info(f"Output: {config.output_dir}")

    try:
        result = await mirror(config)
    except PlaywrightError as e:
        print_error(f"Browser error: {e}")
        return 1

    if not args.quiet:
        print_summary(result)

    print_success(f"Site mirrored to: {os.path.abspath(config.output_dir)}")
    return 0


def run() -> None:
    """Entry point wrapper for running as module."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print_error("Crawl interrupted by user")
        sys.exit(1)


if __name__ == '__main__':
    run()
