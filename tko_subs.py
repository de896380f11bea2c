#!/usr/bin/env python3

import argparse
import sys
import logging
from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich import box
from rich.logging import RichHandler
import rich.traceback

from config_manager import ConfigManager
from tkosubs import (
    CnameResolver, ProbeEngine, ProviderRegistry, TakeoverDispatcher, TakeoverScanner, __version__
)
from tkosubs.utils import read_domains

# Configure rich error handling
rich.traceback.install(show_locals=False)

stderr_console = Console(stderr=True)

# Diagnostics go to stderr, stdout carries one line per scanned domain
logging.basicConfig(
    level=logging.INFO,
    format='%(message)s',
    handlers=[
        RichHandler(
            console=stderr_console,
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False
        )
    ]
)

# Suppress output from external libraries
logging.getLogger('urllib3').setLevel(logging.WARNING)
logging.getLogger('urllib3.connectionpool').setLevel(logging.WARNING)
logging.getLogger('requests').setLevel(logging.WARNING)
logging.getLogger('dns').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def display_banner() -> None:
    title = Text()
    title.append("tko-subs", style="bold cyan")
    title.append("\nDangling CNAME detection and subdomain takeover", style="blue")
    title.append(f"\nVersion: {__version__}", style="yellow")

    stderr_console.print(Panel(
        title,
        border_style="cyan",
        box=box.DOUBLE,
        padding=(0, 2),
        expand=False
    ))


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find subdomains pointing at unclaimed hosting services and take them over",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="WARNING: confirmed GitHub and Heroku takeovers are performed for real "
               "with the configured accounts."
    )
    parser.add_argument('domains', help='File with one subdomain per line')
    parser.add_argument('fingerprints', help='CSV file of provider,cname pattern,error signature,http only')
    parser.add_argument('--config', default='config.yaml', help='Path to configuration file')
    parser.add_argument('--env-file', help='Path to .env file with API credentials')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable detailed output')
    parser.add_argument('--no-banner', action='store_true', help='Do not print the banner')
    return parser


def build_scanner(config: ConfigManager, registry: ProviderRegistry) -> TakeoverScanner:
    timeout = config.get("scan", "timeout")
    resolver = CnameResolver(
        nameservers=config.nameservers,
        timeout=config.get("dns", "query_timeout", timeout)
    )
    probe = ProbeEngine(
        connect_timeout=config.get("http", "connect_timeout"),
        tls_handshake_timeout=config.get("http", "tls_handshake_timeout"),
        request_timeout=config.get("http", "request_timeout"),
        user_agent=config.get("http", "user_agent")
    )
    dispatcher = TakeoverDispatcher(config.get_credentials())
    return TakeoverScanner(registry, resolver=resolver, probe=probe, dispatcher=dispatcher, timeout=timeout)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for tko-subs"""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = ConfigManager(args.config, env_file=args.env_file)
        if not args.verbose:
            level = str(config.get("logging", "level", "INFO")).upper()
            try:
                logging.getLogger().setLevel(level)
            except ValueError:
                logger.warning(f"Unknown logging level {level}, keeping INFO")

        if not args.no_banner:
            display_banner()

        # Both inputs must open before anything is scanned
        try:
            domains = read_domains(args.domains)
            registry = ProviderRegistry.from_file(args.fingerprints)
        except OSError as e:
            logger.error(f"Cannot open input file: {e}")
            return 1

        scanner = build_scanner(config, registry)
        scanned = scanner.run(domains)
        logger.debug(f"Scanned {scanned} domains")
        return 0

    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"An error occurred: {str(e)}")
        if args.verbose:
            logger.exception("Detailed error information:")
        return 1


if __name__ == "__main__":
    sys.exit(main())
