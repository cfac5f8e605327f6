#!/usr/bin/env python3
"""
Command-line entry point
========================
Mirror the intranet's tenants, projects and activities to disk.

Configuration flows through ``MirrorRunConfig``: defaults, then
``config.json``, then ``INTRA_*`` environment variables (a ``.env`` file
is loaded first), then the flags below.

Run with: python -m intra_mirror [--config config.json] [options]
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .errors import AuthenticationError, ConfigError
from .run_config import MirrorRunConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intra-mirror",
        description="Mirror the intranet content tree and its files to local storage.",
    )
    parser.add_argument('--config', type=str, default=None,
                        help=f'JSON config file (default: ./{DEFAULT_CONFIG_FILE} if present)')
    parser.add_argument('--login', type=str, help='Intranet login')
    parser.add_argument('--password', type=str, help='Intranet password (prompted if missing)')
    parser.add_argument('--output-dir', dest='output_dir', type=str, help='Output directory (default: ./output)')
    parser.add_argument('--concurrency', type=int, help='Number of concurrent workers (default: 4)')
    parser.add_argument('--headless', action='store_true', default=None, help='Run the browser headless')
    parser.add_argument('--base-url', dest='base_url', type=str, help='Platform root URL')
    parser.add_argument('--no-prompt', action='store_true', help='Never prompt for missing credentials')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def load_config(args) -> MirrorRunConfig:
    """defaults → config.json → environment → flags, then credential prompt."""
    config_path = args.config
    if config_path is None and Path(DEFAULT_CONFIG_FILE).exists():
        config_path = DEFAULT_CONFIG_FILE

    cfg = MirrorRunConfig.from_json(config_path) if config_path else MirrorRunConfig()
    cfg.apply_env().apply_cli_args(args)

    creds = cfg.credentials().resolve(interactive=not args.no_prompt)
    cfg.login, cfg.password = creds.username, creds.password
    cfg.validate()
    return cfg


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S',
    )
    load_dotenv()

    try:
        cfg = load_config(args)
    except ConfigError as e:
        logger.error(f"[CONFIG] {e}")
        return 1

    cfg.log_summary()

    from .runner import MirrorRunner
    try:
        MirrorRunner(cfg).run()
    except AuthenticationError as e:
        logger.error(f"[AUTH] {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted — output left partially written.")
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
