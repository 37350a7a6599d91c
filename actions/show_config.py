#!/usr/bin/env python3
"""
Resolve the startup configuration and print it as JSON.

**Purpose**: Lets an operator see exactly what the application would start
with, and which source it came from, without starting the server. Useful for
checking that CONFIG_SERVICE_URL / CONFIG_ACCESS_TOKEN work or that a .env
file is being picked up.

**Usage**:
    python actions/show_config.py
    python actions/show_config.py --env-file config/dev.env
    python actions/show_config.py --show-secrets

**Example output**:
    $ python actions/show_config.py
    {
      "alpaca_api_key": "****WXYZ",
      "alpaca_base_url": "https://paper-api.alpaca.markets",
      ...
      "source": "local"
    }

Credentials are masked unless --show-secrets is given. Fallback warnings from
the loader are printed to stderr.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.local_file import DEFAULT_ENV_FILE
from src.orchestration.loader import ConfigLoader
from src.utils.logging_setup import configure_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Resolve prophet_trader startup configuration and print it as JSON",
        epilog="""
Examples:
  # Resolve using ./.env as the local fallback
  python actions/show_config.py

  # Use a different env file
  python actions/show_config.py --env-file config/dev.env
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        type=str,
        help=f"Local env file used when the config service is not used (default: {DEFAULT_ENV_FILE})",
        default=DEFAULT_ENV_FILE,
    )

    parser.add_argument(
        "--show-secrets",
        action="store_true",
        help="Print credentials in clear text (default: masked)",
    )

    return parser.parse_args(argv)


def render_config(config, show_secrets: bool = False) -> str:
    """Render an AppConfig as indented JSON."""
    if show_secrets:
        data = asdict(config)
        data["source"] = config.source.value
    else:
        data = config.redacted()
    return json.dumps(data, indent=2, sort_keys=True)


def main(argv=None) -> int:
    """
    Main entry point for the script.

    **Exit codes**:
      - 0: Always. Configuration resolution cannot fail; problems show up as
           warnings on stderr.
    """
    args = parse_args(argv)

    loader = ConfigLoader(env_file=args.env_file)
    config = loader.load()
    configure_logging(config)

    print(render_config(config, show_secrets=args.show_secrets))
    return 0


if __name__ == "__main__":
    sys.exit(main())
