"""Command line entry point: serve the provider or validate a manifest offline."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from binocs_provider.config import settings
from binocs_provider.log_setup import configure_logging

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def _cmd_serve(args: argparse.Namespace) -> int:
    configure_logging("DEBUG" if args.debug else None)

    import uvicorn

    logger.info("Binocs provider %s listening on %s:%d", __version__, args.host, args.port)
    uvicorn.run(
        "binocs_provider.main:app",
        host=args.host,
        port=args.port,
        log_level="debug" if args.debug else "info",
    )
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    configure_logging()

    from binocs_provider.formatting import format_diagnostics
    from binocs_provider.manifest import load_manifest, validate_manifest

    try:
        manifest = load_manifest(Path(args.manifest))
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        logger.error("Invalid manifest %s: %s", args.manifest, e)
        return 1

    diagnostics = validate_manifest(manifest)
    checked = len(manifest.checks) + len(manifest.channels)
    print(format_diagnostics(diagnostics, checked))
    return 1 if diagnostics else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Binocs provider - manage Binocs checks and notification channels"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"binocs-provider {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the provider API for a host orchestrator",
    )
    serve_parser.add_argument(
        "--host",
        default=settings.PROVIDER_HOST,
        help=f"Interface to bind (default: {settings.PROVIDER_HOST})",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=settings.PROVIDER_PORT,
        help=f"Port to bind (default: {settings.PROVIDER_PORT})",
    )
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging, including every Binocs API call",
    )
    serve_parser.set_defaults(func=_cmd_serve)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate the checks and channels declared in a YAML manifest",
    )
    validate_parser.add_argument("manifest", help="Path to the YAML manifest")
    validate_parser.set_defaults(func=_cmd_validate)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
