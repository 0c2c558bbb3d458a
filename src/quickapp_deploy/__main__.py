"""CLI entrypoint: quickapp-deploy -p <package> [-w <workspace>] [-r <bool>]."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from quickapp_deploy import __version__
from quickapp_deploy.core.config import Settings
from quickapp_deploy.core.exceptions import QuickAppDeployError, UsageError
from quickapp_deploy.deploy.models import DeploymentRequest
from quickapp_deploy.deploy.processor import DeployProcessor
from quickapp_deploy.utils.logging import bind_deploy_context, setup_logging

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_TRUE = {"true", "yes", "y", "1", "on"}
_FALSE = {"false", "no", "n", "0", "off"}


def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quickapp-deploy",
        description="Download a quick app package and unpack it into a local workspace",
    )
    parser.add_argument("-p", "--package-name", required=True, help="Package to deploy")
    parser.add_argument("-w", "--workspace", help="Workspace root (default from QUICKAPP_DEFAULT_WORKSPACE)")
    parser.add_argument(
        "-r",
        "--replace-if-exists",
        type=parse_bool,
        nargs="?",
        const=True,
        default=None,
        metavar="BOOL",
        help="Delete an existing deploy directory before extracting (default: true)",
    )
    parser.add_argument("-u", "--url", help="Fixed archive URL; skips the catalog lookup")
    parser.add_argument(
        "--strict-lookup",
        action="store_true",
        help="Fail when the catalog response carries no download URL",
    )
    parser.add_argument("--no-sign", action="store_true", help="Do not write the certificate file")
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument("--log-format", choices=["console", "json"], help="Log renderer")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: Dict[str, Any] = {}
    if args.url:
        overrides["download_url"] = args.url
    if args.strict_lookup:
        overrides["strict_lookup"] = True
    if args.no_sign:
        overrides["sign_package"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.package_name.strip():
        parser.error("--package-name cannot be empty")

    try:
        settings = _settings_from_args(args)
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(settings.log_level, settings.log_format)

    package_name = args.package_name
    try:
        request = DeploymentRequest.resolve(
            package_name,
            workspace=args.workspace,
            replace_if_exists=args.replace_if_exists,
            settings=settings,
        )
    except UsageError as e:
        print(f"failed to deploy webquickapp {package_name}: {e}", file=sys.stderr)
        return EXIT_USAGE

    bind_deploy_context(package_name=request.package_name, workspace=request.workspace_root)
    logger.info(
        "Runtime parameters",
        deploy_dir=request.deploy_directory,
        overwrite_existing=request.overwrite_existing,
    )

    try:
        result = DeployProcessor(request, settings).process()
    except QuickAppDeployError as e:
        logger.error("Deployment failed", error=str(e), code=e.code)
        print(f"failed to deploy webquickapp {package_name}: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(f"succeed to deploy webquickapp {result.package_name} in {result.deploy_directory}.")
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
