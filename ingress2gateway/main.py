"""
Command-line interface for translating Ingress manifests to Gateway API.

This module provides the ``ingress2gateway`` console script.
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import NoReturn

from ingress2gateway.core.exceptions import (
    ConfigurationError,
    Ingress2GatewayError,
    ManifestLoadError,
    ProviderError,
)
from ingress2gateway.core.pipeline_runner import ConversionResult, PipelineRunner
from ingress2gateway.core.provider_registry import (
    ProviderConfig,
    ProviderRegistry,
    build_default_registry,
)
from ingress2gateway.plugins.ingress_nginx.config import (
    FLAG_GATEWAY_CLASS,
    FLAG_GATEWAY_MODE,
    FLAG_GATEWAY_NAME,
    FLAG_GATEWAY_NAMESPACE,
)
from ingress2gateway.plugins.ingress_nginx.provider import PROVIDER_NAME

EXIT_OK = 0
EXIT_CONFIGURATION = 1
EXIT_MANIFEST = 2
EXIT_PROVIDER = 3
EXIT_FIELD_ERRORS = 4
EXIT_BLOCKERS = 5
EXIT_FILESYSTEM = 8
EXIT_UNEXPECTED = 9


def configure_logging(debug: bool = False, verbose: bool = False) -> None:
    """Configure application logging.

    Args:
        debug: Enable debug-level logging if True.
        verbose: Enable verbose logging from providers if True.
    """
    if debug:
        level = logging.DEBUG
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        level = logging.INFO
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        level = logging.INFO
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stdout,
        force=True,  # Override existing configuration
    )

    if not verbose and not debug:
        # Quiet mode: warnings and blockers only, plus this module's summary
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger(__name__).setLevel(logging.INFO)


def show_available_providers(registry: ProviderRegistry) -> NoReturn:
    """Show available providers with their flags and exit."""
    print("Available Providers:")
    print("=" * 50)

    for name in registry.get_available_providers():
        print(f"  {name:<16} - {registry.get_description(name)}")
        for flag, help_text in registry.get_flags(name).items():
            print(f"      --{flag:<20} {help_text}")
        print()

    sys.exit(EXIT_OK)


def build_provider_config(args: argparse.Namespace) -> ProviderConfig:
    """Collect provider-specific flags from parsed arguments."""
    flags = {
        FLAG_GATEWAY_MODE: args.gateway_mode,
        FLAG_GATEWAY_NAMESPACE: args.gateway_namespace,
        FLAG_GATEWAY_NAME: args.gateway_name,
        FLAG_GATEWAY_CLASS: args.gateway_class,
    }
    return ProviderConfig(
        ingress_class=args.ingress_class,
        provider_specific_flags={
            PROVIDER_NAME: {k: v for k, v in flags.items() if v}
        },
    )


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description=(
            "Translate ingress-nginx Ingress manifests into Gateway API resources "
            "and Istio EnvoyFilters"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert onto the shared platform Gateway
  ingress2gateway -i ingresses.yaml output/gateway.yaml

  # One Gateway per application namespace
  ingress2gateway -i ingresses.yaml --gateway-mode per-namespace output/gw.yaml

  # Fail the run when something needs manual migration
  ingress2gateway -i ingresses.yaml --fail-on-blockers output/gateway.yaml

Exit codes:
  0 success, 1 configuration error, 2 unreadable manifest, 3 provider error,
  4 annotation errors, 5 blockers (with --fail-on-blockers),
  8 filesystem error, 9 unexpected error
        """,
    )

    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        help="YAML or JSON manifest holding Ingress and Service objects",
    )
    parser.add_argument(
        "output_file",
        nargs="?",  # Optional for --list-providers
        type=Path,
        help="Path where the generated YAML manifests will be saved",
    )
    parser.add_argument(
        "--provider",
        default=PROVIDER_NAME,
        help=f"Provider to convert with (default: {PROVIDER_NAME})",
    )
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="List available providers and exit",
    )
    parser.add_argument(
        "--ingress-class",
        help="Only convert Ingresses of this class (default: nginx)",
    )
    parser.add_argument(
        f"--{FLAG_GATEWAY_MODE}",
        dest="gateway_mode",
        help="'centralized' (default) or 'per-namespace'",
    )
    parser.add_argument(
        f"--{FLAG_GATEWAY_NAMESPACE}",
        dest="gateway_namespace",
        help="Namespace of the shared Gateway (default: istio-system)",
    )
    parser.add_argument(
        f"--{FLAG_GATEWAY_NAME}",
        dest="gateway_name",
        help="Name of the shared Gateway (default: platform-gateway)",
    )
    parser.add_argument(
        f"--{FLAG_GATEWAY_CLASS}",
        dest="gateway_class",
        help="GatewayClass of per-namespace Gateways (default: istio)",
    )
    parser.add_argument(
        "--fail-on-blockers",
        action="store_true",
        help="Exit with a non-zero code when migration blockers are reported",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging for detailed output"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (shows every pass and notification)",
    )

    args = parser.parse_args(argv)

    if not args.list_providers:
        if not args.input_file:
            parser.error("--input-file is required")
        if not args.output_file:
            parser.error("Output file is required")
    return args


def report(result: ConversionResult, logger: logging.Logger) -> None:
    resources = result.resources
    logger.info(
        f"Generated {len(resources.gateways)} Gateways, "
        f"{len(resources.http_routes)} HTTPRoutes, "
        f"{len(resources.backend_tls_policies)} BackendTLSPolicies, "
        f"{len(resources.reference_grants)} ReferenceGrants, "
        f"{len(resources.gateway_extensions)} EnvoyFilters"
    )
    for error in result.errors:
        logger.error(f"Annotation error: {error}")
    counts = Counter(n.severity.value for n in result.notifications)
    if counts:
        summary = ", ".join(f"{count} {sev}" for sev, count in sorted(counts.items()))
        logger.info(f"Notifications: {summary}")


def run_conversion(
    args: argparse.Namespace, registry: ProviderRegistry | None = None
) -> NoReturn:
    """Execute one conversion and exit with the matching code.

    Raises:
        SystemExit: Always exits with appropriate code (0 for success, >0 for errors).
    """
    configure_logging(args.debug, args.verbose)
    logger = logging.getLogger(__name__)
    registry = registry or build_default_registry()

    try:
        runner = PipelineRunner(registry, build_provider_config(args))
        result = runner.execute(args.provider, args.input_file, args.output_file)
        report(result, logger)
        logger.info(f"Manifests saved to: {args.output_file}")

        if result.errors:
            sys.exit(EXIT_FIELD_ERRORS)
        if args.fail_on_blockers and result.blockers:
            logger.error(f"{len(result.blockers)} migration blockers reported")
            sys.exit(EXIT_BLOCKERS)
        sys.exit(EXIT_OK)

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.info(f"Suggestion: {e.get_recovery_hint()}")
        sys.exit(EXIT_CONFIGURATION)
    except ManifestLoadError as e:
        logger.error(f"Manifest error: {e}")
        logger.info(f"Suggestion: {e.get_recovery_hint()}")
        sys.exit(EXIT_MANIFEST)
    except (ProviderError, Ingress2GatewayError) as e:
        logger.error(f"Provider error: {e}")
        sys.exit(EXIT_PROVIDER)
    except OSError as e:
        logger.error(f"File system error: {e}")
        sys.exit(EXIT_FILESYSTEM)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            logger.exception("Full traceback:")
        sys.exit(EXIT_UNEXPECTED)


def main(argv: list[str] | None = None) -> NoReturn:
    args = parse_arguments(argv)
    registry = build_default_registry()
    if args.list_providers:
        show_available_providers(registry)
    run_conversion(args, registry)


if __name__ == "__main__":
    main()
