"""Command-line entry point for provisioning a Nexus instance.

Usage:
    nexus-init provision              # Provision using ./config.json
    nexus-init provision --config deploy/nexus.yaml --override prod.yaml
    nexus-init check                  # Validate the configuration only

Environment variables:
    NEXUS_INIT_CONFIG_PATH - Extra directory searched for configuration files
    NEXUS_INIT_CONFIG_FILE - Override document layered on the base document
    NEXUS_INIT_LOG_LEVEL   - Log level (default: INFO)
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from . import __version__
from .config import load_config
from .context import LOGGER_NAME, ProvisioningContext
from .errors import NexusConfigError, NexusInitError
from .logging import (
    LOG_LEVEL_ENV,
    configure_logging,
    get_logger,
    log_exception,
    log_info,
    log_warning,
)
from .provisioning import provision as run_provisioning
from .readiness import DEFAULT_PROBE_INTERVAL_S

app = App(
    name="nexus-init",
    help="Provision a Nexus repository manager into its configured state",
    version=__version__,
)


@app.command
def provision(
    *,
    config: Path | None = None,
    override: Path | None = None,
    log_level: typ.Annotated[str, Parameter(env_var=LOG_LEVEL_ENV)] = "INFO",
    probe_interval: float = DEFAULT_PROBE_INTERVAL_S,
) -> int:
    """Wait for Nexus, then reconcile blob stores, realms and repositories.

    Safe to run any number of times; resources that already exist are left
    alone and group members are only ever added.

    Args:
        config: Base configuration document (default: config.json/.yaml).
        override: Document overlaid on the base configuration.
        log_level: Log level for the run.
        probe_interval: Seconds between readiness probes.

    Returns:
        Exit code (0 for success, 1 for any provisioning failure).

    """
    normalized, invalid = configure_logging(log_level)
    logger = get_logger(LOGGER_NAME)
    if invalid:
        log_warning(
            logger, "Invalid log level %r, falling back to %s", log_level, normalized
        )

    try:
        nexus_config = load_config(config, override=override)
    except NexusConfigError as exc:
        log_exception(logger, "Configuration is invalid", exc)
        return 1

    context = ProvisioningContext.from_config(nexus_config, logger=logger)
    try:
        run_provisioning(context, nexus_config, probe_interval=probe_interval)
    except NexusInitError as exc:
        log_exception(logger, f"Provisioning failed: {exc}", exc)
        return 1
    finally:
        context.close()

    log_info(logger, "Nexus at %s is provisioned", nexus_config.base_url)
    return 0


@app.command
def check(
    *,
    config: Path | None = None,
    override: Path | None = None,
) -> int:
    """Load and validate the configuration without contacting Nexus.

    Args:
        config: Base configuration document (default: config.json/.yaml).
        override: Document overlaid on the base configuration.

    Returns:
        Exit code (0 when valid, 1 otherwise).

    """
    try:
        nexus_config = load_config(config, override=override)
    except NexusConfigError as exc:
        print("Configuration is invalid:")
        for issue in exc.issues:
            print(f"  - {issue}")
        return 1

    print(
        f"configuration for {nexus_config.base_url} is valid "
        f"({len(nexus_config.blob_stores)} blob stores / "
        f"{len(nexus_config.docker_group)} proxies / "
        f"raw repository {'on' if nexus_config.raw_repo else 'off'})"
    )
    return 0


def main() -> int:
    """Entry point for the ``nexus-init`` console script."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
