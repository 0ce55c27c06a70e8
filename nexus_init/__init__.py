"""Idempotent provisioning of Nexus repository manager instances."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import NexusConfig, load_config
from .context import ProvisioningContext
from .credentials import RotationOutcome, rotate_default_password
from .errors import (
    NexusAPIError,
    NexusConfigError,
    NexusInitError,
    NexusResponseShapeError,
    NexusTransportError,
    ReconciliationDepthError,
)
from .provisioning import ProvisioningReport, provision
from .readiness import wait_until_ready
from .reconciler import ReconcileAction, ReconcileResult, Reconciler

__all__ = [
    "NexusAPIError",
    "NexusConfig",
    "NexusConfigError",
    "NexusInitError",
    "NexusResponseShapeError",
    "NexusTransportError",
    "ProvisioningContext",
    "ProvisioningReport",
    "ReconcileAction",
    "ReconcileResult",
    "Reconciler",
    "ReconciliationDepthError",
    "RotationOutcome",
    "__version__",
    "load_config",
    "provision",
    "rotate_default_password",
    "wait_until_ready",
]
