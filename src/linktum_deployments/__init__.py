"""
linktum-deployments: deploys the TokenICO and LINKTUM contracts to an EVM network
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import ContractRegistry
from .config import DeployConfig
from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationTimeoutError,
    ContractResolutionError,
    DefectiveArtifactError,
    DefectiveRecordError,
    DeploymentEnvironmentError,
    DeploymentError,
    NodeConnectionError,
    RPCError,
    SignerNotFoundError,
    TransactionError,
    TransactionRevertedError,
    UnknownDeploymentError,
)
from .sequencer import DeploymentSequencer
from .types import (
    DeploymentRecord,
    DeploymentReport,
    DeploymentResult,
    DeploymentTarget,
    NetworkInfo,
    SignerContext,
)

try:
    __version__ = version("linktum-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeploymentSequencer",
    "ContractRegistry",
    "DeployConfig",
    "DeploymentTarget",
    "DeploymentResult",
    "DeploymentReport",
    "DeploymentRecord",
    "SignerContext",
    "NetworkInfo",
    "DeploymentError",
    "DeploymentEnvironmentError",
    "ConfigurationError",
    "SignerNotFoundError",
    "NodeConnectionError",
    "RPCError",
    "ContractResolutionError",
    "ArtifactNotFoundError",
    "DefectiveArtifactError",
    "DefectiveRecordError",
    "TransactionError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
    "UnknownDeploymentError",
]
