"""Custom exception classes for linktum-deployments library."""

from typing import Any, Optional


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class DeploymentEnvironmentError(DeploymentError, RuntimeError):
    """Raised when the execution environment cannot support a deployment."""

    pass


class ConfigurationError(DeploymentEnvironmentError, ValueError):
    """Raised when a configuration value is missing or malformed."""

    pass


class SignerNotFoundError(DeploymentEnvironmentError, LookupError):
    """Raised when no signer account can be resolved."""

    pass


class NodeConnectionError(DeploymentEnvironmentError, ConnectionError):
    """Raised when the blockchain node cannot be reached."""

    pass


class RPCError(DeploymentError, RuntimeError):
    """Raised when the node answers a JSON-RPC call with an error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data

    def __str__(self) -> str:
        message = super().__str__()
        if self.code is not None:
            message = f"{message} (code {self.code})"
        if self.data is not None:
            message = f"{message}: {self.data}"
        return message


class ContractResolutionError(DeploymentError, LookupError):
    """Raised when a contract factory cannot be resolved."""

    pass


class ArtifactNotFoundError(ContractResolutionError, FileNotFoundError):
    """Raised when no compiled artifact exists for a contract name."""

    pass


class DefectiveArtifactError(ContractResolutionError, ValueError):
    """Raised when an artifact file lacks a deployable ABI or bytecode."""

    pass


class TransactionError(DeploymentError, RuntimeError):
    """Raised when a deployment transaction is rejected by the node."""

    pass


class TransactionRevertedError(TransactionError):
    """Raised when a deployment transaction was mined with a failed status."""

    pass


class ConfirmationTimeoutError(TransactionError, TimeoutError):
    """Raised when no receipt is observed before the confirmation timeout."""

    pass


class DefectiveRecordError(DeploymentError, ValueError):
    """Raised when an existing deployment record file cannot be read."""

    pass


class UnknownDeploymentError(DeploymentError):
    """Wraps any non-library exception surfacing during a deployment run."""

    pass
