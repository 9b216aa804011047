"""Data types and dataclasses for linktum-deployments library."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class DeploymentTarget:
    """A contract to deploy, identified by its artifact name."""

    name: str  # e.g., "TokenICO"
    constructor_args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of one confirmed contract deployment."""

    target: DeploymentTarget
    address: str  # Checksummed address
    tx_confirmed: bool

    # Receipt details
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None


@dataclass(frozen=True)
class SignerContext:
    """Deployer account as observed at the start of a run."""

    address: str
    balance: int  # wei


@dataclass(frozen=True)
class NetworkInfo:
    """Network the node is connected to."""

    name: str  # e.g., "sepolia", or "unknown"
    chain_id: int


@dataclass
class DeploymentReport:
    """Aggregated outcome of a deployment run, including partial progress."""

    signer: Optional[SignerContext] = None
    network: Optional[NetworkInfo] = None
    results: List[DeploymentResult] = field(default_factory=list)
    failed_target: Optional[DeploymentTarget] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract as read from a Hardhat artifact file."""

    name: str  # e.g., "LINKTUM"
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed creation bytecode
    source_name: Optional[str] = None  # e.g., "contracts/LINKTUM.sol"
    path: Optional[Path] = None


@dataclass(frozen=True)
class DeployedContract:
    """A contract whose creation receipt has been observed."""

    name: str
    address: str  # Checksummed address
    abi: List[Dict[str, Any]]
    transaction_hash: str
    block_number: int
    gas_used: int
    receipt: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class DeploymentRecord:
    """A deployment read back from a hardhat-deploy record file."""

    address: str
    abi: List[Dict[str, Any]]
    num_deployments: int
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    args: List[Any] = field(default_factory=list)
    bytecode: Optional[str] = None
