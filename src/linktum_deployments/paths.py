"""Path management utilities for linktum-deployments library."""

from pathlib import Path
from typing import Optional, Union

from .constants import UNKNOWN_NETWORK
from .types import NetworkInfo


def get_default_artifacts_dir() -> Path:
    """
    Get default Hardhat artifacts directory.

    Returns:
        Path to ./artifacts
    """
    return Path.cwd() / "artifacts"


def get_record_paths(
    deployments_root: Union[Path, str], network: str, contract_name: str
) -> tuple[Path, Path]:
    """
    Get deployment record file paths for a contract on a network.

    Args:
        deployments_root: Root of the deployment records tree
        network: Network name (e.g., "sepolia")
        contract_name: Contract name (e.g., "TokenICO")

    Returns:
        Tuple of (record_path, chain_id_path)
    """
    network_dir = Path(deployments_root).absolute() / network

    record_path = network_dir / f"{contract_name}.json"
    chain_id_path = network_dir / ".chainId"

    return (record_path, chain_id_path)


def get_network_dir_name(network: NetworkInfo) -> str:
    """
    Get the records directory name for a network.

    Named networks use their name; chains without one get "chain-<id>" so
    records for different unnamed chains never share a directory.
    """
    if network.name == UNKNOWN_NETWORK:
        return f"chain-{network.chain_id}"
    return network.name


def resolve_dir(value: Optional[Union[Path, str]]) -> Optional[Path]:
    """Return an absolute Path for value, or None when value is empty."""
    if not value:
        return None
    return Path(value).expanduser().absolute()
