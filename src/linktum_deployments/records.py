"""hardhat-deploy compatible deployment records for linktum-deployments library."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from .exceptions import DefectiveRecordError
from .paths import get_network_dir_name, get_record_paths
from .types import ContractArtifact, DeployedContract, DeploymentRecord, NetworkInfo

logger = logging.getLogger(__name__)


def _json_arg(value: Any) -> Any:
    """Convert a constructor argument to a JSON-safe value."""
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_arg(v) for v in value]
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > 2**53:
        # Large integers as strings, the way hardhat-deploy stores BigNumbers
        return str(value)
    return value


def read_deployment_record(file_path: Path) -> DeploymentRecord:
    """
    Read a hardhat-deploy record file.

    Args:
        file_path: Path to deployments/<network>/<Name>.json

    Returns:
        DeploymentRecord for the stored deployment

    Raises:
        FileNotFoundError: If there is no record at file_path
        DefectiveRecordError: If the file is not a readable record
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DefectiveRecordError(f"Deployment record is not valid JSON: {file_path}") from e

    if not isinstance(data, dict) or not isinstance(data.get("address"), str):
        raise DefectiveRecordError(f"Deployment record has no address: {file_path}")

    count = data.get("numDeployments", 1)
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise DefectiveRecordError(
            f"Deployment record has invalid numDeployments {count!r}: {file_path}"
        )

    receipt = data.get("receipt")
    block_number: Optional[int] = None
    if isinstance(receipt, dict):
        block_number = receipt.get("blockNumber")

    return DeploymentRecord(
        address=data["address"],
        abi=data.get("abi") or [],
        num_deployments=count,
        transaction_hash=data.get("transactionHash"),
        block_number=block_number,
        args=data.get("args") or [],
        bytecode=data.get("bytecode"),
    )


def _previous_deployments(record_path: Path) -> int:
    """Count of deployments already recorded at record_path (0 if none or unreadable)."""
    try:
        return read_deployment_record(record_path).num_deployments
    except FileNotFoundError:
        return 0
    except DefectiveRecordError as e:
        logger.warning("Replacing unreadable deployment record: %s", e)
        return 0


def write_deployment_record(
    deployments_root: Union[Path, str],
    network: NetworkInfo,
    contract: DeployedContract,
    artifact: ContractArtifact,
    args: Sequence[Any] = (),
) -> Path:
    """
    Write a deployment record in the hardhat-deploy layout.

    Args:
        deployments_root: Root of the records tree (e.g., ./deployments)
        network: Network the contract was deployed to
        contract: Confirmed deployment
        artifact: Artifact the contract was deployed from
        args: Constructor arguments

    Returns:
        Path of the written record

    Creates parent directories if they don't exist. An existing record for
    the same contract is replaced and its deployment count carried forward;
    an unreadable one is replaced as if it were absent.
    """
    record_path, chain_id_path = get_record_paths(
        deployments_root, get_network_dir_name(network), contract.name
    )

    record: Dict[str, Any] = {
        "address": contract.address,
        "abi": contract.abi,
        "transactionHash": contract.transaction_hash,
        "receipt": {
            "blockNumber": contract.block_number,
            "gasUsed": str(contract.gas_used),
            "transactionHash": contract.transaction_hash,
            "contractAddress": contract.address,
        },
        "args": [_json_arg(a) for a in args],
        "numDeployments": _previous_deployments(record_path) + 1,
        "bytecode": artifact.bytecode,
    }

    record_path.parent.mkdir(parents=True, exist_ok=True)
    chain_id_path.write_text(str(network.chain_id))
    with open(record_path, "w") as f:
        json.dump(record, f, indent=2)

    return record_path
