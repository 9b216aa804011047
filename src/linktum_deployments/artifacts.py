"""Hardhat artifact parsing and contract registry for linktum-deployments library."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL
from .exceptions import ArtifactNotFoundError, ContractResolutionError, DefectiveArtifactError
from .factory import ContractFactory, encode_constructor_args
from .signers import Signer
from .types import ContractArtifact, DeploymentTarget

logger = logging.getLogger(__name__)

# Marker Hardhat leaves in bytecode for unlinked library addresses
LINK_PLACEHOLDER = "__$"


def parse_artifact(file_path: Path) -> ContractArtifact:
    """
    Parse a Hardhat artifact JSON file.

    Args:
        file_path: Path to artifacts/<source>/<Name>.json

    Returns:
        ContractArtifact with ABI and creation bytecode

    Raises:
        DefectiveArtifactError: If the file is not valid JSON, has no ABI,
            has no bytecode (interfaces, abstract contracts) or has
            unlinked library references
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DefectiveArtifactError(f"Artifact is not valid JSON: {file_path}") from e

    if not isinstance(data, dict) or not isinstance(data.get("abi"), list):
        raise DefectiveArtifactError(f"Missing ABI in artifact file: {file_path}")

    name = data.get("contractName") or file_path.stem

    bytecode = data.get("bytecode") or ""
    if isinstance(bytecode, dict):
        # solc standard-json layout: {"object": "..."}
        bytecode = bytecode.get("object") or ""
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    if bytecode == "0x":
        raise DefectiveArtifactError(
            f"Contract {name} has no creation bytecode (abstract or interface): {file_path}"
        )
    if LINK_PLACEHOLDER in bytecode:
        raise DefectiveArtifactError(
            f"Contract {name} references unlinked libraries: {file_path}"
        )

    return ContractArtifact(
        name=name,
        abi=data["abi"],
        bytecode=bytecode,
        source_name=data.get("sourceName"),
        path=file_path,
    )


def find_artifact_paths(artifacts_dir: Path, contract_name: str) -> List[Path]:
    """
    Find artifact files for a contract name.

    Accepts plain names ("TokenICO") and fully qualified names
    ("contracts/TokenICO.sol:TokenICO").

    Args:
        artifacts_dir: Hardhat artifacts directory
        contract_name: Contract name to look up

    Returns:
        Sorted list of matching artifact paths (empty if none)
    """
    if ":" in contract_name:
        source_name, name = contract_name.rsplit(":", 1)
        candidate = artifacts_dir / source_name / f"{name}.json"
        return [candidate] if candidate.is_file() else []

    return sorted(
        path
        for path in artifacts_dir.rglob(f"{contract_name}.json")
        if "build-info" not in path.relative_to(artifacts_dir).parts
    )


class ContractRegistry:
    """Maps contract names to deployable factories backed by Hardhat artifacts."""

    def __init__(
        self,
        artifacts_dir: Union[Path, str],
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.artifacts_dir = Path(artifacts_dir)
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self._artifacts: Dict[str, ContractArtifact] = {}

    def artifact(self, contract_name: str) -> ContractArtifact:
        """
        Get the artifact for a contract, loading it on first use.

        Raises:
            ArtifactNotFoundError: If the artifacts directory or file is missing
            ContractResolutionError: If the name matches several artifacts
            DefectiveArtifactError: If the artifact cannot be deployed
        """
        if contract_name in self._artifacts:
            return self._artifacts[contract_name]

        if not self.artifacts_dir.is_dir():
            raise ArtifactNotFoundError(
                f"Artifacts directory not found at {self.artifacts_dir}. "
                "Compile the contracts first (npx hardhat compile)."
            )

        paths = find_artifact_paths(self.artifacts_dir, contract_name)
        if not paths:
            raise ArtifactNotFoundError(
                f"No artifact for contract '{contract_name}' in {self.artifacts_dir}"
            )
        if len(paths) > 1:
            sources = ", ".join(str(p.parent.relative_to(self.artifacts_dir)) for p in paths)
            raise ContractResolutionError(
                f"Contract name '{contract_name}' is ambiguous ({sources}); "
                "use a fully qualified name"
            )

        artifact = parse_artifact(paths[0])
        logger.debug("Loaded artifact %s from %s", contract_name, paths[0])
        self._artifacts[contract_name] = artifact
        return artifact

    def validate(self, targets: Iterable[DeploymentTarget]) -> None:
        """
        Check every target resolves to a deployable artifact.

        Runs before any transaction is sent, so a missing or broken
        artifact fails the run with nothing deployed.
        """
        for target in targets:
            artifact = self.artifact(target.name)
            encode_constructor_args(artifact.abi, target.constructor_args, target.name)

    def factory(self, contract_name: str, signer: Signer) -> ContractFactory:
        """Get a ContractFactory for contract_name bound to signer."""
        return ContractFactory(
            self.artifact(contract_name),
            signer,
            confirmation_timeout=self.confirmation_timeout,
            poll_interval=self.poll_interval,
        )
