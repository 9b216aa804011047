"""Unit tests for Hardhat artifact parsing and the contract registry."""

import json
from pathlib import Path

import pytest

from linktum_deployments.artifacts import ContractRegistry, find_artifact_paths, parse_artifact
from linktum_deployments.exceptions import (
    ArtifactNotFoundError,
    ContractResolutionError,
    DefectiveArtifactError,
)
from linktum_deployments.factory import ContractFactory
from linktum_deployments.types import DeploymentTarget

from conftest import BYTECODE, write_artifact


class TestParseArtifact:
    """Test the parse_artifact function."""

    def test_parses_hardhat_artifact(self, artifacts_dir: Path):
        path = artifacts_dir / "contracts" / "TokenICO.sol" / "TokenICO.json"

        artifact = parse_artifact(path)

        assert artifact.name == "TokenICO"
        assert artifact.bytecode == BYTECODE
        assert artifact.source_name == "contracts/TokenICO.sol"
        assert artifact.abi[0]["type"] == "constructor"
        assert artifact.path == path

    def test_adds_missing_hex_prefix(self, tmp_path: Path):
        path = write_artifact(tmp_path, "Bare", bytecode=BYTECODE[2:])

        assert parse_artifact(path).bytecode == BYTECODE

    def test_accepts_standard_json_bytecode_object(self, tmp_path: Path):
        path = tmp_path / "Std.json"
        path.write_text(json.dumps({"abi": [], "bytecode": {"object": BYTECODE[2:]}}))

        artifact = parse_artifact(path)

        assert artifact.name == "Std"  # from filename
        assert artifact.bytecode == BYTECODE

    def test_interface_without_bytecode_is_defective(self, tmp_path: Path):
        path = write_artifact(tmp_path, "IERC20", bytecode="0x")

        with pytest.raises(DefectiveArtifactError) as exc_info:
            parse_artifact(path)

        assert "IERC20" in str(exc_info.value)

    def test_missing_abi_is_defective(self, tmp_path: Path):
        path = tmp_path / "NoAbi.json"
        path.write_text(json.dumps({"bytecode": BYTECODE}))

        with pytest.raises(DefectiveArtifactError):
            parse_artifact(path)

    def test_unlinked_library_is_defective(self, tmp_path: Path):
        path = write_artifact(
            tmp_path, "Linked", bytecode="0x6080__$0123456789abcdef0123456789abcdef01$__6080"
        )

        with pytest.raises(DefectiveArtifactError):
            parse_artifact(path)

    def test_corrupted_json_is_defective(self, tmp_path: Path):
        path = tmp_path / "Broken.json"
        path.write_text("{ invalid json")

        with pytest.raises(DefectiveArtifactError):
            parse_artifact(path)

    def test_non_utf8_file_is_defective(self, tmp_path: Path):
        path = tmp_path / "Binary.json"
        path.write_bytes(b"\xff\xfe\x00\x01")

        with pytest.raises(DefectiveArtifactError):
            parse_artifact(path)


class TestFindArtifactPaths:
    """Test the find_artifact_paths function."""

    def test_finds_by_plain_name(self, artifacts_dir: Path):
        paths = find_artifact_paths(artifacts_dir, "LINKTUM")

        assert paths == [artifacts_dir / "contracts" / "LINKTUM.sol" / "LINKTUM.json"]

    def test_ignores_debug_files(self, artifacts_dir: Path):
        (artifacts_dir / "contracts" / "LINKTUM.sol" / "LINKTUM.dbg.json").write_text("{}")

        assert len(find_artifact_paths(artifacts_dir, "LINKTUM")) == 1

    def test_ignores_build_info(self, artifacts_dir: Path):
        build_info = artifacts_dir / "build-info"
        build_info.mkdir()
        (build_info / "LINKTUM.json").write_text("{}")

        assert len(find_artifact_paths(artifacts_dir, "LINKTUM")) == 1

    def test_finds_by_fully_qualified_name(self, artifacts_dir: Path):
        paths = find_artifact_paths(artifacts_dir, "contracts/TokenICO.sol:TokenICO")

        assert paths == [artifacts_dir / "contracts" / "TokenICO.sol" / "TokenICO.json"]

    def test_missing_fully_qualified_name(self, artifacts_dir: Path):
        assert find_artifact_paths(artifacts_dir, "contracts/Other.sol:TokenICO") == []

    def test_unknown_name(self, artifacts_dir: Path):
        assert find_artifact_paths(artifacts_dir, "Unknown") == []


class TestContractRegistry:
    """Test ContractRegistry lookups and validation."""

    def test_artifact_lookup(self, artifacts_dir: Path):
        registry = ContractRegistry(artifacts_dir)

        assert registry.artifact("TokenICO").name == "TokenICO"

    def test_artifact_cached(self, artifacts_dir: Path):
        registry = ContractRegistry(artifacts_dir)

        assert registry.artifact("TokenICO") is registry.artifact("TokenICO")

    def test_missing_artifacts_dir(self, tmp_path: Path):
        registry = ContractRegistry(tmp_path / "artifacts")

        with pytest.raises(ArtifactNotFoundError) as exc_info:
            registry.artifact("TokenICO")

        assert "compile" in str(exc_info.value)

    def test_missing_contract(self, artifacts_dir: Path):
        with pytest.raises(ArtifactNotFoundError) as exc_info:
            ContractRegistry(artifacts_dir).artifact("Crowdsale")

        assert "Crowdsale" in str(exc_info.value)

    def test_ambiguous_name(self, artifacts_dir: Path):
        write_artifact(artifacts_dir, "LINKTUM", source="contracts/legacy/LINKTUM.sol")

        with pytest.raises(ContractResolutionError) as exc_info:
            ContractRegistry(artifacts_dir).artifact("LINKTUM")

        assert "ambiguous" in str(exc_info.value)

    def test_ambiguity_resolved_by_qualified_name(self, artifacts_dir: Path):
        write_artifact(artifacts_dir, "LINKTUM", source="contracts/legacy/LINKTUM.sol")

        artifact = ContractRegistry(artifacts_dir).artifact("contracts/legacy/LINKTUM.sol:LINKTUM")

        assert artifact.source_name == "contracts/legacy/LINKTUM.sol"

    def test_validate_accepts_known_targets(self, artifacts_dir: Path):
        ContractRegistry(artifacts_dir).validate(
            [DeploymentTarget("TokenICO"), DeploymentTarget("LINKTUM")]
        )

    def test_validate_rejects_missing_target(self, artifacts_dir: Path):
        with pytest.raises(ArtifactNotFoundError):
            ContractRegistry(artifacts_dir).validate(
                [DeploymentTarget("TokenICO"), DeploymentTarget("Missing")]
            )

    def test_validate_rejects_wrong_argument_count(self, artifacts_dir: Path):
        with pytest.raises(ContractResolutionError):
            ContractRegistry(artifacts_dir).validate([DeploymentTarget("TokenICO", (1,))])

    def test_factory_carries_wait_settings(self, artifacts_dir: Path):
        registry = ContractRegistry(artifacts_dir, confirmation_timeout=5, poll_interval=0.1)

        factory = registry.factory("LINKTUM", signer=object())

        assert isinstance(factory, ContractFactory)
        assert factory.artifact.name == "LINKTUM"
        assert factory.confirmation_timeout == 5
        assert factory.poll_interval == 0.1
