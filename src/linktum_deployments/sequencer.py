"""Main API for linktum-deployments library."""

import logging
from typing import Callable, Iterable, List, Optional

from .artifacts import ContractRegistry
from .config import DeployConfig
from .exceptions import DeploymentError, UnknownDeploymentError
from .records import write_deployment_record
from .rpc import JsonRpcClient
from .signers import Signer, resolve_signer
from .types import DeploymentReport, DeploymentResult, DeploymentTarget, SignerContext

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 24


class DeploymentSequencer:
    """Deploys contracts one at a time, in declared order."""

    def __init__(
        self,
        config: DeployConfig,
        rpc: Optional[JsonRpcClient] = None,
        registry: Optional[ContractRegistry] = None,
        signer_resolver: Callable[[DeployConfig, JsonRpcClient], Signer] = resolve_signer,
        emit: Callable[[str], None] = print,
    ):
        """
        Initialize the sequencer.

        Args:
            config: Deployment configuration
            rpc: Node client (defaults to one built from config.rpc_url, closed by close())
            registry: Contract registry (defaults to config.artifacts_dir)
            signer_resolver: Function returning the deployer signer
            emit: Receives each line of progress output
        """
        self.config = config
        self._owns_rpc = rpc is None
        self.rpc = rpc or JsonRpcClient(config.rpc_url, timeout=config.request_timeout)
        self.registry = registry or ContractRegistry(
            config.artifacts_dir,
            confirmation_timeout=config.confirmation_timeout,
            poll_interval=config.poll_interval,
        )
        self._resolve_signer = signer_resolver
        self._emit = emit

    def close(self) -> None:
        """Close the node client if this sequencer created it."""
        if self._owns_rpc:
            self.rpc.close()

    def __enter__(self) -> "DeploymentSequencer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def run(self, targets: Iterable[DeploymentTarget]) -> List[DeploymentResult]:
        """
        Deploy every target in order.

        Args:
            targets: Contracts to deploy, in deployment order

        Returns:
            One DeploymentResult per target, in the same order

        Raises:
            DeploymentError: On the first failure; later targets are not deployed
        """
        report = DeploymentReport()
        self._sequence(targets, report)
        return report.results

    def execute(self, targets: Iterable[DeploymentTarget]) -> DeploymentReport:
        """
        Deploy every target in order, collecting the outcome instead of raising.

        The returned report holds every result confirmed before a failure,
        the target that failed (None if the failure preceded all deployments)
        and the error.
        """
        report = DeploymentReport()
        try:
            self._sequence(targets, report)
        except DeploymentError as e:
            logger.debug("Deployment run failed", exc_info=True)
            report.error = e
        return report

    def _sequence(self, targets: Iterable[DeploymentTarget], report: DeploymentReport) -> None:
        try:
            self._deploy_all(tuple(targets), report)
        except DeploymentError:
            raise
        except Exception as e:
            raise UnknownDeploymentError(f"{type(e).__name__}: {e}") from e

    def _deploy_all(self, targets: tuple, report: DeploymentReport) -> None:
        # Fail before sending anything if an artifact is missing
        self.registry.validate(targets)

        signer = self._resolve_signer(self.config, self.rpc)
        self._emit(f"Deploying contracts with the account: {signer.address}")

        balance = signer.get_balance()
        report.signer = SignerContext(address=signer.address, balance=balance)
        self._emit(f"Account balance: {balance}")

        network = self.rpc.get_network()
        report.network = network
        self._emit(f"Network: {network.name}")

        for target in targets:
            report.failed_target = target
            self._deploy_one(target, signer, report)

    def _deploy_one(
        self, target: DeploymentTarget, signer: Signer, report: DeploymentReport
    ) -> None:
        self._emit(f"\nDeploying {target.name} contract...")

        factory = self.registry.factory(target.name, signer)
        pending = factory.deploy(*target.constructor_args)
        contract = pending.deployed()

        result = DeploymentResult(
            target=target,
            address=contract.address,
            tx_confirmed=True,
            transaction_hash=contract.transaction_hash,
            block_number=contract.block_number,
            gas_used=contract.gas_used,
        )
        report.results.append(result)
        report.failed_target = None

        self._emit("\nDeployment successful!")
        self._emit(SEPARATOR)
        self._emit(f"{target.name} contract address: {contract.address}")
        self._emit(f"\nPublic owner address: {signer.address}")

        if self.config.deployments_dir is not None:
            record_path = write_deployment_record(
                self.config.deployments_dir,
                report.network,
                contract,
                factory.artifact,
                target.constructor_args,
            )
            logger.info("Wrote deployment record %s", record_path)
