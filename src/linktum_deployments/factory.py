"""Contract factories and deployment handles for linktum-deployments library."""

import logging
import time
from typing import Any, Callable, Dict, List, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import to_checksum_address

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL
from .exceptions import (
    ConfirmationTimeoutError,
    ContractResolutionError,
    RPCError,
    TransactionError,
    TransactionRevertedError,
)
from .types import ContractArtifact, DeployedContract

logger = logging.getLogger(__name__)


def abi_type(param: Dict[str, Any]) -> str:
    """
    Get the canonical type string for an ABI parameter.

    Tuples are expanded from their components, e.g. "tuple[]" with two
    uint256 components becomes "(uint256,uint256)[]".
    """
    type_str = param["type"]
    if not type_str.startswith("tuple"):
        return type_str
    components = ",".join(abi_type(c) for c in param.get("components", []))
    return f"({components}){type_str[len('tuple'):]}"


def encode_constructor_args(
    abi: List[Dict[str, Any]], args: Sequence[Any], contract_name: str = "contract"
) -> bytes:
    """
    ABI-encode constructor arguments.

    Args:
        abi: Contract ABI
        args: Constructor arguments in declaration order
        contract_name: Used in error messages

    Returns:
        Encoded arguments (empty when the constructor takes none)

    Raises:
        ContractResolutionError: If the argument count or types do not match
    """
    inputs: List[Dict[str, Any]] = []
    for item in abi:
        if item.get("type") == "constructor":
            inputs = item.get("inputs", [])
            break

    if len(args) != len(inputs):
        raise ContractResolutionError(
            f"{contract_name} constructor expects {len(inputs)} argument(s), "
            f"got {len(args)}"
        )
    if not inputs:
        return b""

    types = [abi_type(i) for i in inputs]
    try:
        return encode(types, list(args))
    except (EncodingError, TypeError, ValueError) as e:
        raise ContractResolutionError(
            f"Cannot encode {contract_name} constructor arguments as {types}: {e}"
        ) from e


class PendingDeployment:
    """A submitted contract-creation transaction awaiting its receipt."""

    def __init__(
        self,
        artifact: ContractArtifact,
        transaction_hash: str,
        rpc,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.artifact = artifact
        self.transaction_hash = transaction_hash
        self.rpc = rpc
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def wait_for_receipt(self) -> Dict[str, Any]:
        """
        Poll the node until the transaction receipt appears.

        Raises:
            ConfirmationTimeoutError: If no receipt within confirmation_timeout
        """
        deadline = self._clock() + self.confirmation_timeout
        while True:
            receipt = self.rpc.get_transaction_receipt(self.transaction_hash)
            if receipt is not None:
                return receipt
            if self._clock() >= deadline:
                raise ConfirmationTimeoutError(
                    f"No receipt for {self.artifact.name} deployment "
                    f"{self.transaction_hash} after {self.confirmation_timeout}s"
                )
            logger.debug("Waiting for receipt of %s", self.transaction_hash)
            self._sleep(self.poll_interval)

    def deployed(self) -> DeployedContract:
        """
        Wait for confirmation and return the deployed contract.

        Raises:
            ConfirmationTimeoutError: If the receipt never appears
            TransactionRevertedError: If the transaction was mined but failed
            TransactionError: If the receipt carries no contract address
        """
        receipt = self.wait_for_receipt()

        if int(receipt.get("status", "0x1"), 16) != 1:
            raise TransactionRevertedError(
                f"{self.artifact.name} deployment {self.transaction_hash} reverted "
                f"in block {int(receipt['blockNumber'], 16)}"
            )

        address = receipt.get("contractAddress")
        if not address:
            raise TransactionError(
                f"Receipt for {self.transaction_hash} has no contract address"
            )

        return DeployedContract(
            name=self.artifact.name,
            address=to_checksum_address(address),
            abi=self.artifact.abi,
            transaction_hash=self.transaction_hash,
            block_number=int(receipt["blockNumber"], 16),
            gas_used=int(receipt.get("gasUsed", "0x0"), 16),
            receipt=receipt,
        )


class ContractFactory:
    """Builds and submits creation transactions for one contract artifact."""

    def __init__(
        self,
        artifact: ContractArtifact,
        signer,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.artifact = artifact
        self.signer = signer
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

    def deployment_data(self, *args: Any) -> str:
        """Get creation bytecode with encoded constructor arguments appended."""
        encoded = encode_constructor_args(self.artifact.abi, args, self.artifact.name)
        return self.artifact.bytecode + encoded.hex()

    def deploy(self, *args: Any) -> PendingDeployment:
        """
        Submit the creation transaction.

        Raises:
            ContractResolutionError: If args do not match the constructor
            TransactionError: If the node rejects the transaction
        """
        data = self.deployment_data(*args)
        try:
            tx_hash = self.signer.send_transaction({"data": data})
        except RPCError as e:
            raise TransactionError(
                f"{self.artifact.name} deployment rejected: {e}"
            ) from e

        logger.info("Submitted %s deployment in %s", self.artifact.name, tx_hash)
        return PendingDeployment(
            self.artifact,
            tx_hash,
            self.signer.rpc,
            confirmation_timeout=self.confirmation_timeout,
            poll_interval=self.poll_interval,
        )
