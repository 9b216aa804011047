"""Configuration constants for linktum-deployments library."""

from .types import DeploymentTarget

# Contracts deployed by the CLI, in deployment order
DEFAULT_TARGETS = (
    DeploymentTarget("TokenICO"),
    DeploymentTarget("LINKTUM"),
)

# Network names by chain id, following the names ethers.js reports
CHAIN_NAMES = {
    1: "homestead",
    5: "goerli",
    10: "optimism",
    56: "bnb",
    100: "gnosis",
    137: "matic",
    8453: "base",
    17000: "holesky",
    31337: "hardhat",
    42161: "arbitrum",
    80001: "maticmum",
    11155111: "sepolia",
}

UNKNOWN_NETWORK = "unknown"

# Environment variables read by DeployConfig.from_env
ENV_RPC_URL = "RPC_URL"
ENV_PRIVATE_KEY = "PRIVATE_KEY"
ENV_ARTIFACTS_DIR = "ARTIFACTS_DIR"
ENV_DEPLOYMENTS_DIR = "DEPLOYMENTS_DIR"
ENV_CONFIRMATION_TIMEOUT = "CONFIRMATION_TIMEOUT"
ENV_POLL_INTERVAL = "POLL_INTERVAL"
ENV_GAS_LIMIT = "GAS_LIMIT"
ENV_LOG_LEVEL = "LOG_LEVEL"

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_CONFIRMATION_TIMEOUT = 120.0  # seconds
DEFAULT_POLL_INTERVAL = 1.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 30  # seconds, per HTTP request
DEFAULT_LOG_LEVEL = "WARNING"

# Multiplier applied to eth_estimateGas results
GAS_ESTIMATE_MARGIN = 1.2
