"""
Central configuration for the aligned client.

This module provides a single, typed configuration object that reads from
environment variables (12-factor style) using pydantic-settings.

Usage:

    from aligned_sdk.core.settings import get_settings

    settings = get_settings()
    url = settings.batcher_url
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aligned_sdk.protocol.enums import Chain

# Anvil development account 0
ANVIL_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ANVIL_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

SERVICE_MANAGER_ADDRESSES = {
    Chain.DEVNET: "0x1613beB3B2C4f22Ee086B2b38C1476A3cE7f78E8",
    Chain.HOLESKY: "0x58F280BeBE9B34c9939C3C39e0890C81f163B623",
}


class ClientSettings(BaseSettings):
    """
    Root configuration object for the aligned client.

    Every field can be overridden with an ALIGNED_* environment variable;
    CLI flags take precedence over both.
    """

    model_config = SettingsConfigDict(env_prefix="ALIGNED_")

    batcher_url: str = Field(
        default="ws://localhost:8080",
        description="WebSocket address of the batcher.",
    )
    eth_rpc_url: str = Field(
        default="http://localhost:8545",
        description="Ethereum JSON-RPC endpoint used for on-chain checks.",
    )
    chain: Chain = Field(
        default=Chain.DEVNET,
        description="Network whose service manager contract is queried.",
    )
    output_dir: str = Field(
        default="./aligned_verification_data/",
        description="Directory where aligned verification data files are written.",
    )
    proof_generator_addr: str = Field(
        default=ANVIL_ADDRESS,
        description="Address credited as the proof generator.",
    )
    private_key: str = Field(
        default=ANVIL_PRIVATE_KEY,
        description="Hex secp256k1 key used to sign client messages.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG/INFO/WARNING/ERROR).",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "INFO").upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return "INFO"
        return v

    @field_validator("chain", mode="before")
    @classmethod
    def _normalize_chain(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


@lru_cache(maxsize=1)
def get_settings() -> ClientSettings:
    """
    Cached accessor for ClientSettings.

    Usage:
        from aligned_sdk.core.settings import get_settings
        settings = get_settings()
    """
    return ClientSettings()
