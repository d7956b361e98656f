from decimal import Decimal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ACCESS_NODES: dict[str, str] = {
    "local": "http://localhost:8888",
    "testnet": "https://rest-testnet.onflow.org",
    "mainnet": "https://rest-mainnet.onflow.org",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Network: ACCESS_NODE_URL falls back to the node for FLOW_NETWORK
    FLOW_NETWORK: str = "testnet"
    ACCESS_NODE_URL: str = ""

    # Contract addresses (defaults match the local emulator / testnet core contracts)
    PONDER_CONTRACT_ADDRESS: str = "0xf8d6e0586b0a20c7"
    FLOW_TOKEN_ADDRESS: str = "0x7e60df042a9c0868"
    FUNGIBLE_TOKEN_ADDRESS: str = "0x9a0766d93b6608b7"

    # Transactions
    GAS_LIMIT: int = 9999
    FINALITY_TIMEOUT_SECONDS: float = 30.0
    FINALITY_POLL_INTERVAL_SECONDS: float = 1.0
    HTTP_TIMEOUT_SECONDS: float = 10.0
    AUTH_TIMEOUT_SECONDS: float = 120.0

    # Market rules mirrored from the contract
    CREATION_FEE: Decimal = Decimal("1.0")
    MIN_BET_FLOOR: Decimal = Decimal("0.10")

    # App
    APP_NAME: str = "FlowPonder"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev

    @model_validator(mode="after")
    def default_access_node(self) -> "Settings":
        if self.FLOW_NETWORK not in ACCESS_NODES:
            raise ValueError(
                f"FLOW_NETWORK must be one of {sorted(ACCESS_NODES)}, got {self.FLOW_NETWORK!r}"
            )
        if not self.ACCESS_NODE_URL:
            self.ACCESS_NODE_URL = ACCESS_NODES[self.FLOW_NETWORK]
        return self


settings = Settings()
