import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values
from eth_account import Account
from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from challenger.core.setup import logger


class RetryConfig(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)


class ChallengerConfig(BaseModel):
    l1_rpc: str
    factory_address: str
    game_type: int = Field(ge=0, le=2**32 - 1)
    private_key: SecretStr
    fetch_interval: float = Field(default=30, ge=0)
    max_games_to_check: int = Field(default=100, ge=1)
    poll_interval: float = Field(default=5, ge=0)
    explorer_url: str = ""
    # None waits for resolution forever.
    resolution_timeout: Optional[float] = Field(default=None, gt=0)
    receipt_timeout: float = Field(default=120, gt=0)
    rpc_timeout: float = Field(default=30, gt=0)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("l1_rpc")
    @classmethod
    def _check_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return v

    @field_validator("factory_address")
    @classmethod
    def _check_address(cls, v: str) -> str:
        if not is_address(v):
            raise ValueError(f"not a valid address: {v}")
        return to_checksum_address(v)

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, v: SecretStr) -> SecretStr:
        try:
            Account.from_key(v.get_secret_value())
        except Exception:
            # The key itself must never reach the error message.
            raise ValueError("not a valid private key") from None
        return v

    @field_validator("explorer_url")
    @classmethod
    def _strip_explorer(cls, v: str) -> str:
        return v.rstrip("/")


class ConfigError(Exception):
    """Base class for configuration errors."""
    pass


REQUIRED_VARS = ("L1_RPC", "FACTORY_ADDRESS", "GAME_TYPE", "PRIVATE_KEY")

# Environment variable -> config field
ENV_FIELDS = {
    "L1_RPC": "l1_rpc",
    "FACTORY_ADDRESS": "factory_address",
    "GAME_TYPE": "game_type",
    "PRIVATE_KEY": "private_key",
    "FETCH_INTERVAL": "fetch_interval",
    "MAX_GAMES_TO_CHECK_FOR_CHALLENGE": "max_games_to_check",
    "POLL_INTERVAL": "poll_interval",
    "BLOCKSCOUT_ADDRESS": "explorer_url",
    "RESOLUTION_TIMEOUT": "resolution_timeout",
    "RECEIPT_TIMEOUT": "receipt_timeout",
    "RPC_TIMEOUT": "rpc_timeout",
}


def _read_env(env_file: Optional[str]) -> Dict[str, str]:
    """Process environment, overridden by the env file when one is given."""
    values: Dict[str, str] = {}
    for key in (*ENV_FIELDS, "RPC_RETRIES"):
        if os.environ.get(key):
            values[key] = os.environ[key]
    if env_file:
        path = Path(env_file)
        if path.exists():
            values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
        else:
            logger.warning(f"Environment file {env_file} not found, using system environment variables")
    return values


def load_config(env_file: Optional[str] = ".env") -> ChallengerConfig:
    """Build the challenger configuration from an env file and the environment.

    Raises:
        ConfigError: if required variables are missing or a value is invalid
    """
    values = _read_env(env_file)

    missing = [var for var in REQUIRED_VARS if not values.get(var)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {' '.join(missing)}")

    data = {ENV_FIELDS[k]: v for k, v in values.items() if k in ENV_FIELDS and v != ""}
    if values.get("RPC_RETRIES"):
        data["retry"] = {"max_attempts": values["RPC_RETRIES"]}

    try:
        return ChallengerConfig(**data)
    except ValidationError as e:
        msg = "Configuration validation failed:\n"
        for err in e.errors():
            loc = ".".join(str(l) for l in err['loc'])
            msg += f" - {loc}: {err['msg']}\n"
        raise ConfigError(msg)
