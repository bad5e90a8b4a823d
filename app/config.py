from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict

import app.constants as constants
from app.exceptions import ConfigurationError


class HashOracleKind(str, Enum):
    ENTRY_POINT = "entry_point"
    LOCAL = "local"


class SignatureMode(str, Enum):
    EIP191 = "eip191"
    RAW = "raw"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    private_key: str = ""
    bundler_url: str = ""
    sepolia_rpc_url: str = ""
    chain_id: int = constants.SEPOLIA_CHAIN_ID

    entry_point_address: str = constants.ENTRY_POINT_ADDRESS
    paymaster_address: str = constants.PAYMASTER_ADDRESS
    account_address: str = constants.ACCOUNT_ADDRESS

    # SimpleAccount.execute(dest, value, func)
    destination: str = "0x828e4c8e2d006c3653faf887b9444e9d219ce174"
    call_value: int = 10_000_000_000_000_000
    call_func: str = "0x"

    verification_gas_limit: int = 60_000
    call_gas_limit: int = 200_000
    pre_verification_gas: int = 50_000
    max_priority_fee_per_gas: int = 5_000_000_000
    max_fee_per_gas: int = 50_000_000_000

    use_paymaster: bool = True
    paymaster_verification_gas_limit: int = 20_000
    paymaster_post_op_gas_limit: int = 0
    paymaster_data: str = "0x"

    stake_amount: int = constants.DEFAULT_STAKE_AMOUNT
    unstake_delay: int = constants.DEFAULT_UNSTAKE_DELAY

    hash_oracle: HashOracleKind = HashOracleKind.ENTRY_POINT
    signature_mode: SignatureMode = SignatureMode.EIP191

    log_level: str = "INFO"
    http_timeout: float = 30.0

    def require(self, *fields: str) -> None:
        for field in fields:
            if not getattr(self, field):
                raise ConfigurationError(
                    f"Missing {field.upper()} in the environment."
                )
