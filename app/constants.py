ENTRY_POINT_ADDRESS = "0x0000000071727De22E5E9d8BAf0edAc6f37da032"
PAYMASTER_ADDRESS = "0x846d83E646B8e740bDe4F5f63C0849208817Cff9"
ACCOUNT_ADDRESS = "0x9dCA2C8DF78752DeA4154B69659e0fc1454f9cB2"
SEPOLIA_CHAIN_ID = 11155111

ADDRESS_SIZE = 20
UINT128_SIZE = 16
MAX_UINT128 = 2**128

NONCE_KEY = 0

DEFAULT_STAKE_AMOUNT = 100_000_000_000_000_000
DEFAULT_UNSTAKE_DELAY = 86400

JSON_RPC_VERSION = "2.0"
