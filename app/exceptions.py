class ConfigurationError(Exception):
    pass


class BundlerError(Exception):
    def __init__(self, code: int, message: str, data=None):
        super().__init__(f"{message} (code {code})")
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_response(cls, error) -> "BundlerError":
        if not isinstance(error, dict):
            return cls(code=0, message=str(error))

        return cls(
            code=error.get("code", 0),
            message=error.get("message", ""),
            data=error.get("data"),
        )


class TransactionError(Exception):
    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction {tx_hash} reverted.")
        self.tx_hash = tx_hash
