"""Provider error taxonomy."""


class ProviderError(Exception):
    """Base class for errors raised while talking to the market-data provider."""


class NetworkError(ProviderError):
    """Both the direct and the relay request failed, or returned unparseable JSON."""

    def __init__(self, message: str = "Unable to reach provider") -> None:
        super().__init__(message)


class MissingKeyError(ProviderError, KeyError):
    """Provider response lacks the expected source or currency key."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else "Missing key in provider response"
