class RelayError(Exception):
    """Base class for failures that end a relayed request with a 500 envelope."""


class TransportError(RelayError):
    """The upstream could not be reached or the outbound request could not be built."""


class TooManyRedirects(RelayError):
    def __init__(self, message: str = "Too many redirects"):
        super().__init__(message)
