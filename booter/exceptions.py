"""Booter specific exceptions."""


class BooterError(Exception):
    """Base class of the errors raised while building the boot files of a node."""

    def __init__(self, message: str, *args):
        self.message = message
        super().__init__(message, *args)


class InventoryError(BooterError):
    """Exception raised when a call to NAPI or CNAPI does not succeed."""

    def __init__(
        self,
        message: str,
        *args,
        url: str | None = None,
        status_code: int | None = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, *args)


class NotFoundError(InventoryError):
    """Exception raised when the requested record does not exist."""


class TransportError(InventoryError):
    """Exception raised when the service can't be reached or answers with an error."""


class ResolutionError(BooterError):
    """Exception raised when the boot parameters of a nic can't be resolved."""

    def __init__(
        self, message: str, *args, mac: str | None = None, uuid: str | None = None
    ):
        self.mac = mac
        self.uuid = uuid
        super().__init__(message, *args)


class MissingAddressError(ResolutionError):
    """Exception raised when the boot nic has no IP or netmask."""
