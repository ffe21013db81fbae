class AddressValidationError(Exception):
    """Base class for failures talking to the Address Validation API."""


class ApiKeyMissingError(AddressValidationError):
    def __init__(self) -> None:
        super().__init__("No API key configured (set ADDRESS_VALIDATION_API_KEY)")


class TransportError(AddressValidationError):
    """The request never produced an HTTP response."""


class ApiError(AddressValidationError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Address Validation API returned {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class MalformedResponseError(AddressValidationError):
    """The API answered 2xx but the payload does not match the expected shape."""
