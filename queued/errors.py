"""
Errors raised while handling a request.

Every error carries a human-readable `message` suitable for showing to a user.
"""

from typing import Optional


class ApiError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkUnavailable(ApiError):
    """
    There was no connectivity when the request was dispatched.
    """

    def __init__(self) -> None:
        super().__init__('The Internet connection appears to be offline. '
                         'Please check your connection and try again.')


class InvalidResponse(ApiError):
    """
    A simple GET did not come back with a success status.
    """

    def __init__(self, status: Optional[int] = None) -> None:
        super().__init__('Invalid response from the server. Please try again later.')
        self.status = status


class ServerError(ApiError):
    def __init__(self, status_code: Optional[int] = None) -> None:
        if status_code is None:
            status_code = 500
        super().__init__('Server error ({}). Please try again later.'.format(status_code))
        self.status_code = status_code


class DecodingError(ApiError):
    """
    A payload could not be converted to or from a model.
    """

    def __init__(self, detail: str) -> None:
        super().__init__('Failed to process the response: {}.'.format(detail))
        self.detail = detail


class TransportError(ApiError):
    """
    The underlying I/O failed. The original exception is the `__cause__`.
    """

    def __init__(self, detail: str) -> None:
        super().__init__('Network error occurred: {}. Please check your connection.'.format(detail))
        self.detail = detail
