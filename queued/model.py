"""
Defines the request types accepted by the coordinator.

Every request is one of a closed set of variants, each carrying only the
fields relevant to it. All of them are immutable once constructed.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Union


class HttpMethod(Enum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'


def _freeze(mapping: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]]) -> Mapping[str, Any]:
    # `dict()` keeps the last value for duplicate keys.
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class FileAttachment:
    """
    A file to be sent as part of a multipart upload.
    """

    data: bytes
    """
    The raw contents of the file.
    """

    file_name: str
    """
    The name reported to the server in the `filename` disposition parameter.
    """

    mime_type: str
    """
    The content type of the file part. E.g., "text/plain".
    """


@dataclass(frozen=True)
class GetRequest:
    url: str
    headers: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'headers', _freeze(self.headers))


@dataclass(frozen=True)
class PostRequest:
    url: str
    body: Optional[bytes] = None
    headers: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'headers', _freeze(self.headers))


@dataclass(frozen=True)
class RestRequest:
    """
    A request with an explicit method, typically PUT or DELETE.
    """

    url: str
    method: HttpMethod
    body: Optional[bytes] = None
    headers: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'method', HttpMethod(self.method))
        object.__setattr__(self, 'headers', _freeze(self.headers))


@dataclass(frozen=True)
class MultipartRequest:
    """
    A multipart/form-data upload of form parameters and files.

    Parameters are encoded before files, each in the order given.
    """

    url: str
    parameters: Mapping[str, Any] = field(default_factory=dict, hash=False)
    files: Tuple[FileAttachment, ...] = ()
    headers: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'parameters', _freeze(self.parameters))
        object.__setattr__(self, 'files', tuple(self.files))
        object.__setattr__(self, 'headers', _freeze(self.headers))


Request = Union[GetRequest, PostRequest, RestRequest, MultipartRequest]


def fingerprint(request: Request) -> str:
    """
    Derive the cache and queue identity of a request.

    Identity is the target URL only: headers, bodies and even the variant
    are ignored, so different payloads sent to the same URL share one cache
    entry.
    """
    if not isinstance(request, (GetRequest, PostRequest, RestRequest, MultipartRequest)):
        raise TypeError('Unsupported request type: {}'.format(type(request).__name__))
    return request.url


@dataclass(frozen=True)
class Response:
    """
    The outcome of a request that reached the server.
    """

    status: int
    """
    The status code of the response. E.g., 200 or 500.
    """

    body: bytes = field(repr=False)
    """
    The complete response payload.
    """

    @property
    def ok(self) -> bool:
        return self.status == 200
