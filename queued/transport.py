import logging
from typing import Any, Callable, Mapping, Optional

import requests

from . import multipart
from .errors import InvalidResponse, NetworkUnavailable, ServerError, TransportError
from .model import GetRequest, MultipartRequest, PostRequest, Request, Response, RestRequest
from .util import ProgressReader


logger = logging.getLogger(__name__)


ProgressCallback = Callable[[float], None]


class Transport:
    """
    Executes requests over HTTP using a `requests` session.

    Requests run to completion with no deadline; a `requests` session applies no timeout unless one is configured on
    its adapters.
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session if session is not None else requests.Session()

    def execute(self, request: Request, connected: bool, progress: Optional[ProgressCallback] = None) -> Response:
        """
        Execute `request` and return the response status and body.

        @param request
          The request to execute.
        @param connected
          Whether the host is known to be connected. GET and REST-style requests fail fast when it is not. Multipart
          uploads are attempted regardless.
        @param progress
          Receives the fraction of the body sent so far. Only used for multipart uploads.
        """
        if isinstance(request, GetRequest):
            return self.get(request, connected)
        if isinstance(request, PostRequest):
            return self.send(request.url, 'POST', request.body, request.headers, connected)
        if isinstance(request, RestRequest):
            return self.send(request.url, request.method.value, request.body, request.headers, connected)
        if isinstance(request, MultipartRequest):
            return self.upload(request, progress)
        raise TypeError('Unsupported request type: {}'.format(type(request).__name__))

    def get(self, request: GetRequest, connected: bool) -> Response:
        if not connected:
            logger.info('Refusing GET {}. The network is unavailable.'.format(request.url))
            raise NetworkUnavailable()

        headers = {
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        }
        headers.update(_stringify(request.headers))

        response = self._request('GET', request.url, headers=headers)
        if response.status_code != 200:
            logger.info('GET {} returned status {}'.format(request.url, response.status_code))
            raise InvalidResponse(response.status_code)
        return Response(response.status_code, response.content)

    def send(self, url: str, method: str, body: Optional[bytes], headers: Mapping[str, Any],
             connected: bool) -> Response:
        if not connected:
            logger.info('Refusing {} {}. The network is unavailable.'.format(method, url))
            raise NetworkUnavailable()

        merged = {'Content-Type': 'application/json'}
        merged.update(_stringify(headers))

        response = self._request(method, url, headers=merged, data=body)
        if response.status_code != 200:
            logger.info('{} {} returned status {}'.format(method, url, response.status_code))
            raise ServerError(response.status_code or None)
        return Response(response.status_code, response.content)

    def upload(self, request: MultipartRequest, progress: Optional[ProgressCallback] = None) -> Response:
        boundary = multipart.make_boundary()
        headers = {'Content-Type': multipart.content_type(boundary)}
        headers.update(_stringify(request.headers))

        body = multipart.encode(request.parameters, request.files, boundary)
        reader = ProgressReader(body, progress)
        logger.info('Uploading {} bytes to {}'.format(len(reader), request.url))

        response = self._request('POST', request.url, headers=headers, data=reader)
        reader.finish()
        if response.status_code != 200:
            logger.info('Upload to {} returned status {}'.format(request.url, response.status_code))
        return Response(response.status_code, response.content)

    def _request(self, method: str, url: str, **kw) -> requests.Response:
        try:
            return self.session.request(method, url, **kw)
        except requests.RequestException as e:
            logger.info('{} {} failed: {}'.format(method, url, e))
            raise TransportError(str(e)) from e

    def close(self):
        self.session.close()


def _stringify(headers: Mapping[str, Any]) -> Mapping[str, str]:
    return {key: str(value) for key, value in headers.items()}
