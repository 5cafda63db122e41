"""
Conversion between response bodies and models.

The coordinator only deals in bytes. These helpers sit on top of it for callers working with JSON payloads and
dataclass models.
"""

import json
from typing import Any, Mapping, Optional, Type, TypeVar

from .coordinator import RequestCoordinator
from .errors import DecodingError
from .model import Request
from .transport import ProgressCallback
from .util import DataclassJSONDecoder, DataclassJSONEncoder


T = TypeVar('T')


class ModelClient:
    def __init__(self, coordinator: RequestCoordinator) -> None:
        self.coordinator = coordinator

    def handle(self, request: Request, model_type: Type[T], progress: Optional[ProgressCallback] = None) -> T:
        """
        Handle `request` and decode the JSON response body into `model_type`.

        @param model_type
          A dataclass whose fields match the top-level JSON object, or a plain type such as `dict` or `list`.
        @throws DecodingError
          If the body is not valid JSON or does not fit `model_type`.
        """
        data = self.coordinator.handle(request, progress)
        try:
            return json.loads(data, cls=DataclassJSONDecoder, class_type=model_type)
        except (ValueError, TypeError) as e:
            raise DecodingError('Failed to decode response into {}: {}'.format(model_type.__name__, e)) from e

    @staticmethod
    def encode_parameters(parameters: Mapping[str, Any]) -> bytes:
        try:
            return json.dumps(parameters).encode('utf-8')
        except (ValueError, TypeError) as e:
            raise DecodingError('Failed to convert parameters into JSON: {}'.format(e)) from e

    @staticmethod
    def encode_model(model: Any) -> bytes:
        try:
            return json.dumps(model, cls=DataclassJSONEncoder).encode('utf-8')
        except (ValueError, TypeError) as e:
            raise DecodingError('Failed to encode model {} into JSON: {}'.format(type(model).__name__, e)) from e
