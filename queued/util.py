import dataclasses
from io import RawIOBase, UnsupportedOperation
import json
import typing
from typing import Callable, Optional, Type


def clamp(value, min, max):
    return sorted((min, value, max))[1]


class DataclassJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if dataclasses.is_dataclass(o):
            return dataclasses.asdict(o)
        return super().default(o)


class DataclassJSONDecoder(json.JSONDecoder):
    def __init__(self, class_type: Type, **kwargs) -> None:
        super().__init__(**kwargs)
        self.__class_type = class_type

    def decode(self, s):
        return _build(self.__class_type, super().decode(s))


def _build(class_type: Type, value):
    """
    Convert decoded JSON into `class_type`, recursing into dataclass fields that are themselves dataclasses.

    @throws TypeError
      If `value` does not have the shape of `class_type`.
    """
    if dataclasses.is_dataclass(class_type):
        if not isinstance(value, dict):
            raise TypeError('Expected an object for {}, got {}'.format(class_type.__name__, type(value).__name__))
        hints = typing.get_type_hints(class_type)
        kwargs = {}
        for f in dataclasses.fields(class_type):
            if f.name in value:
                kwargs[f.name] = _build(hints.get(f.name, object), value[f.name])
        unknown = set(value) - set(kwargs)
        if unknown:
            raise TypeError('Unexpected fields for {}: {}'.format(class_type.__name__, ', '.join(sorted(unknown))))
        return class_type(**kwargs)
    if not isinstance(class_type, type):
        # Typing constructs such as `List[int]` or `Optional[str]` are passed through unchecked.
        return value
    if class_type is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, class_type):
        raise TypeError('Expected {}, got {}'.format(class_type.__name__, type(value).__name__))
    return value


class ProgressReader(RawIOBase):
    """
    A readable stream over a fixed body that reports how much of it has been read.

    The callback receives the fraction of the body read so far each time a non-empty chunk is read. Reported values
    never decrease and stay within [0.0, 1.0].
    """

    def __init__(self, data: bytes, on_progress: Optional[Callable[[float], None]] = None) -> None:
        self.__data = data
        self.__position = 0
        self.__on_progress = on_progress
        self.__reported = 0.0

    def __len__(self) -> int:
        return len(self.__data)

    @property
    def reported(self) -> float:
        return self.__reported

    def _report(self, fraction: float) -> None:
        fraction = clamp(fraction, 0.0, 1.0)
        if fraction < self.__reported:
            return
        self.__reported = fraction
        if self.__on_progress is not None:
            self.__on_progress(fraction)

    def finish(self) -> None:
        """
        Report completion if the transport finished without reading the final chunk through this stream.
        """
        if self.__reported < 1.0:
            self._report(1.0)

    # region IOBase methods

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def tell(self) -> int:
        # `requests` subtracts the current position from the length to compute Content-Length.
        return self.__position

    def fileno(self) -> int:
        raise OSError()

    def isatty(self) -> bool:
        return False

    # endregion

    # region RawIOBase methods

    def read(self, size=-1) -> bytes:
        if size is None or size < 0:
            end = len(self.__data)
        else:
            end = min(self.__position + size, len(self.__data))
        chunk = self.__data[self.__position:end]
        self.__position = end
        if chunk:
            total = len(self.__data)
            self._report(self.__position / total)
        return chunk

    def readall(self) -> bytes:
        return self.read()

    def readinto(self, buffer):
        chunk = self.read(len(buffer))
        buffer[:len(chunk)] = chunk
        return len(chunk)

    def write(self, b):
        raise UnsupportedOperation()

    # endregion
