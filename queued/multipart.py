"""
Encoding of multipart/form-data bodies.

Framing must match byte for byte what servers expect, so the body is built by hand rather than through `requests`'
own `files=` support, which names and orders parts differently.
"""

from typing import Any, Iterable, Mapping
import uuid

from .model import FileAttachment


FILE_FIELD_NAME = 'file'


def make_boundary() -> str:
    return 'Boundary-{}'.format(str(uuid.uuid4()).upper())


def content_type(boundary: str) -> str:
    return 'multipart/form-data; boundary={}'.format(boundary)


def encode(parameters: Mapping[str, Any], files: Iterable[FileAttachment], boundary: str) -> bytes:
    """
    Build the complete body of a multipart upload.

    @param parameters
      Form fields, encoded in iteration order. Values are stringified.
    @param files
      Files, encoded after all form fields, each under the field name "file".
    @param boundary
      The part delimiter. It must not occur within any value.
    @return
      The body, terminated by the closing delimiter.
    """
    body = bytearray()

    for key, value in parameters.items():
        body += '--{}\r\n'.format(boundary).encode('utf-8')
        body += 'Content-Disposition: form-data; name="{}"\r\n\r\n'.format(key).encode('utf-8')
        body += '{}\r\n'.format(value).encode('utf-8')

    for attachment in files:
        body += '--{}\r\n'.format(boundary).encode('utf-8')
        body += 'Content-Disposition: form-data; name="{}"; filename="{}"\r\n'.format(
            FILE_FIELD_NAME, attachment.file_name).encode('utf-8')
        body += 'Content-Type: {}\r\n\r\n'.format(attachment.mime_type).encode('utf-8')
        body += attachment.data
        body += b'\r\n'

    body += '--{}--\r\n'.format(boundary).encode('utf-8')
    return bytes(body)
