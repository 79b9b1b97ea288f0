# utils/multipart.py - multipart/form-data body builder
import json
import mimetypes
import uuid
from typing import Any, List, Optional, Tuple

from urllib3 import encode_multipart_formdata

from utils.json_codec import to_plain


def new_boundary() -> str:
    return "-" * 33 + str(uuid.uuid4()).upper()


def _form_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


class MultipartFormData:
    """
    Collects text fields and file parts for a multipart/form-data body.

    Text fields are written first, then file parts. Encoding is done by
    urllib3, which also escapes quotes and line breaks in part names and
    filenames.
    """

    def __init__(self, boundary: Optional[str] = None):
        self.boundary = boundary or new_boundary()
        self.fields: List[Tuple[str, str]] = []
        self.files: List[Tuple[str, str, bytes, str]] = []

    @classmethod
    def from_model(cls, obj: Any, boundary: Optional[str] = None) -> "MultipartFormData":
        """
        One text field per attribute of `obj`. Names follow its aliases and
        None is skipped. Strings are sent as is, other values as compact JSON
        (true, 3, ["a","b"]).
        """
        form = cls(boundary=boundary)
        plain = to_plain(obj)
        if not isinstance(plain, dict):
            raise ValueError(f"cannot build form fields from {type(obj).__name__}")
        for name, value in plain.items():
            form.add_field(name, _form_value(value))
        return form

    def add_field(self, name: str, value: Any) -> "MultipartFormData":
        self.fields.append((name, str(value)))
        return self

    def add_file(self, name: str, filename: str, data: bytes,
                 content_type: Optional[str] = None) -> "MultipartFormData":
        ct = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        self.files.append((name, filename, data, ct))
        return self

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def encode(self) -> bytes:
        parts: List[Tuple[str, Any]] = list(self.fields)
        parts.extend((name, (filename, data, ct)) for name, filename, data, ct in self.files)
        body, _ = encode_multipart_formdata(parts, boundary=self.boundary)
        return body
