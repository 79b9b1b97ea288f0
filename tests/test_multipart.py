import re
from dataclasses import dataclass
from typing import List, Optional

import pytest

from utils.multipart import MultipartFormData, new_boundary


@dataclass
class Upload:
    title: str
    pages: int
    comment: Optional[str] = None


def test_boundary_shape():
    boundary = new_boundary()
    assert re.fullmatch(r"-{33}[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}", boundary)
    assert new_boundary() != boundary


def test_encode_fields_and_files():
    form = MultipartFormData(boundary="b0undary")
    form.add_field("name", "Ada").add_file("cv", "cv.pdf", b"%PDF-1.4")

    assert form.content_type == "multipart/form-data; boundary=b0undary"
    assert form.encode() == (
        b"--b0undary\r\n"
        b'Content-Disposition: form-data; name="name"\r\n\r\n'
        b"Ada\r\n"
        b"--b0undary\r\n"
        b'Content-Disposition: form-data; name="cv"; filename="cv.pdf"\r\n'
        b"Content-Type: application/pdf\r\n\r\n"
        b"%PDF-1.4\r\n"
        b"--b0undary--\r\n"
    )


def test_unknown_file_type_falls_back_to_octet_stream():
    form = MultipartFormData().add_file("blob", "data.zzz-unknown", b"\x00")
    assert b"Content-Type: application/octet-stream" in form.encode()


def test_from_model_skips_none_fields():
    form = MultipartFormData.from_model(Upload(title="Report", pages=3))
    assert form.fields == [("title", "Report"), ("pages", "3")]


def test_from_model_rejects_non_objects():
    with pytest.raises(ValueError):
        MultipartFormData.from_model([1, 2])


@dataclass
class Flags:
    active: bool
    tags: List[str]
    label: str = "plain"


def test_from_model_writes_non_strings_as_json():
    form = MultipartFormData.from_model(Flags(active=True, tags=["a", "b"]))
    assert form.fields == [("active", "true"), ("tags", '["a","b"]'), ("label", "plain")]


def test_part_names_and_filenames_are_escaped():
    form = MultipartFormData(boundary="b")
    form.add_field('bad"name\r\nX-Injected: 1', "v").add_file("f", 'evil".txt', b"x")

    body = form.encode()

    assert b"X-Injected: 1\r\n" not in body
    assert b'name="bad%22name%0D%0AX-Injected: 1"' in body
    assert b'filename="evil%22.txt"' in body
