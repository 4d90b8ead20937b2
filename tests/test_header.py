import io
import struct

import pytest

from tensor_decoder import (
    MalformedMetadataError,
    TruncatedHeaderError,
    TruncatedMetadataError,
)
from tensor_decoder.io import parse_header, parse_metadata

from conftest import build_container, f32, raw_container


def _descriptor(**overrides):
    d = {"dtype": "F32", "shape": [2], "data_offsets": [0, 8]}
    d.update(overrides)
    return d


def test_parses_prefix_metadata_and_descriptors():
    content = build_container(
        [("w", "F32", [2], f32(1.0, 2.0)), ("b", "U8", [3], b"abc")],
        metadata={"format": "pt", "nested": [1, {"x": None}]},
    )
    stream = io.BytesIO(content)
    header = parse_header(stream)

    assert header.metadata == {"format": "pt", "nested": [1, {"x": None}]}
    assert set(header.descriptors) == {"w", "b"}
    assert header.descriptors["b"].data_offsets == (8, 11)
    assert header.descriptors["w"].shape == (2,)
    assert header.data_start == 8 + header.metadata_length
    # stream fica no início da região de dados
    assert stream.tell() == header.data_start


def test_missing_metadata_key_is_none():
    header = parse_header(io.BytesIO(build_container([("w", "F32", [1], f32(1.0))])))
    assert header.metadata is None


def test_metadata_value_is_passed_through_verbatim():
    metadata, descriptors = parse_metadata(b'{"__metadata__": "just a string"}')
    assert metadata == "just a string"
    assert descriptors == {}


def test_truncated_prefix():
    with pytest.raises(TruncatedHeaderError):
        parse_header(io.BytesIO(b"\x01\x00\x00\x00"))


def test_empty_stream_is_truncated_header():
    with pytest.raises(TruncatedHeaderError):
        parse_header(io.BytesIO(b""))


def test_truncated_metadata():
    content = struct.pack("<Q", 100) + b'{"a": 1}'
    with pytest.raises(TruncatedMetadataError):
        parse_header(io.BytesIO(content))


def test_header_size_limit():
    content = struct.pack("<Q", 1 << 40)
    with pytest.raises(MalformedMetadataError):
        parse_header(io.BytesIO(content), max_header_size=1024)


@pytest.mark.parametrize(
    "blob",
    [
        b"not json",
        b"[1, 2, 3]",
        b"\xff\xfe{}",
        b'{"a": {"dtype": "F32", "shape": [1], "data_offsets": [0, 4]},'
        b' "a": {"dtype": "F32", "shape": [1], "data_offsets": [0, 4]}}',
    ],
    ids=["invalid-json", "not-an-object", "invalid-utf8", "duplicate-key"],
)
def test_malformed_metadata_block(blob):
    content = struct.pack("<Q", len(blob)) + blob
    with pytest.raises(MalformedMetadataError):
        parse_header(io.BytesIO(content))


@pytest.mark.parametrize(
    "descriptor",
    [
        {"shape": [2], "data_offsets": [0, 8]},
        {"dtype": "F32", "data_offsets": [0, 8]},
        {"dtype": "F32", "shape": [2]},
        _descriptor(data_offsets=[0, 4, 8]),
        _descriptor(data_offsets=[0]),
        _descriptor(data_offsets=[-4, 8]),
        _descriptor(data_offsets=[0.0, 8]),
        _descriptor(shape=[2, -1]),
        _descriptor(shape=[True]),
        _descriptor(shape=2),
        _descriptor(dtype=7),
        "F32",
    ],
)
def test_malformed_descriptor(descriptor):
    content = raw_container({"t": descriptor}, b"\x00" * 8)
    with pytest.raises(MalformedMetadataError):
        parse_header(io.BytesIO(content))


def test_unknown_dtype_is_not_a_header_error():
    header = parse_header(io.BytesIO(raw_container({"t": _descriptor(dtype="I64")})))
    assert header.descriptors["t"].dtype == "I64"


def test_start_after_end_is_not_a_header_error():
    header = parse_header(io.BytesIO(raw_container({"t": _descriptor(data_offsets=[8, 0])})))
    assert header.descriptors["t"].start == 8


def test_deeply_nested_metadata_is_malformed():
    depth = 100_000
    blob = b'{"__metadata__": ' + b"[" * depth + b"]" * depth + b"}"
    content = struct.pack("<Q", len(blob)) + blob
    with pytest.raises(MalformedMetadataError):
        parse_header(io.BytesIO(content))


def test_duplicate_keys_inside_metadata_pass_through():
    metadata, descriptors = parse_metadata(b'{"__metadata__": {"a": 1, "a": 2, "b": {"c": 0, "c": 3}}}')
    assert metadata == {"a": 2, "b": {"c": 3}}
    assert descriptors == {}


def test_duplicate_tensor_names_after_nested_objects():
    blob = (
        b'{"t": {"dtype": "U8", "shape": [1], "data_offsets": [0, 1]},'
        b' "__metadata__": {"x": {"y": 1}},'
        b' "t": {"dtype": "U8", "shape": [1], "data_offsets": [0, 1]}}'
    )
    with pytest.raises(MalformedMetadataError):
        parse_metadata(blob)


@pytest.mark.parametrize("constant", [b"NaN", b"Infinity", b"-Infinity"])
def test_non_json_constants_are_malformed(constant):
    with pytest.raises(MalformedMetadataError):
        parse_metadata(b'{"__metadata__": ' + constant + b"}")
