import json
import struct
from pathlib import Path

import pytest

_MISSING = object()


def f32(*values) -> bytes:
    return struct.pack(f"<{len(values)}f", *values)


def u16(*words) -> bytes:
    return struct.pack(f"<{len(words)}H", *words)


def raw_container(header: dict, data: bytes = b"") -> bytes:
    """Prefixo u64 LE + JSON + dados, sem nenhuma validação."""
    blob = json.dumps(header).encode("utf-8")
    return struct.pack("<Q", len(blob)) + blob + data


def build_container(tensors, metadata=_MISSING, trailing: bytes = b"") -> bytes:
    """
    tensors: lista de (name, dtype, shape, payload). Os payloads são
    concatenados na ordem dada e os data_offsets calculados a partir dela.
    """
    header = {}
    data = b""
    for name, dtype, shape, payload in tensors:
        start = len(data)
        data += payload
        header[name] = {"dtype": dtype, "shape": list(shape), "data_offsets": [start, len(data)]}
    if metadata is not _MISSING:
        header["__metadata__"] = metadata
    return raw_container(header, data + trailing)


@pytest.fixture
def write_file(tmp_path):
    counter = {"n": 0}

    def _write(content: bytes) -> Path:
        counter["n"] += 1
        path = tmp_path / f"tensors_{counter['n']}.bin"
        path.write_bytes(content)
        return path

    return _write
