# tensor_decoder/io/header.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Optional, Tuple
import json
import struct

from ..errors import (
    IoError,
    MalformedMetadataError,
    TruncatedHeaderError,
    TruncatedMetadataError,
)
from ..logging_utils import get_logger


logger = get_logger(__name__)

PREFIX_SIZE = 8
METADATA_KEY = "__metadata__"


@dataclass(frozen=True)
class TensorDescriptor:
    """
    Descritor de um tensor declarado no header.

    `dtype` é mantido como string crua: a validação contra o conjunto
    suportado acontece no ordering, para que um dtype desconhecido afete
    apenas o próprio tensor.
    """
    name: str
    dtype: str
    shape: Tuple[int, ...]
    data_offsets: Tuple[int, int]

    @property
    def start(self) -> int:
        return self.data_offsets[0]

    @property
    def end(self) -> int:
        return self.data_offsets[1]

    @property
    def nbytes(self) -> int:
        return self.end - self.start

    @classmethod
    def from_dict(cls, name: str, value: Any) -> "TensorDescriptor":
        if not isinstance(value, dict):
            raise MalformedMetadataError(
                f"Descritor de {name!r} deve ser um objeto JSON, recebido {type(value).__name__}"
            )
        missing = [k for k in ("dtype", "shape", "data_offsets") if k not in value]
        if missing:
            raise MalformedMetadataError(f"Descritor de {name!r} sem campo(s): {', '.join(missing)}")

        dtype = value["dtype"]
        shape = value["shape"]
        offsets = value["data_offsets"]

        if not isinstance(dtype, str):
            raise MalformedMetadataError(f"dtype de {name!r} deve ser string, recebido {dtype!r}")
        if not isinstance(shape, list) or not all(_is_non_negative_int(x) for x in shape):
            raise MalformedMetadataError(f"shape inválido para {name!r}: {shape!r}")
        if (
            not isinstance(offsets, list)
            or len(offsets) != 2
            or not all(_is_non_negative_int(x) for x in offsets)
        ):
            raise MalformedMetadataError(f"data_offsets inválido para {name!r}: {offsets!r}")

        return cls(
            name=name,
            dtype=dtype,
            shape=tuple(shape),
            data_offsets=(offsets[0], offsets[1]),
        )


@dataclass(frozen=True)
class Header:
    """Resultado do parse: tamanho N, metadado opaco e tabela de descritores."""
    metadata_length: int
    metadata: Any
    descriptors: Dict[str, TensorDescriptor]

    @property
    def data_start(self) -> int:
        """Offset absoluto onde começa a região de dados (8 + N)."""
        return PREFIX_SIZE + self.metadata_length


def _is_non_negative_int(x: Any) -> bool:
    # bool é subclasse de int em Python
    return isinstance(x, int) and not isinstance(x, bool) and x >= 0


class _TopLevelPairs:
    """
    object_pairs_hook que guarda os pares do último objeto construído.

    O decoder monta objetos internos antes do externo, então a última chamada
    é sempre o objeto raiz; objetos aninhados (inclusive dentro de
    `__metadata__`) seguem a semântica normal do json.
    """

    def __init__(self):
        self.pairs: List[Tuple[str, Any]] = []

    def __call__(self, pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
        self.pairs = pairs
        return dict(pairs)


def _reject_constant(name: str) -> Any:
    raise MalformedMetadataError(f"Constante não-JSON no header: {name}")


def _check_unique(pairs: List[Tuple[str, Any]]) -> None:
    seen = set()
    for key, _ in pairs:
        if key in seen:
            raise MalformedMetadataError(f"Chave duplicada no header: {key!r}")
        seen.add(key)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Lê até `size` bytes, tolerando streams que retornam leituras parciais."""
    chunks = []
    remaining = size
    try:
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    except OSError as e:
        raise IoError(f"Falha ao ler header: {e}") from e
    return b"".join(chunks)


def parse_metadata(raw: bytes) -> Tuple[Any, Dict[str, TensorDescriptor]]:
    """
    Parse em duas passadas do bloco JSON.

    1. Extrai a chave reservada `__metadata__` (se existir), sem tocar no valor.
    2. Valida todas as demais chaves como TensorDescriptor.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedMetadataError(f"Header não é UTF-8 válido: {e}") from e

    top_level = _TopLevelPairs()
    try:
        table = json.loads(text, object_pairs_hook=top_level, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedMetadataError(f"JSON inválido no header: {e}") from e
    except RecursionError as e:
        raise MalformedMetadataError(f"JSON aninhado demais no header: {e}") from e

    if not isinstance(table, dict):
        raise MalformedMetadataError(
            f"Header deve ser um objeto JSON, recebido {type(table).__name__}"
        )

    # nomes de tensores são únicos; o valor opaco de __metadata__ não é inspecionado
    _check_unique(top_level.pairs)

    metadata = table.pop(METADATA_KEY, None)

    descriptors: Dict[str, TensorDescriptor] = {}
    for name, value in table.items():
        descriptors[name] = TensorDescriptor.from_dict(name, value)

    return metadata, descriptors


def parse_header(stream: BinaryIO, max_header_size: Optional[int] = None) -> Header:
    """
    Lê o prefixo de 8 bytes (u64 little-endian N) e os N bytes de metadados.

    O stream fica posicionado no início da região de dados.
    """
    prefix = _read_exact(stream, PREFIX_SIZE)
    if len(prefix) < PREFIX_SIZE:
        raise TruncatedHeaderError(
            f"Esperados {PREFIX_SIZE} bytes de prefixo, disponíveis {len(prefix)}"
        )

    (n,) = struct.unpack("<Q", prefix)
    if max_header_size is not None and n > max_header_size:
        raise MalformedMetadataError(
            f"Bloco de metadados grande demais: {n} bytes (limite {max_header_size})"
        )

    raw = _read_exact(stream, n)
    if len(raw) < n:
        raise TruncatedMetadataError(f"Esperados {n} bytes de metadados, disponíveis {len(raw)}")

    metadata, descriptors = parse_metadata(raw)
    logger.debug(f"Header lido: N={n}, {len(descriptors)} descritor(es)")
    return Header(metadata_length=n, metadata=metadata, descriptors=descriptors)
