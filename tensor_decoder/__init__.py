"""
Pacote principal do Tensor Decoder.

Ideia central:
- Ler um container com um header JSON (length-prefixed) descrevendo tensores
  e uma região contígua de bytes crus.
- Reconstruir tensores tipados (U8, F16, BF16, F32) em paralelo, com largura,
  endianness e shape corretos.

Módulos principais:
- io: header e acesso ao backing store (mmap, handles, buffer).
- algorithms: validação/ordenação de descritores e reinterpretação por dtype.
- loading: fan-out paralelo das tarefas de decodificação.
- reader: ponto de entrada (Reader.open).
- cli: inspeção por linha de comando.
"""

from .config import ReaderConfig
from .dtypes import DType
from .errors import (
    AlignmentError,
    DecodeError,
    HeaderError,
    InvalidRangeError,
    IoError,
    MalformedMetadataError,
    PartialDecodeError,
    ShapeMismatchError,
    TruncatedHeaderError,
    TruncatedMetadataError,
    UnsupportedDtypeError,
)
from .reader import Reader
from .tensor import Tensor

__all__ = [
    "Reader",
    "ReaderConfig",
    "Tensor",
    "DType",
    "DecodeError",
    "HeaderError",
    "TruncatedHeaderError",
    "TruncatedMetadataError",
    "MalformedMetadataError",
    "InvalidRangeError",
    "AlignmentError",
    "UnsupportedDtypeError",
    "ShapeMismatchError",
    "IoError",
    "PartialDecodeError",
]
