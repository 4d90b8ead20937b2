# tensor_decoder/dtypes.py

from __future__ import annotations
from enum import Enum

import numpy as np
import torch

from .errors import UnsupportedDtypeError


class DType(str, Enum):
    """
    Dtypes suportados pelo formato.

    Cada membro conhece:
    - width: largura do elemento em bytes.
    - wire_dtype: dtype numpy little-endian usado para ler os bytes crus.
    - torch_dtype: dtype do tensor final.
    """

    U8 = "U8"
    F16 = "F16"
    BF16 = "BF16"
    F32 = "F32"

    @property
    def width(self) -> int:
        return _WIDTHS[self]

    @property
    def wire_dtype(self) -> np.dtype:
        return _WIRE_DTYPES[self]

    @property
    def torch_dtype(self) -> torch.dtype:
        return _TORCH_DTYPES[self]

    @classmethod
    def parse(cls, value: str) -> "DType":
        """Converte a string do header; levanta UnsupportedDtypeError se desconhecida."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedDtypeError(
                f"dtype {value!r} não suportado (suportados: {', '.join(m.value for m in cls)})"
            ) from None


_WIDTHS = {
    DType.U8: 1,
    DType.F16: 2,
    DType.BF16: 2,
    DType.F32: 4,
}

# BF16 não existe no numpy: lê como uint16 e reinterpreta os bits no torch
_WIRE_DTYPES = {
    DType.U8: np.dtype("|u1"),
    DType.F16: np.dtype("<f2"),
    DType.BF16: np.dtype("<u2"),
    DType.F32: np.dtype("<f4"),
}

_TORCH_DTYPES = {
    DType.U8: torch.uint8,
    DType.F16: torch.float16,
    DType.BF16: torch.bfloat16,
    DType.F32: torch.float32,
}
