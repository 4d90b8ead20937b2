# tensor_decoder/algorithms/decoder.py

from __future__ import annotations
from typing import Union

import numpy as np
import torch

from ..dtypes import DType
from ..errors import AlignmentError

BytesLike = Union[bytes, bytearray, memoryview]


def decode_tensor(dtype: Union[DType, str], raw: BytesLike) -> torch.Tensor:
    """
    Converte bytes crus -> buffer 1-D tipado.

    Regras:
    - U8: um elemento por byte; len(raw) elementos.
    - F16 / BF16: palavras de 16 bits little-endian, reinterpretadas bit a bit.
    - F32: grupos de 32 bits little-endian (IEEE-754).

    Função pura: o resultado é sempre uma cópia própria, nunca uma view de `raw`.
    """
    if not isinstance(dtype, DType):
        dtype = DType.parse(dtype)

    width = dtype.width
    if len(raw) % width != 0:
        raise AlignmentError(
            f"{len(raw)} bytes não são múltiplo da largura de {dtype.value} ({width} bytes)"
        )

    if len(raw) == 0:
        words = np.empty(0, dtype=dtype.wire_dtype.newbyteorder("="))
    else:
        # astype(native) copia e corrige a ordem dos bytes em hosts big-endian
        words = np.frombuffer(raw, dtype=dtype.wire_dtype).astype(dtype.wire_dtype.newbyteorder("="))

    if dtype is DType.BF16:
        # torch não garante uint16; int16 tem os mesmos bits
        return torch.from_numpy(words.view(np.int16)).view(torch.bfloat16)

    return torch.from_numpy(words)


def element_count(dtype: Union[DType, str], nbytes: int) -> int:
    """Número de elementos de uma faixa de `nbytes`, validando o alinhamento."""
    if not isinstance(dtype, DType):
        dtype = DType.parse(dtype)
    if nbytes % dtype.width != 0:
        raise AlignmentError(
            f"{nbytes} bytes não são múltiplo da largura de {dtype.value} ({dtype.width} bytes)"
        )
    return nbytes // dtype.width
