# tensor_decoder/tensor.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import torch

from .dtypes import DType


@dataclass(frozen=True)
class Tensor:
    """
    Tensor decodificado.

    `data` é um buffer 1-D próprio (contíguo, gravável) do dtype correspondente;
    `shape` é a cópia do shape declarado no header.
    """
    dtype: DType
    shape: Tuple[int, ...]
    data: torch.Tensor

    @property
    def numel(self) -> int:
        return self.data.numel()

    @property
    def nbytes(self) -> int:
        return self.numel * self.dtype.width

    def reshaped(self) -> torch.Tensor:
        """View de `data` com o shape declarado."""
        return self.data.view(self.shape)
