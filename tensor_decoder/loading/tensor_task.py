# tensor_decoder/loading/tensor_task.py

from __future__ import annotations
from dataclasses import dataclass
import math

from ..algorithms import decode_tensor, element_count, validate_descriptor
from ..errors import ShapeMismatchError
from ..io import ByteSource, TensorDescriptor
from ..logging_utils import get_logger
from ..tensor import Tensor


logger = get_logger(__name__)


@dataclass
class TensorTask:
    """
    Responsável por decodificar um ÚNICO tensor.

    Fluxo:
    - Validar descritor e alinhamento (antes de qualquer I/O).
    - Ler exatamente end-start bytes em data_start + start.
    - Reinterpretar os bytes conforme o dtype.
    - Conferir prod(shape) contra o número de elementos.

    Não compartilha estado mutável com outras tarefas.
    """

    descriptor: TensorDescriptor
    source: ByteSource
    data_start: int
    check_shape: bool = True

    def run(self) -> Tensor:
        desc = self.descriptor
        dtype = validate_descriptor(desc)
        count = element_count(dtype, desc.nbytes)

        if self.check_shape:
            expected = math.prod(desc.shape)
            if expected != count:
                raise ShapeMismatchError(
                    f"{desc.name}: shape {list(desc.shape)} tem {expected} elementos, "
                    f"mas data_offsets cobre {count} elementos de {dtype.value}"
                )

        raw = self.source.read_at(self.data_start + desc.start, desc.nbytes)
        data = decode_tensor(dtype, raw)

        logger.debug(f"  [DECODE] {desc.name} dtype={dtype.value} shape={desc.shape}")
        return Tensor(dtype=dtype, shape=desc.shape, data=data)
