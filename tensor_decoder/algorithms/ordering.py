# tensor_decoder/algorithms/ordering.py

from __future__ import annotations
from typing import Dict, List, Mapping, Optional, Tuple

from ..dtypes import DType
from ..errors import DecodeError, InvalidRangeError, UnsupportedDtypeError
from ..io.header import TensorDescriptor
from ..logging_utils import get_logger


logger = get_logger(__name__)


def validate_descriptor(desc: TensorDescriptor, data_size: Optional[int] = None) -> DType:
    """
    Valida um descritor isolado e retorna o DType já resolvido.

    Levanta InvalidRangeError / UnsupportedDtypeError.
    """
    if desc.start > desc.end:
        raise InvalidRangeError(
            f"{desc.name}: data_offsets com start > end ({desc.start} > {desc.end})"
        )
    if data_size is not None and desc.end > data_size:
        raise InvalidRangeError(
            f"{desc.name}: end={desc.end} além da região de dados ({data_size} bytes)"
        )
    try:
        return DType.parse(desc.dtype)
    except UnsupportedDtypeError as e:
        raise UnsupportedDtypeError(f"{desc.name}: {e}") from None


def order_descriptors(
    descriptors: Mapping[str, TensorDescriptor],
    data_size: Optional[int] = None,
) -> Tuple[List[str], Dict[str, DecodeError]]:
    """
    Ordena os tensores válidos por offset inicial (empate: nome).

    A ordem é só determinismo + acesso sequencial ao store; o resultado da
    decodificação não depende dela. Descritores inválidos não entram na ordem
    e voltam em `rejected` (nome -> erro), sem afetar os demais.
    """
    valid: List[TensorDescriptor] = []
    rejected: Dict[str, DecodeError] = {}

    for name, desc in descriptors.items():
        try:
            validate_descriptor(desc, data_size)
        except DecodeError as e:
            logger.warning(f"Descritor rejeitado: {e}")
            rejected[name] = e
            continue
        valid.append(desc)

    valid.sort(key=lambda d: (d.start, d.name))
    return [d.name for d in valid], rejected
