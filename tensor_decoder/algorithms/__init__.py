"""
Algoritmos de baixo nível da decodificação:

- Validação e ordenação dos descritores.
- Reinterpretação de bytes crus por dtype (U8, F16, BF16, F32).
"""

from .decoder import decode_tensor, element_count
from .ordering import order_descriptors, validate_descriptor

__all__ = [
    "decode_tensor",
    "element_count",
    "order_descriptors",
    "validate_descriptor",
]
