"""
Módulo de IO: leitura do header e acesso ao backing store.

Responsabilidades:
- Ler o prefixo de tamanho e o bloco JSON de metadados.
- Oferecer leitura concorrente de faixas de bytes (mmap, handle por leitura, buffer).
"""

from .byte_source import BufferSource, ByteSource, FileHandleSource, MmapSource, open_source
from .header import Header, TensorDescriptor, parse_header, parse_metadata

__all__ = [
    "BufferSource",
    "ByteSource",
    "FileHandleSource",
    "MmapSource",
    "open_source",
    "Header",
    "TensorDescriptor",
    "parse_header",
    "parse_metadata",
]
