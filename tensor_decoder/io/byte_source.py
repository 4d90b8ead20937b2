# tensor_decoder/io/byte_source.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import mmap
import os

from ..errors import IoError


class ByteSource:
    """
    Acesso somente-leitura ao backing store.

    `read_at` deve ser seguro para chamadas concorrentes: nenhuma
    implementação compartilha um cursor entre tarefas.
    """

    size: int

    def read_at(self, offset: int, size: int) -> bytes:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "ByteSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _check_bounds(self, offset: int, size: int) -> None:
        if offset + size > self.size:
            raise IoError(
                f"Leitura curta: pedido [{offset}, {offset + size}) mas o store tem {self.size} bytes"
            )


@dataclass
class BufferSource(ByteSource):
    """Store em memória (usado quando a entrada é um stream)."""
    data: bytes
    base: int = 0

    def __post_init__(self):
        # offsets são absolutos no arquivo; `base` é onde `data` começa
        self.size = self.base + len(self.data)

    def read_at(self, offset: int, size: int) -> bytes:
        self._check_bounds(offset, size)
        start = offset - self.base
        if start < 0:
            raise IoError(f"Offset {offset} anterior ao início do buffer ({self.base})")
        return bytes(self.data[start:start + size])


@dataclass
class FileHandleSource(ByteSource):
    """Cada leitura abre seu próprio handle, faz seek e lê."""
    path: Path

    def __post_init__(self):
        self.path = Path(self.path)
        try:
            self.size = self.path.stat().st_size
        except OSError as e:
            raise IoError(f"Falha ao abrir {self.path}: {e}") from e

    def read_at(self, offset: int, size: int) -> bytes:
        self._check_bounds(offset, size)
        try:
            with open(self.path, "rb") as f:
                f.seek(offset)
                data = f.read(size)
        except OSError as e:
            raise IoError(f"Falha ao ler {self.path} em {offset}: {e}") from e
        if len(data) != size:
            raise IoError(f"Leitura curta em {self.path}: esperados {size} bytes, lidos {len(data)}")
        return data


@dataclass
class MmapSource(ByteSource):
    """
    Um único mmap somente-leitura compartilhado entre as tarefas.

    Cada tarefa fatia sua própria faixa; fatiar um mmap não usa o cursor do arquivo.
    """
    path: Path
    _mm: Optional[mmap.mmap] = field(default=None, repr=False)

    def __post_init__(self):
        self.path = Path(self.path)
        try:
            with open(self.path, "rb") as f:
                self.size = os.fstat(f.fileno()).st_size
                # mmap de tamanho zero não é permitido
                if self.size > 0:
                    self._mm = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
        except OSError as e:
            raise IoError(f"Falha ao mapear {self.path}: {e}") from e

    def read_at(self, offset: int, size: int) -> bytes:
        self._check_bounds(offset, size)
        if size == 0:
            return b""
        if self._mm is None:
            raise IoError(f"mmap de {self.path} já foi fechado")
        return self._mm[offset:offset + size]

    def close(self) -> None:
        if self._mm is not None:
            self._mm.close()
            self._mm = None


def open_source(path: Union[str, Path], use_mmap: bool = True) -> ByteSource:
    if use_mmap:
        return MmapSource(path=Path(path))
    return FileHandleSource(path=Path(path))
