"""
Taxonomia de erros da decodificação.

Todos os erros são recuperáveis e herdam de DecodeError:

- HeaderError: falhas no prefixo/bloco de metadados (nada é decodificado).
- Erros por tensor: InvalidRangeError, AlignmentError, UnsupportedDtypeError,
  ShapeMismatchError, IoError.
- PartialDecodeError: agregação das falhas por tensor de uma passada completa.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from .reader import Reader
    from .tensor import Tensor


class DecodeError(Exception):
    """Base de todos os erros do pacote."""


class HeaderError(DecodeError):
    """Falha no nível do header: o arquivo inteiro é inutilizável."""


class TruncatedHeaderError(HeaderError):
    """Menos de 8 bytes disponíveis para o prefixo de tamanho."""


class TruncatedMetadataError(HeaderError):
    """Menos de N bytes disponíveis após o prefixo."""


class MalformedMetadataError(HeaderError):
    """JSON inválido ou descritor de tensor sem os campos obrigatórios."""


class InvalidRangeError(DecodeError):
    """data_offsets com start > end, ou fora da região de dados."""


class AlignmentError(DecodeError):
    """Faixa de bytes não divisível pela largura do elemento."""


class UnsupportedDtypeError(DecodeError):
    """dtype fora do conjunto suportado."""


class ShapeMismatchError(DecodeError):
    """prod(shape) diferente do número de elementos decodificados."""


class IoError(DecodeError):
    """Falha de leitura/seek no backing store (inclui leituras curtas)."""


class PartialDecodeError(DecodeError):
    """
    Um ou mais tensores falharam; os demais continuam utilizáveis.

    Atributos:
    - errors: nome -> DecodeError de cada tensor que falhou.
    - cancelled: nomes cujas tarefas foram canceladas antes de rodar.
    - tensors: tensores decodificados com sucesso.
    - metadata: valor opaco de `__metadata__`.
    """

    def __init__(
        self,
        errors: Mapping[str, DecodeError],
        tensors: Mapping[str, "Tensor"],
        metadata: Any = None,
        cancelled: Optional[List[str]] = None,
    ):
        self.errors: Dict[str, DecodeError] = dict(errors)
        self.tensors: Dict[str, "Tensor"] = dict(tensors)
        self.metadata = metadata
        self.cancelled: List[str] = list(cancelled or [])
        super().__init__(self._summary())

    def _summary(self) -> str:
        lines = [f"{len(self.errors)} tensor(es) falharam na decodificação"]
        for name, err in self.errors.items():
            lines.append(f"  {name}: {type(err).__name__}: {err}")
        if self.cancelled:
            lines.append(f"  {len(self.cancelled)} tarefa(s) cancelada(s)")
        return "\n".join(lines)

    def partial_reader(self) -> "Reader":
        """Reader contendo apenas os tensores utilizáveis."""
        from .reader import Reader

        return Reader(metadata=self.metadata, tensors=self.tensors)
