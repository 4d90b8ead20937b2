# tensor_decoder/reader.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
import io
from typing import Any, BinaryIO, Dict, Iterator, KeysView, Mapping, Optional, Tuple, Union

from .algorithms import order_descriptors
from .config import ReaderConfig
from .dtypes import DType
from .errors import IoError, PartialDecodeError
from .io import BufferSource, ByteSource, Header, open_source, parse_header
from .loading import ParallelLoader
from .logging_utils import get_logger
from .tensor import Tensor


logger = get_logger(__name__)

Source = Union[str, Path, BinaryIO]


@dataclass(frozen=True)
class Reader:
    """
    Resultado imutável de uma passada completa de decodificação.

    Expõe:
    - metadata: valor opaco de `__metadata__` (None se ausente).
    - tensors: mapping somente-leitura nome -> Tensor, na ordem de processamento.
    """
    metadata: Any
    tensors: Mapping[str, Tensor] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "tensors", MappingProxyType(dict(self.tensors)))

    @classmethod
    def open(cls, source: Source, config: Optional[ReaderConfig] = None) -> "Reader":
        """
        Ponto de entrada principal.

        Fluxo:
        1. Lê o header (prefixo + JSON de metadados).
        2. Valida e ordena os descritores por offset inicial.
        3. Decodifica todos os tensores em paralelo.
        4. Agrega: Reader completo, ou PartialDecodeError com as falhas por tensor.

        Erros de header (TruncatedHeaderError, TruncatedMetadataError,
        MalformedMetadataError, IoError) são levantados diretamente.
        """
        config = config or ReaderConfig()

        if isinstance(source, (str, Path)):
            path = Path(source)
            logger.info(f"Abrindo arquivo de tensores: {path}")
            try:
                with path.open("rb") as f:
                    header = parse_header(f, config.max_header_size)
            except OSError as e:
                raise IoError(f"Falha ao abrir {path}: {e}") from e
            with open_source(path, use_mmap=config.use_mmap) as store:
                return cls._decode(header, store, config)

        header = parse_header(source, config.max_header_size)
        try:
            data = source.read()
        except OSError as e:
            raise IoError(f"Falha ao ler região de dados: {e}") from e
        with BufferSource(data=data, base=header.data_start) as store:
            return cls._decode(header, store, config)

    @classmethod
    def from_bytes(cls, data: bytes, config: Optional[ReaderConfig] = None) -> "Reader":
        return cls.open(io.BytesIO(data), config)

    @classmethod
    def _decode(cls, header: Header, store: ByteSource, config: ReaderConfig) -> "Reader":
        data_size = store.size - header.data_start
        order, rejected = order_descriptors(header.descriptors, data_size=data_size)

        loader = ParallelLoader(config=config)
        outcome = loader.load(store, header.data_start, header.descriptors, order)

        errors = dict(rejected)
        errors.update(outcome.errors)
        if errors or outcome.cancelled:
            raise PartialDecodeError(
                errors=errors,
                tensors=outcome.tensors,
                metadata=header.metadata,
                cancelled=outcome.cancelled,
            )

        logger.info(f"Decodificação concluída: {len(outcome.tensors)} tensor(es)")
        return cls(metadata=header.metadata, tensors=outcome.tensors)

    def __getitem__(self, name: str) -> Tensor:
        return self.tensors[name]

    def __contains__(self, name: object) -> bool:
        return name in self.tensors

    def __iter__(self) -> Iterator[str]:
        return iter(self.tensors)

    def __len__(self) -> int:
        return len(self.tensors)

    def keys(self) -> KeysView[str]:
        return self.tensors.keys()

    def get_tensor(self, name: str) -> Tensor:
        return self.tensors[name]

    def shape(self, name: str) -> Tuple[int, ...]:
        return self.tensors[name].shape

    def dtype(self, name: str) -> DType:
        return self.tensors[name].dtype

    def shapes(self) -> Dict[str, Tuple[int, ...]]:
        return {name: t.shape for name, t in self.tensors.items()}
