from dataclasses import dataclass
from typing import Optional


@dataclass
class ReaderConfig:
    """
    Configurações de leitura/decodificação de um arquivo de tensores.

    Essa classe deve ser simples de serializar (e.g. para JSON/YAML),
    pois é repassada intacta para o loader paralelo e para a CLI.
    """
    # None -> deixa o ThreadPoolExecutor escolher
    max_workers: Optional[int] = None

    # Backing store: mmap compartilhado (True) ou um handle por leitura (False)
    use_mmap: bool = True

    # Cancela tarefas pendentes no primeiro erro de qualquer tipo
    fail_fast: bool = False

    # Exige prod(shape) == número de elementos decodificados
    check_shape: bool = True

    # Limite do bloco de metadados (N), em bytes
    max_header_size: int = 100_000_000

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"ReaderConfig.max_workers deve ser >= 1 ou None, recebido {self.max_workers}")
        if self.max_header_size < 0:
            raise ValueError(f"ReaderConfig.max_header_size deve ser >= 0, recebido {self.max_header_size}")

    def to_dict(self) -> dict:
        return {
            "max_workers": self.max_workers,
            "use_mmap": self.use_mmap,
            "fail_fast": self.fail_fast,
            "check_shape": self.check_shape,
            "max_header_size": self.max_header_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReaderConfig":
        return cls(
            max_workers=data.get("max_workers"),
            use_mmap=data.get("use_mmap", True),
            fail_fast=data.get("fail_fast", False),
            check_shape=data.get("check_shape", True),
            max_header_size=data.get("max_header_size", 100_000_000),
        )
