# tensor_decoder/loading/parallel_loader.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from ..config import ReaderConfig
from ..errors import DecodeError, IoError
from ..io import ByteSource, TensorDescriptor
from ..logging_utils import get_logger
from ..tensor import Tensor
from .tensor_task import TensorTask


logger = get_logger(__name__)


@dataclass
class LoadOutcome:
    """Resultado agregado do join: tensores prontos + falhas por tensor."""
    tensors: Dict[str, Tensor] = field(default_factory=dict)
    errors: Dict[str, DecodeError] = field(default_factory=dict)
    cancelled: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and not self.cancelled


@dataclass
class ParallelLoader:
    """
    Distribui a decodificação dos tensores em um ThreadPoolExecutor.

    Responsabilidades:
    - Submeter uma TensorTask por nome, na ordem recebida.
    - Esperar todas (join) e agregar resultados em um LoadOutcome.
    - Coletar erros por tensor sem interromper os irmãos (collect-all).
    - Cancelar tarefas ainda não iniciadas em IoError (ou em qualquer erro
      com fail_fast); tarefas em andamento terminam normalmente.
    """

    config: ReaderConfig = field(default_factory=ReaderConfig)

    def load(
        self,
        source: ByteSource,
        data_start: int,
        descriptors: Mapping[str, TensorDescriptor],
        order: Sequence[str],
    ) -> LoadOutcome:
        outcome = LoadOutcome()
        if not order:
            return outcome

        logger.info(f"Decodificando {len(order)} tensor(es) (max_workers={self.config.max_workers})")

        futures: Dict[Future, str] = {}
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            for name in order:
                task = TensorTask(
                    descriptor=descriptors[name],
                    source=source,
                    data_start=data_start,
                    check_shape=self.config.check_shape,
                )
                futures[executor.submit(task.run)] = name

            # Espera conclusão; erros de decodificação viram falhas por tensor
            for fut in as_completed(futures):
                name = futures[fut]
                if fut.cancelled():
                    outcome.cancelled.append(name)
                    continue
                try:
                    outcome.tensors[name] = fut.result()
                except DecodeError as e:
                    logger.warning(f"Falha ao decodificar {name!r}: {type(e).__name__}: {e}")
                    outcome.errors[name] = e
                    if isinstance(e, IoError) or self.config.fail_fast:
                        self._cancel_pending(futures)
                except Exception as e:
                    logger.exception(f"Erro inesperado ao decodificar {name!r}: {e}")
                    self._cancel_pending(futures)
                    raise

        # Resultado na ordem de processamento, independente da ordem de conclusão
        outcome.tensors = {n: outcome.tensors[n] for n in order if n in outcome.tensors}
        cancelled = set(outcome.cancelled)
        outcome.cancelled = [n for n in order if n in cancelled]
        return outcome

    @staticmethod
    def _cancel_pending(futures: Mapping[Future, str]) -> None:
        cancelled = sum(1 for fut in futures if fut.cancel())
        if cancelled:
            logger.warning(f"{cancelled} tarefa(s) pendente(s) cancelada(s)")
