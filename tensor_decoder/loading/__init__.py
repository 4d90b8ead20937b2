"""
Orquestração da decodificação:

- ParallelLoader: fan-out das tarefas em um pool de threads + join.
- TensorTask: decodificação de um único tensor (thread-safe).
"""

from .parallel_loader import LoadOutcome, ParallelLoader
from .tensor_task import TensorTask

__all__ = ["LoadOutcome", "ParallelLoader", "TensorTask"]
