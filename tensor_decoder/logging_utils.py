import logging
from typing import Optional, Union

PACKAGE_LOGGER = "tensor_decoder"

# a biblioteca fica silenciosa até um script chamar setup_logging
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def resolve_level(level: Union[int, str]) -> int:
    """Aceita nível numérico ou nome ("debug", "WARNING", ...)."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Nível de logging desconhecido: {level!r}")
    return resolved


def verbosity_to_level(verbose: int) -> int:
    """0 -> WARNING, 1 -> INFO, 2+ -> DEBUG (um nível por -v da CLI)."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configura logging global com um formato padrão e ajusta o logger do pacote.

    Chamar isso apenas em CLIs ou scripts; a biblioteca nunca configura logging sozinha.
    """
    level = resolve_level(level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Retorna um logger filho de `tensor_decoder`.

    Nomes fora do pacote (ex.: "__main__") são pendurados sob ele, para que
    setup_logging controle também os scripts.
    """
    if not name:
        return logging.getLogger(PACKAGE_LOGGER)
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
