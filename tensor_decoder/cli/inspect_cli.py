import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from ..config import ReaderConfig
from ..errors import HeaderError, IoError, PartialDecodeError
from ..logging_utils import setup_logging, verbosity_to_level
from ..reader import Reader


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"deve ser >= 1, recebido {n}")
    return n


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Decode a tensor container file and list its tensors.")
    p.add_argument("path", type=str, help="Arquivo de tensores (header JSON + dados crus).")
    p.add_argument("--workers", type=_positive_int, default=None, help="Threads de decodificação (default: executor).")
    p.add_argument("--no-mmap", action="store_true", help="Um handle por leitura em vez de mmap.")
    p.add_argument("--fail-fast", action="store_true", help="Cancela tarefas pendentes no primeiro erro.")
    p.add_argument("--no-shape-check", action="store_true", help="Não confere prod(shape) com o buffer.")
    p.add_argument("--show-metadata", action="store_true", help="Imprime o __metadata__ como JSON.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v: INFO, -vv: DEBUG.")
    return p


def _print_table(reader: Reader) -> None:
    for name, tensor in reader.tensors.items():
        print(f"{name}\t{tensor.dtype.value}\t{list(tensor.shape)}\t{tensor.numel}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    setup_logging(verbosity_to_level(args.verbose))

    config = ReaderConfig(
        max_workers=args.workers,
        use_mmap=not args.no_mmap,
        fail_fast=args.fail_fast,
        check_shape=not args.no_shape_check,
    )

    try:
        reader = Reader.open(Path(args.path), config=config)
    except (HeaderError, IoError) as e:
        print(f"erro: {type(e).__name__}: {e}", file=sys.stderr)
        return 2
    except PartialDecodeError as e:
        _print_table(e.partial_reader())
        print(f"erro: {e}", file=sys.stderr)
        return 1

    if args.show_metadata:
        print(json.dumps(reader.metadata, indent=2))
    _print_table(reader)
    return 0


if __name__ == "__main__":
    sys.exit(main())
