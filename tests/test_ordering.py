from tensor_decoder import InvalidRangeError, UnsupportedDtypeError, DType
from tensor_decoder.algorithms import order_descriptors, validate_descriptor
from tensor_decoder.io import TensorDescriptor


def _desc(name, start, end, dtype="U8"):
    return TensorDescriptor(name=name, dtype=dtype, shape=(end - start,), data_offsets=(start, end))


def test_orders_by_start_offset():
    descriptors = {
        "c": _desc("c", 8, 12),
        "a": _desc("a", 4, 8),
        "b": _desc("b", 0, 4),
    }
    order, rejected = order_descriptors(descriptors)
    assert order == ["b", "a", "c"]
    assert rejected == {}


def test_ties_are_broken_by_name():
    descriptors = {
        "z": _desc("z", 0, 0),
        "m": _desc("m", 0, 0),
        "a": _desc("a", 0, 4),
    }
    order, _ = order_descriptors(descriptors)
    assert order == ["a", "m", "z"]


def test_invalid_descriptors_are_rejected_individually():
    descriptors = {
        "ok": _desc("ok", 0, 4),
        "backwards": TensorDescriptor(name="backwards", dtype="U8", shape=(0,), data_offsets=(8, 4)),
        "weird": _desc("weird", 4, 8, dtype="C64"),
        "outside": _desc("outside", 8, 64),
    }
    order, rejected = order_descriptors(descriptors, data_size=16)
    assert order == ["ok"]
    assert isinstance(rejected["backwards"], InvalidRangeError)
    assert isinstance(rejected["weird"], UnsupportedDtypeError)
    assert isinstance(rejected["outside"], InvalidRangeError)


def test_validate_descriptor_resolves_dtype():
    assert validate_descriptor(_desc("t", 0, 4, dtype="BF16")) is DType.BF16
