import pytest

from pgtypes.append import Safe, append
from pgtypes.flags import Flag
from pgtypes.in_op import in_multi, in_values


def test_in_values_non_slice_error():
    with pytest.raises(TypeError, match=r"pg: In\(non-slice dict\)"):
        in_values({"a": 1}).append_value(0)


@pytest.mark.parametrize(
    "op, wanted",
    [
        (in_multi(), ""),
        (in_multi(1), "1"),
        (in_multi(1, 2, 3), "1,2,3"),
        (in_multi([1, 2, 3]), "(1,2,3)"),
        (in_multi([1, 2], [3, 4]), "(1,2),(3,4)"),
        (in_multi(Safe("{1,2}"), Safe("{3,4}")), "{1,2},{3,4}"),
    ],
)
def test_in_multi(op, wanted):
    assert op.append_value(0) == wanted


def test_in_values_list():
    assert in_values([1, 2, 3]).append_value(0) == "1,2,3"
    assert in_values((1, 2)).append_value(0) == "1,2"


def test_in_values_quotes_strings():
    assert in_values(["a", "b"]).append_value(Flag.QUOTE) == "'a','b'"


def test_in_values_null_element():
    assert in_values([1, None]).append_value(Flag.QUOTE) == "1,NULL"


def test_in_op_through_append():
    assert append(in_values([1, 2]), Flag.QUOTE) == "1,2"
    assert append(in_values("ab"), Flag.QUOTE) == "?!(pg: In(non-slice str))"