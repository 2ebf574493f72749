import pytest
from dynvar.dynvar_field import DynVarField
from dynvar.dynvar_vars import DynVarLong
from dynvar.dynvar_datatypes import Byte, Int, Long, Double, IncompatibleOperandType

# --- Reads and writes ---

def test_new_box_holds_null():
    box = DynVarField()
    assert box.get() is None
    assert str(box) == "null"


def test_set_returns_the_box_for_chaining():
    box = DynVarField()
    assert box.set(1) is box
    assert box.add(1).multiply(3).subtract(1) is box
    assert box.get() == 5


def test_get_with_expected_type_checks_the_value():
    box = DynVarField(5)
    assert box.get(int) == 5
    with pytest.raises(IncompatibleOperandType):
        box.get(str)
    # null passes any expected type
    assert DynVarField().get(str) is None


def test_composite_reads_and_writes():
    box = DynVarField(1)
    assert box.set_then_get(2) == 2
    assert box.get_then_set(3) == 2
    assert box.get() == 3
    assert box.set_then_get_if_equals(3, 4) == 4
    assert box.set_then_get_if_equals(3, 5) == 4
    assert box.set_then_get_if_not_equals(4, 6) == 4
    assert box.set_then_get_if_not_equals(5, 6) == 6
    assert box.get_then_set_if_equals(6, 7) == 6
    assert box.get() == 7
    assert box.get_then_set_if_not_equals(7, 8) == 7
    assert box.get() == 7
    assert box.get_then_set_if_not_equals(1, 8) == 7
    assert box.get() == 8

# --- Conditionals ---

def test_set_if_equals_on_match():
    box = DynVarField()
    assert box.set(10).set_if_equals(10, 99) is True
    assert box.get() == 99


def test_set_if_equals_on_mismatch():
    box = DynVarField()
    assert box.set(10).set_if_equals(5, 99) is False
    assert box.get() == 10


def test_set_if_not_equals():
    box = DynVarField("a")
    assert box.set_if_not_equals("a", "b") is False
    assert box.set_if_not_equals("z", "b") is True
    assert box.get() == "b"


def test_null_never_equals_anything():
    box = DynVarField()
    assert box.if_equals(None) is False
    assert box.if_not_equals(None) is True
    assert box.set_if_equals(None, 1) is False
    assert box.get() is None
    assert box.set_if_not_equals(None, 1) is True
    assert box.get() == 1


def test_null_conditional_get_then_set():
    assert DynVarField().get_then_set_if_equals(None, 1) is None
    box = DynVarField()
    assert box.get_then_set_if_not_equals(None, 1) is None
    assert box.get() == 1


def test_equals_takes_any_number_of_candidates():
    box = DynVarField(3)
    assert box.equals(1, 2, 3)
    assert not box.equals(1, 2)
    assert not box.equals()
    assert box.equals(DynVarField(3))
    assert DynVarField().equals(None)

# --- Arithmetic ---

def test_add_to_null_stores_the_argument():
    box = DynVarField()
    box.add(2.5)
    assert box.get() == 2.5


def test_int_box_keeps_its_type_against_a_double():
    box = DynVarField(5).add(2.5)
    assert box.get() == 7
    assert type(box.get()) is Int


def test_integer_division_by_a_double_truncates():
    assert DynVarField().set(7).divide(2.0).get() == 3
    assert DynVarField().set(-7).divide(2).get() == -3


def test_double_box_divides_as_floating():
    assert DynVarField(Double(7.0)).divide(2).get() == 3.5
    assert DynVarField(1.0).divide(0).get() == float("inf")


def test_integer_division_by_zero_propagates():
    with pytest.raises(ZeroDivisionError):
        DynVarField(1).divide(0)


def test_add_concatenates_onto_strings():
    box = DynVarField("a")
    box.add(1).add(True).add(None).add(0.5)
    assert box.get() == "a1truenull0.5"


@pytest.mark.parametrize("value", [None, True, [1, 2], object()])
def test_arithmetic_on_non_numeric_values_is_a_no_op(value):
    box = DynVarField(value)
    box.subtract(1).multiply(2).divide(3)
    assert box.value is value


def test_unmatched_right_operand_raises():
    with pytest.raises(IncompatibleOperandType):
        DynVarField(5).add("x")
    with pytest.raises(TypeError):
        DynVarField(5).multiply(None)


def test_narrow_types_wrap_on_overflow():
    assert DynVarField(Byte(127)).add(1).get() == -128
    assert DynVarField(Long(2 ** 63 - 1)).add(1).get() == -(2 ** 63)


def test_bitwise_xor():
    assert DynVarField(5).bitwise_xor(3).get() == 6
    assert DynVarField(Long(2 ** 40)).bitwise_xor(1).get() == 2 ** 40 + 1
    box = DynVarField(1.5)
    assert box.bitwise_xor(3).get() == 1.5
    assert DynVarField("s").bitwise_xor(3).get() == "s"


def test_bitwise_xor_requires_an_integral_argument():
    with pytest.raises(IncompatibleOperandType):
        DynVarField(5).bitwise_xor(1.0)

# --- Protocol ---

def test_str_uses_persisted_text():
    assert str(DynVarField(True)) == "true"
    assert str(DynVarField(Double(2.0))) == "2.0"
    assert repr(DynVarField(1)) == "DynVarField(1)"


def test_boxes_compare_by_value():
    assert DynVarField(1) == DynVarField(1)
    assert DynVarField(1) != DynVarField(2)
    assert DynVarField(1) != 1
    assert hash(DynVarField("k")) == hash("k")


def test_booleans_never_equal_numbers():
    box = DynVarField(1)
    assert box.set_if_equals(True, 99) is False
    assert box.get() == 1
    assert box.if_not_equals(True)
    assert not box.equals(True)
    assert DynVarField(False).equals(0) is False
    assert DynVarField(True) != DynVarField(1)
    assert DynVarField(True).equals(True)


def test_equals_and_if_equals_agree_on_typed_variants():
    box = DynVarLong().set(Double(5.5))
    assert box.if_equals(5)
    assert box.equals(5)
    assert box.equals(DynVarLong().set(Double(5.9)))
