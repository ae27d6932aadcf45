import pytest

from rmcontrol.filter import Filter, FirstOrderFilter


def test_filter_is_abstract():
    with pytest.raises(TypeError):
        Filter()


def test_initial_value_is_zero():
    assert FirstOrderFilter(0.3).value == 0.0


def test_coefficient_one_passes_input_through():
    f = FirstOrderFilter(1.0)
    assert f.update(12.5) == 12.5
    assert f.update(-3.0) == -3.0


def test_coefficient_zero_holds_value():
    f = FirstOrderFilter(0.0)
    f.update(100.0)
    assert f.value == 0.0


def test_half_coefficient_example():
    f = FirstOrderFilter(0.5)
    assert f.update(8.0) == pytest.approx(4.0)


def test_update_returns_value():
    f = FirstOrderFilter(0.2)
    assert f.update(5.0) == f.value


def test_converges_monotonically_to_constant_input():
    f = FirstOrderFilter(0.3)
    values = [f.update(10.0) for _ in range(60)]
    assert all(a < b for a, b in zip(values, values[1:]))
    assert all(v <= 10.0 for v in values)
    assert values[-1] == pytest.approx(10.0, abs=1e-6)