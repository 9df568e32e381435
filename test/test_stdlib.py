"""
Tests for the builtin table and its native functions
"""

import math
import pytest
from stdlib import (
  DEFAULT_ENV,
  BUILTIN_NAMES,
  is_builtin,
  abacus_div,
  abacus_pow,
  abacus_sqrt,
  abacus_ln,
  abacus_sin
)
from environment import env_lookup
from interpreter import evaluate_text


def value_of(text):
  result = evaluate_text(DEFAULT_ENV, text)
  assert result['status'] == 'success', result
  return result['value']


class TestBuiltinTable:
  """Test the contents and construction of the default environment"""

  def test_builtin_names(self):
    assert BUILTIN_NAMES == {
        "^", "neg", "*", "/", "+", "-", "pi", "e",
        "sin", "cos", "tan", "sqrt", "cbrt", "root", "ln",
        "log", "log2", "log10"
    }
    assert is_builtin("log2")
    assert not is_builtin("ans")

  def test_table_is_read_only(self):
    with pytest.raises(TypeError):
      DEFAULT_ENV['bindings']['pi'] = None

  def test_derived_entries_capture_complete_table(self):
    for name in ("cbrt", "root", "log", "log2", "log10"):
      function = env_lookup(DEFAULT_ENV, name)
      assert function['closure_env'] is DEFAULT_ENV
    # cbrt refers to root and log2 to log, both bound after them
    assert env_lookup(env_lookup(DEFAULT_ENV, "cbrt")['closure_env'], "root") is not None
    assert env_lookup(env_lookup(DEFAULT_ENV, "log2")['closure_env'], "log") is not None

  def test_variants(self):
    assert env_lookup(DEFAULT_ENV, "^")['type'] == 'native_binary'
    assert env_lookup(DEFAULT_ENV, "neg")['type'] == 'native_unary'
    assert env_lookup(DEFAULT_ENV, "pi")['type'] == 'closure'


class TestBuiltinValues:
  """Test every builtin through the evaluator"""

  @pytest.mark.parametrize("text, expected", [
      ("2^10", 1024.0),
      ("neg(4)", -4.0),
      ("6*7", 42.0),
      ("7/2", 3.5),
      ("1+2", 3.0),
      ("5-8", -3.0),
      ("pi", math.pi),
      ("e", math.e),
      ("sin(0)", 0.0),
      ("cos(0)", 1.0),
      ("tan(0)", 0.0),
      ("sqrt(16)", 4.0),
      ("ln(e)", 1.0),
      ("cbrt(27)", 3.0),
      ("root(16, 4)", 2.0),
      ("log(10, 1000)", 3.0),
      ("log2(8)", 3.0),
      ("log10(1000)", 3.0),
  ])
  def test_builtin(self, text, expected):
    assert value_of(text) == pytest.approx(expected)


class TestFloatingPointEdgeCases:
  """Natives give IEEE results instead of raising"""

  def test_division_by_zero(self):
    assert abacus_div(1.0, 0.0) == math.inf
    assert abacus_div(-1.0, 0.0) == -math.inf
    assert abacus_div(1.0, -0.0) == -math.inf
    assert math.isnan(abacus_div(0.0, 0.0))

  def test_power(self):
    assert abacus_pow(0.0, -1.0) == math.inf
    assert abacus_pow(-0.0, -1.0) == -math.inf
    assert abacus_pow(0.0, -2.0) == math.inf
    assert math.isnan(abacus_pow(-8.0, 1.0 / 3.0))
    assert abacus_pow(10.0, 400.0) == math.inf
    assert abacus_pow(-10.0, 401.0) == -math.inf
    assert abacus_pow(-2.0, 3.0) == -8.0

  def test_sqrt_and_ln(self):
    assert math.isnan(abacus_sqrt(-1.0))
    assert abacus_ln(0.0) == -math.inf
    assert math.isnan(abacus_ln(-1.0))

  def test_trig_of_infinity(self):
    assert math.isnan(abacus_sin(math.inf))

  def test_through_evaluator(self):
    assert value_of("1/0") == math.inf
    assert value_of("-1/0") == -math.inf
    assert math.isnan(value_of("sqrt(-1)"))
    assert math.isnan(value_of("cbrt(-27)"))
    assert value_of("0^-1") == math.inf
