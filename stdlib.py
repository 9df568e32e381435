"""
Abacus Standard Library
The builtin table: operators, constants, native functions, and functions
defined in terms of other entries of the same table
"""

from types import MappingProxyType
from functools import wraps
from typing import Callable, Dict
import math
import operator

from syntax import make_call, make_number
from environment import (
  make_runtime_env,
  make_native_unary,
  make_native_binary,
  as_constant,
  as_function,
  env_names
)


# ============================================================================
# NATIVE FUNCTIONS
# ============================================================================
# Natives follow IEEE-754 double semantics: out-of-domain inputs give nan or
# an infinity instead of raising.

def domain_safe(func: Callable[[float], float]) -> Callable[[float], float]:
  """Map Python's math domain errors to nan"""
  @wraps(func)
  def safe(x: float) -> float:
    try:
      return func(x)
    except ValueError:
      return math.nan
  return safe


def is_odd_integer(y: float) -> bool:
  return math.isfinite(y) and y.is_integer() and y % 2 == 1


def abacus_div(x: float, y: float) -> float:
  """Division; x / 0 is a signed infinity and 0 / 0 is nan"""
  if y == 0.0:
    if x == 0.0 or math.isnan(x):
      return math.nan
    return math.copysign(math.inf, x) * math.copysign(1.0, y)
  return x / y


def abacus_pow(x: float, y: float) -> float:
  try:
    return math.pow(x, y)
  except OverflowError:
    if x < 0 and is_odd_integer(y):
      return -math.inf
    return math.inf
  except ValueError:
    # zero to a negative power, or a negative base with a fractional exponent
    if x == 0.0:
      return math.copysign(math.inf, x) if is_odd_integer(y) else math.inf
    return math.nan


def abacus_sqrt(x: float) -> float:
  if x < 0:
    return math.nan
  return math.sqrt(x)


def abacus_ln(x: float) -> float:
  if x == 0.0:
    return -math.inf
  if x < 0:
    return math.nan
  return math.log(x)


abacus_sin = domain_safe(math.sin)
abacus_cos = domain_safe(math.cos)
abacus_tan = domain_safe(math.tan)


# ============================================================================
# BUILTIN TABLE
# ============================================================================

def create_builtin_runtime_env() -> Dict:
  """Create the default environment

  Derived entries refer to siblings that may come later in the table, so the
  table frame is allocated first with a read-only view over its bindings, the
  closures capture that frame, and only then are the bindings filled in.
  Once this returns nothing holds the mutable dict any more.
  """
  bindings: Dict[str, Dict] = {}
  table = make_runtime_env(bindings=MappingProxyType(bindings))

  def function(params, body):
    return as_function(table, params, body)

  def var(name):
    return make_call(name)

  entries = [
      ("^", make_native_binary("^", abacus_pow)),
      ("neg", make_native_unary("neg", operator.neg)),
      ("*", make_native_binary("*", operator.mul)),
      ("/", make_native_binary("/", abacus_div)),
      ("+", make_native_binary("+", operator.add)),
      ("-", make_native_binary("-", operator.sub)),
      ("pi", as_constant(math.pi)),
      ("e", as_constant(math.e)),
      ("sin", make_native_unary("sin", abacus_sin)),
      ("cos", make_native_unary("cos", abacus_cos)),
      ("tan", make_native_unary("tan", abacus_tan)),
      ("sqrt", make_native_unary("sqrt", abacus_sqrt)),
      ("cbrt", function(["x"], make_call("root", [var("x"), make_number(3.0)]))),
      ("root", function(
          ["x", "k"],
          make_call("^", [var("x"), make_call("/", [make_number(1.0), var("k")])])
      )),
      ("ln", make_native_unary("ln", abacus_ln)),
      ("log", function(
          ["b", "x"],
          make_call("/", [make_call("ln", [var("x")]), make_call("ln", [var("b")])])
      )),
      ("log2", function(["x"], make_call("log", [make_number(2.0), var("x")]))),
      ("log10", function(["x"], make_call("log", [make_number(10.0), var("x")]))),
  ]

  bindings.update(entries)
  return table


DEFAULT_ENV = create_builtin_runtime_env()

BUILTIN_NAMES = frozenset(env_names(DEFAULT_ENV))


def is_builtin(name: str) -> bool:
  """True if name belongs to the default table, shadowed or not"""
  return name in BUILTIN_NAMES
