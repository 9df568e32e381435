"""
Abacus Interpreter - Pure Functional Style
Evaluates statements against a persistent environment and returns a new one
Errors are returned as values; nothing here raises for a bad program
"""

from typing import Dict, List, Optional, Tuple

from syntax import call_name, call_args
from environment import (
  make_closure,
  as_constant,
  env_extend,
  env_lookup
)
from stdlib import is_builtin
from parsing import default_parser, create_debug_parser
from error_handling import (
  AbacusParseError,
  make_parse_error,
  undefined_name_error,
  arity_error,
  redefinition_error,
  depth_error
)


# (value, None) on success, (None, error) on failure
Evaluation = Tuple[Optional[float], Optional[Dict]]


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_success(env: Dict, value: Optional[float]) -> Dict:
  """Create a successful statement result: the new environment and produced value"""
  return {
      'status': 'success',
      'env': env,
      'value': value
  }


def make_failure(error: Dict) -> Dict:
  """Create a failed statement result; the caller keeps its old environment"""
  return {
      'status': 'error',
      'error': error
  }


def is_success(result: Dict) -> bool:
  return result['status'] == 'success'


# ============================================================================
# EXPRESSION EVALUATION
# ============================================================================

def eval_expression(env: Dict, expr: Dict, debug: bool = False) -> Evaluation:
  """
  Reduce an expression to a float under env.
  Returns (value, None), or (None, error) for the first error encountered.
  """
  node_type = expr['type']

  if node_type == "NUMBER":
    return eval_number(env, expr, debug)
  elif node_type == "CALL":
    return eval_call(env, expr, debug)

  raise ValueError(f"Unknown expression node type: {node_type}")


def eval_number(env: Dict, expr: Dict, debug: bool = False) -> Evaluation:
  """Evaluate number literal"""
  if debug:
    print(f"Evaluating: NUMBER {expr['value']}")
  return expr['value'], None


def eval_arguments(env: Dict, args: Tuple[Dict, ...], debug: bool = False) -> Tuple[Optional[List[float]], Optional[Dict]]:
  """Evaluate arguments left to right, stopping at the first error"""
  values = []
  for arg in args:
    value, error = eval_expression(env, arg, debug)
    if error is not None:
      return None, error
    values.append(value)
  return values, None


def eval_call(env: Dict, expr: Dict, debug: bool = False) -> Evaluation:
  """Evaluate a named call, dispatching on the function found and the argument count"""
  name = call_name(expr)
  args = call_args(expr)

  if debug:
    print(f"Evaluating: CALL {name} with {len(args)} argument(s)")

  function = env_lookup(env, name)
  if function is None:
    return None, undefined_name_error(name)

  kind = function['type']

  if kind == 'closure' and len(args) == 1 and not function['params']:
    return eval_implicit_multiplication(env, function, args[0], debug)

  if kind == 'closure' and len(args) == len(function['params']):
    return apply_closure(env, function, args, debug)

  if kind == 'native_unary' and len(args) == 1:
    values, error = eval_arguments(env, args, debug)
    if error is not None:
      return None, error
    return function['func'](values[0]), None

  if kind == 'native_binary' and len(args) == 2:
    values, error = eval_arguments(env, args, debug)
    if error is not None:
      return None, error
    return function['func'](values[0], values[1]), None

  return None, arity_error(name)


def eval_implicit_multiplication(env: Dict, function: Dict, arg: Dict, debug: bool = False) -> Evaluation:
  """`pi 2` and `x(3)` on a constant multiply instead of failing on arity"""
  if debug:
    print("Evaluating: implicit multiplication")

  left, error = eval_expression(function['closure_env'], function['body'], debug)
  if error is not None:
    return None, error

  right, error = eval_expression(env, arg, debug)
  if error is not None:
    return None, error

  return left * right, None


def apply_closure(env: Dict, function: Dict, args: Tuple[Dict, ...], debug: bool = False) -> Evaluation:
  """Bind evaluated arguments in front of the captured environment and run the body"""
  values, error = eval_arguments(env, args, debug)
  if error is not None:
    return None, error

  # Earlier parameters shadow later ones with the same name
  call_env = function['closure_env']
  for param, value in reversed(list(zip(function['params'], values))):
    call_env = env_extend(call_env, param, as_constant(value))

  return eval_expression(call_env, function['body'], debug)


# ============================================================================
# STATEMENT EVALUATION
# ============================================================================

def eval_expression_statement(env: Dict, statement: Dict, debug: bool = False) -> Dict:
  value, error = eval_expression(env, statement['value'], debug)
  if error is not None:
    return make_failure(error)
  return make_success(env_extend(env, "ans", as_constant(value)), value)


def eval_binding(env: Dict, statement: Dict, debug: bool = False) -> Dict:
  binding = statement['value']
  name = binding['name']
  params = binding['params']

  if is_builtin(name):
    return make_failure(redefinition_error(name))

  if not params:
    value, error = eval_expression(env, binding['body'], debug)
    if error is not None:
      return make_failure(error)
    if debug:
      print(f"Bound: {name} = {value}")
    return make_success(env_extend(env, name, as_constant(value)), value)

  if debug:
    print(f"Defined function: {name}({', '.join(params)})")
  return make_success(env_extend(env, name, make_closure(env, params, binding['body'])), None)


def evaluate(env: Dict, statement: Dict, debug: bool = False) -> Dict:
  """
  Evaluate one statement and return a result dict.
  On success the result carries the extended environment and the produced
  value (None for function definitions); on failure only the error.
  """
  try:
    if statement['type'] == 'EXPRESSION':
      return eval_expression_statement(env, statement, debug)
    elif statement['type'] == 'BINDING':
      return eval_binding(env, statement, debug)
  except RecursionError:
    return make_failure(depth_error())

  raise ValueError(f"Unknown statement node type: {statement['type']}")


def evaluate_text(env: Dict, text: str, debug: bool = False) -> Dict:
  """Parse text as one statement and evaluate it"""
  parser = create_debug_parser() if debug else default_parser()
  try:
    statement = parser.parse_statement(text)
  except AbacusParseError as e:
    return make_failure(make_parse_error(str(e)))

  return evaluate(env, statement, debug)
