"""
Abacus runtime environment and function model
Environments are persistent chains of frames: extending one prepends a frame
and never touches the frames already there, so older environments stay valid
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from syntax import make_number, node_to_source


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Mapping] = None) -> Dict:
  """Create an immutable runtime environment frame"""
  return {
      'parent': parent,
      'bindings': bindings if bindings is not None else {}
  }


def make_closure(closure_env: Dict, params: Sequence[str], body: Dict) -> Dict:
  """Create a closure over the environment visible where it was defined"""
  return {
      'type': 'closure',
      'closure_env': closure_env,
      'params': tuple(params),
      'body': body
  }


def make_native_unary(name: str, func: Callable[[float], float]) -> Dict:
  return {
      'type': 'native_unary',
      'name': name,
      'func': func
  }


def make_native_binary(name: str, func: Callable[[float, float], float]) -> Dict:
  return {
      'type': 'native_binary',
      'name': name,
      'func': func
  }


def as_constant(value: float) -> Dict:
  """Wrap a number as a zero-parameter closure so constants reuse the call machinery"""
  return make_closure(make_runtime_env(), (), make_number(value))


def as_function(table: Dict, params: Sequence[str], body: Dict) -> Dict:
  """Wrap a definition as a closure capturing the table it is defined against"""
  return make_closure(table, params, body)


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_extend(env: Dict, name: str, function: Dict) -> Dict:
  """Return new environment with name bound in front of env"""
  return make_runtime_env(parent=env, bindings={name: function})


def env_lookup(env: Optional[Dict], name: str) -> Optional[Dict]:
  """Look up a name, newest frame first"""
  while env is not None:
    if name in env['bindings']:
      return env['bindings'][name]
    env = env['parent']
  return None


def env_names(env: Optional[Dict]) -> List[str]:
  """Visible names, newest first, without the ones they shadow"""
  seen = set()
  names = []
  while env is not None:
    for name in env['bindings']:
      if name not in seen:
        seen.add(name)
        names.append(name)
    env = env['parent']
  return names


# ============================================================================
# INSPECTION
# ============================================================================

def is_constant(function: Dict) -> bool:
  return (function['type'] == 'closure'
          and not function['params']
          and function['body']['type'] == 'NUMBER')


def describe_function(function: Dict) -> str:
  """Short human readable summary of a function value"""
  kind = function['type']

  if kind == 'native_unary':
    return f"<native/1 {function['name']}>"
  if kind == 'native_binary':
    return f"<native/2 {function['name']}>"

  if is_constant(function):
    value: Any = function['body']['value']
    return str(value)

  params = ", ".join(function['params'])
  return f"<function ({params}) = {node_to_source(function['body'])}>"
