"""
Abacus syntax tree
Expression and statement nodes produced by the parser and consumed by the interpreter
Pure functional style using immutable dictionaries
"""

from typing import Any, Dict, Iterable, List


# ============================================================================
# EXPRESSION NODES
# ============================================================================

def make_number(value: float) -> Dict:
  """Create a numeric literal node"""
  return {
      'type': 'NUMBER',
      'value': float(value)
  }


def make_call(name: str, args: Iterable[Dict] = ()) -> Dict:
  """Create a named call node (a bare name is a call with no arguments)"""
  return {
      'type': 'CALL',
      'value': {
          'name': name,
          'args': tuple(args)
      }
  }


# ============================================================================
# STATEMENT NODES
# ============================================================================

def make_expression_statement(expression: Dict) -> Dict:
  """Create a bare expression statement"""
  return {
      'type': 'EXPRESSION',
      'value': expression
  }


def make_binding(name: str, params: Iterable[str], body: Dict) -> Dict:
  """Create a binding statement; an empty parameter list is an assignment"""
  return {
      'type': 'BINDING',
      'value': {
          'name': name,
          'params': tuple(params),
          'body': body
      }
  }


# ============================================================================
# INSPECTION
# ============================================================================

def call_name(node: Dict) -> str:
  return node['value']['name']


def call_args(node: Dict) -> tuple:
  return node['value']['args']


def pretty_print_node(node: Dict, indent: int = 0) -> str:
  """Pretty print a syntax tree node for debugging"""
  pad = "  " * indent
  node_type = node['type']

  if node_type == 'NUMBER':
    return f"{pad}NUMBER({node['value']!r})\n"

  if node_type == 'CALL':
    result = f"{pad}CALL({call_name(node)!r})\n"
    for arg in call_args(node):
      result += pretty_print_node(arg, indent + 1)
    return result

  if node_type == 'EXPRESSION':
    return f"{pad}EXPRESSION\n" + pretty_print_node(node['value'], indent + 1)

  if node_type == 'BINDING':
    binding = node['value']
    params = ", ".join(binding['params'])
    return (f"{pad}BINDING({binding['name']!r}, [{params}])\n"
            + pretty_print_node(binding['body'], indent + 1))

  return f"{pad}UNKNOWN({node!r})\n"


def node_to_source(node: Dict) -> str:
  """Render an expression back to fully parenthesised source text"""
  node_type = node['type']

  if node_type == 'NUMBER':
    return repr(node['value'])

  name = call_name(node)
  args: List[Any] = [node_to_source(arg) for arg in call_args(node)]
  if not args:
    return name
  if name in ('^', '*', '/', '+', '-') and len(args) == 2:
    return f"({args[0]} {name} {args[1]})"
  return f"{name}({', '.join(args)})"
