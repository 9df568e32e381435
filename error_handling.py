"""
Error handling for the Abacus interpreter
Interpret errors are immutable dictionaries; only the parser raises
"""

from typing import List, Optional, Dict
from pyparsing import ParseException


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

PARSE = 'parse'
EVAL = 'eval'


def make_interpret_error(category: str, kind: str, message: str, name: Optional[str] = None) -> Dict:
    """Create an immutable interpret error structure"""
    return {
        'category': category,
        'kind': kind,
        'name': name,
        'message': message
    }


def make_parse_error(message: str) -> Dict:
    """Wrap a (possibly multi-line) parser message as an interpret error"""
    return make_interpret_error(PARSE, 'ParseError', message)


def make_eval_error(kind: str, message: str, name: Optional[str] = None) -> Dict:
    return make_interpret_error(EVAL, kind, message, name)


# ============================================================================
# EVALUATION ERROR BUILDERS
# ============================================================================

def undefined_name_error(name: str) -> Dict:
    return make_eval_error(
        'UndefinedNameError', f"undefined function or variable {name}", name
    )


def arity_error(name: str) -> Dict:
    return make_eval_error(
        'ArityError', f"wrong number of arguments for function {name}", name
    )


def redefinition_error(name: str) -> Dict:
    return make_eval_error(
        'RedefinitionError', f"can't redefine built-in function or variable {name}", name
    )


def depth_error() -> Dict:
    return make_eval_error('DepthError', "expression is nested too deeply")


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def is_parse_error(error: Dict) -> bool:
    return error['category'] == PARSE


def is_eval_error(error: Dict) -> bool:
    return error['category'] == EVAL


def format_interpret_error(error: Dict) -> str:
    """Render an interpret error on a single line"""
    if is_parse_error(error):
        return "Parse Error " + error['message'].replace('\n', ' ')
    return "Evaluation Error: " + error['message']


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of input"
    return "unknown"


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    if "{" in got or "}" in got or "[" in got or "]" in got:
        suggestions.append("use parentheses () for grouping and function arguments")

    if "==" in source_text:
        suggestions.append("bindings use a single '=', e.g. x = 2")

    if source_text.count("(") != source_text.count(")"):
        suggestions.append("check that every '(' has a matching ')'")

    if ";" in got:
        suggestions.append("enter one statement at a time")

    return suggestions


def format_parse_error(line: int, column: int, message: str, got: Optional[str],
                       suggestions: Optional[List[str]] = None) -> str:
    """Format parse error details as a multi-line message"""
    parts = [f"(line {line}, column {column}):", message]
    if got:
        parts.append(f"got {got}")
    for suggestion in suggestions or []:
        parts.append(f"hint: {suggestion}")
    return '\n'.join(parts)


# ============================================================================
# PARSER EXCEPTION
# ============================================================================

class AbacusParseError(Exception):
    """Raised by the parser; converted to a ParseError result by the session driver"""
    def __init__(self, message: str, line: int = 0, column: int = 0,
                 got: Optional[str] = None, expected: Optional[List[str]] = None,
                 suggestions: Optional[List[str]] = None):
        self.message = message
        self.line = line
        self.column = column
        self.got = got
        self.expected = expected or []
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        return format_parse_error(
            self.line, self.column, self.message, self.got, self.suggestions
        )


def enhance_parse_exception(exc: ParseException, source_text: str) -> AbacusParseError:
    """Convert a pyparsing exception to an AbacusParseError with context"""
    line_num = exc.lineno
    col_num = exc.column
    got = extract_got(source_text, line_num, col_num)

    return AbacusParseError(
        message=exc.msg,
        line=line_num,
        column=col_num,
        got=got,
        expected=[exc.msg[len("Expected "):]] if exc.msg.startswith("Expected ") else [],
        suggestions=generate_suggestions(source_text, got)
    )
