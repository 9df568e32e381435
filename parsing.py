"""
Abacus Expression Language Parser
Turns one line of source text into an expression or binding statement
"""

from typing import Dict, List, Tuple, Union
from functools import lru_cache

# Import pyparsing with error handling
try:
    from pyparsing import (
        Regex, Suppress, Forward, Group, OneOrMore, ZeroOrMore, StringEnd,
        Optional as PyParsingOptional, ParseException, ParserElement,
        delimitedList, oneOf
    )
    # Enable packrat parsing for performance
    ParserElement.enablePackrat()
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from syntax import (
    make_number, make_call, make_expression_statement, make_binding,
    pretty_print_node
)
from error_handling import AbacusParseError, enhance_parse_exception


# A name written without an argument list. Juxtaposition needs to tell
# `sin pi` (apply sin) apart from `2 pi` (multiply), so bare names travel
# through the grammar tagged until they are folded.
BARE_NAME = "BARE_NAME"

Token = Union[Dict, Tuple[str, str]]


def is_bare_name(token: Token) -> bool:
    return isinstance(token, tuple) and token[0] == BARE_NAME


def as_expression(token: Token) -> Dict:
    """Strip the bare-name tag, leaving a plain expression node"""
    if is_bare_name(token):
        return make_call(token[1])
    return token


# ============================================================================
# PARSE ACTIONS
# ============================================================================

def make_negation(tokens) -> Dict:
    return make_call("neg", [as_expression(tokens[0])])


def make_power(tokens) -> Token:
    if len(tokens) == 1:
        return tokens[0]
    return make_call("^", [as_expression(tokens[0]), as_expression(tokens[1])])


def make_juxtaposition(tokens) -> Dict:
    """Fold `a b c` from the right: bare names apply, anything else multiplies"""
    items: List[Token] = list(tokens)
    result = as_expression(items[-1])
    for item in reversed(items[:-1]):
        if is_bare_name(item):
            result = make_call(item[1], [result])
        else:
            result = make_call("*", [item, result])
    return result


def make_left_fold(tokens) -> Dict:
    """Fold `a op b op c` into left-associative calls"""
    result = tokens[0]
    for i in range(1, len(tokens), 2):
        result = make_call(tokens[i], [result, tokens[i + 1]])
    return result


def make_binding_statement(tokens) -> Dict:
    if len(tokens) == 3:
        name, params, body = tokens
        return make_binding(name, list(params), body)
    name, body = tokens
    return make_binding(name, [], body)


# ============================================================================
# GRAMMAR
# ============================================================================

class AbacusGrammar:
    """Abacus grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the grammar, loosest binding last"""

        # Forward declarations for recursive structures
        expression = Forward()
        exponent = Forward()
        unary = Forward()

        number = Regex(r'(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?').setParseAction(
            lambda t: make_number(float(t[0]))
        )
        identifier = Regex(r'[A-Za-z_][A-Za-z0-9_]*')

        arguments = Group(PyParsingOptional(delimitedList(expression, ",")))
        applied_call = (
            identifier + Suppress("(") + arguments + Suppress(")")
        ).setParseAction(lambda t: make_call(t[0], list(t[1])))
        bare_name = identifier.copy().setParseAction(lambda t: (BARE_NAME, t[0]))
        parenthesized = Suppress("(") + expression + Suppress(")")

        atom = number | applied_call | bare_name | parenthesized

        # Right associative; `2^-1` is allowed
        power = (atom + PyParsingOptional(Suppress("^") + exponent)).setParseAction(make_power)
        exponent <<= (Suppress("-") + exponent).setParseAction(make_negation) | power

        juxtaposition = OneOrMore(power).setParseAction(make_juxtaposition)
        unary <<= (Suppress("-") + unary).setParseAction(make_negation) | juxtaposition

        term = (unary + ZeroOrMore(oneOf("* /") + unary)).setParseAction(make_left_fold)
        expression <<= (term + ZeroOrMore(oneOf("+ -") + term)).setParseAction(make_left_fold)

        # Statements
        params = Suppress("(") + Group(PyParsingOptional(delimitedList(identifier, ","))) + Suppress(")")
        binding = (
            identifier + PyParsingOptional(params) + Suppress("=") + expression + StringEnd()
        ).setParseAction(make_binding_statement)
        expression_statement = (expression + StringEnd()).setParseAction(
            lambda t: make_expression_statement(t[0])
        )

        self.number = number
        self.identifier = identifier
        self.atom = atom
        self.power = power
        self.juxtaposition = juxtaposition
        self.unary = unary
        self.term = term
        self.expression = expression
        self.binding = binding
        self.statement = binding | expression_statement

    def _parse(self, element: ParserElement, text: str) -> Dict:
        try:
            result = element.parseString(text, parseAll=True)
        except ParseException as e:
            raise enhance_parse_exception(e, text) from e
        except RecursionError as e:
            raise AbacusParseError("input is nested too deeply", 1, 1) from e

        node = as_expression(result[0])
        if self.debug:
            print(f"Parsed {text!r}:")
            print(pretty_print_node(node), end='')
        return node

    def parse_statement(self, text: str) -> Dict:
        """Parse one statement: a binding or a bare expression"""
        return self._parse(self.statement, text)

    def parse_expression(self, text: str) -> Dict:
        """Parse a single expression"""
        return self._parse(self.expression, text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> AbacusGrammar:
    """Create an Abacus parser"""
    return AbacusGrammar(debug=debug)


def create_debug_parser() -> AbacusGrammar:
    """Create an Abacus parser that prints each parse tree"""
    return AbacusGrammar(debug=True)


@lru_cache(maxsize=None)
def default_parser() -> AbacusGrammar:
    return create_parser()


def parse_statement(text: str) -> Dict:
    """Parse text with the shared default grammar"""
    return default_parser().parse_statement(text)
