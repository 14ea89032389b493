import json
import logging
import math
import re

logger = logging.getLogger("entish.parser")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(handler)
logger.setLevel(logging.WARNING)

from lark import Lark, Transformer, v_args

from ..model.terms import (
    Boolean, String, Number, Roll, Variable, BinaryOperation, Function, Comparison,
    FUNCTION_NAMES, WILDCARD,
)
from ..model.literal import Fact, Conjunction, Disjunction, ExclusiveDisjunction
from ..model.rule import Inference, Comment, Claim, Query, Rolling

entish_grammar = r"""
// -----------------------------
// Top-Level: a program is zero or more statements
// -----------------------------
start: statement*

?statement: COMMENT                       -> comment
          | fact "."
          | fact ":-" clause "."          -> inference
          | ("ergo" | "∴") clause "."     -> claim
          | "?" clause "."                -> query
          | "roll" clause "."             -> rolling

// -----------------------------
// Clauses: "|" binds loosest, then "⊕", then "&"
// -----------------------------
?clause: disjunction
?disjunction: exclusive ("|" exclusive)*
?exclusive: conjunction ("⊕" conjunction)*
?conjunction: primary ("&" primary)*
?primary: fact
        | comparison
        | "(" clause ")"

// Facts: optional "~" for negation, then table "(" fields ")"
fact: NEG? (VARIABLE | CONSTANT) "(" [field_list] ")"
field_list: field ("," field)*
?field: expression
      | "?"                               -> wildcard

// -----------------------------
// Expressions
// -----------------------------
?expression: comparison | sum
comparison: sum comparator sum
comparator: LT | LE | GT | GE | EQ | NE

?sum: product
    | sum PLUS product                    -> binop
    | sum MINUS product                   -> binop
?product: power
        | product STAR power              -> binop
        | product SLASH power             -> binop
?power: atom
      | atom CARET power                  -> binop

?atom: NUMBER                             -> number
     | MINUS NUMBER                       -> negative_number
     | "inf"                              -> infinity
     | MINUS "inf"                        -> negative_infinity
     | "nan"                              -> not_a_number
     | ROLL                               -> roll
     | STRING                             -> string
     | CONSTANT                           -> constant
     | VARIABLE                           -> variable
     | "true"                             -> true
     | "false"                            -> false
     | call
     | "(" expression ")"

call: (VARIABLE | CONSTANT) "(" [arguments] ")"
arguments: expression ("," expression)*

// -----------------------------
// Tokens
// -----------------------------
NEG: "~"
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
CARET: "^"
LT: "<"
LE: "<="
GT: ">"
GE: ">="
EQ: "="
NE: "!="

ROLL.2: /\d+d\d+(?:[+-]\d+)?/
NUMBER: /\d+(?:\.\d+)?/
STRING: /"(?:[^"\\]|\\.)*"/
CONSTANT: /[A-Z][A-Za-z0-9_]*/
VARIABLE: /[a-z_][A-Za-z0-9_]*/
COMMENT: /\/\/[^\n]*/

%import common.WS
%ignore WS
"""

ROLL_RE = re.compile(r"(\d+)d(\d+)([+-]\d+)?")

# Function names are case-insensitive inside expressions.
_FUNCTIONS_BY_LOWER = {name.lower(): name for name in FUNCTION_NAMES}


@v_args(inline=True)
class EntishTransformer(Transformer):
    """
    Transforms a Lark parse tree into the Entish model: statements, clauses
    and expressions built from the dataclasses in `entmoot.entish.model`.
    """

    def start(self, *statements):
        logger.debug("program with %d statements", len(statements))
        return list(statements)

    def comment(self, token):
        return Comment(str(token)[2:].strip())

    def inference(self, head, body):
        if not isinstance(head, Fact):
            raise ValueError(f"inference head must be a fact, got {head!r}")
        result = Inference(head, body)
        logger.debug("inference: %r", result)
        return result

    def claim(self, clause):
        return Claim(clause)

    def query(self, clause):
        return Query(clause)

    def rolling(self, clause):
        return Rolling(clause)

    def disjunction(self, *clauses):
        return Disjunction(tuple(clauses))

    def exclusive(self, *clauses):
        return ExclusiveDisjunction(tuple(clauses))

    def conjunction(self, *clauses):
        return Conjunction(tuple(clauses))

    def fact(self, *items):
        negative = items[0].type == "NEG"
        name = str(items[-2])
        fields = items[-1] or ()
        # A statement or clause spelled like a built-in is a function call.
        if not negative and name in FUNCTION_NAMES:
            return Function(name, fields)
        return Fact(name, fields, negative)

    def field_list(self, *fields):
        return tuple(fields)

    def wildcard(self):
        return Variable(WILDCARD)

    def comparison(self, left, op, right):
        return Comparison(left, op, right)

    def comparator(self, token):
        return str(token)

    def binop(self, left, op, right):
        return BinaryOperation(left, str(op), right)

    def number(self, token):
        text = str(token)
        return Number(float(text) if "." in text else int(text))

    def negative_number(self, _minus, token):
        return Number(-self.number(token).value)

    def infinity(self):
        return Number(math.inf)

    def negative_infinity(self, _minus):
        return Number(-math.inf)

    def not_a_number(self):
        return Number(math.nan)

    def roll(self, token):
        count, die, modifier = ROLL_RE.fullmatch(str(token)).groups()
        return Roll(int(count), int(die), int(modifier) if modifier else 0)

    def string(self, token):
        return String(json.loads(str(token)))

    def constant(self, token):
        return String(str(token))

    def variable(self, token):
        return Variable(str(token))

    def true(self):
        return Boolean(True)

    def false(self):
        return Boolean(False)

    def call(self, name, arguments):
        name = str(name)
        return Function(_FUNCTIONS_BY_LOWER.get(name.lower(), name), arguments or ())

    def arguments(self, *args):
        return tuple(args)


class EntishParser:
    def __init__(self):
        self.parser = Lark(entish_grammar, parser="earley", lexer="basic")
        self.transformer = EntishTransformer()

    def parse(self, text):
        logger.debug("Starting parse for text:\n%s", text)
        parse_tree = self.parser.parse(text)
        logger.debug("Parse tree:\n%s", parse_tree.pretty())
        statements = self.transformer.transform(parse_tree)
        logger.debug("Final statements: %s", statements)
        return statements
