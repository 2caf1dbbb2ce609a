"""Arithmetic expressions with SI prefixes, variables and math functions.

The expression language is a small subset of JavaScript arithmetic: numbers,
variables, ``+ - * / % **``, parentheses, calls, member access on the
``Math`` object, ``//`` and ``/* */`` comments and trailing semicolons.
Arithmetic follows IEEE-754 the way JavaScript does: division by zero gives
an infinity, invalid operations give NaN.
"""

from __future__ import annotations

import math
import random
import re
from typing import Any, Callable

MICRO_SIGN = "\u00b5"

#: SI prefixes and the factor each stands for.
PREFIXES: dict[str, str] = {
    "E": "1e18",
    "P": "1e15",
    "T": "1e12",
    "G": "1e9",
    "M": "1e6",
    "k": "1e3",
    "m": "1e-3",
    "u": "1e-6",
    "n": "1e-9",
    "p": "1e-12",
    "f": "1e-15",
    "a": "1e-18",
}

_SI_PREFIX_RE = re.compile(r"(\d+\.?\d*)\s*([TMkmGun]?)")
_FUNCTION_RE = re.compile(
    r"(\b(acos|asin|atan2|atan|cbrt|ceil|cos|cosh|exp|floor|log10|log2|log|max|min"
    r"|pow|random|round|sin|sinh|sqrt|tan|tanh|PI)\b)"
)


class ExpressionError(ValueError):
    """An expression could not be parsed or did not evaluate to a number."""


def replace_unit_prefixes(expr: str) -> str:
    """Turn numbers with an SI prefix (``2k``, ``3 µ``) into products (``2*1e3``)."""
    expr = expr.replace(MICRO_SIGN, "u")

    def substitute(match: re.Match[str]) -> str:
        number, prefix = match.group(1), match.group(2)
        if prefix in PREFIXES:
            return f"{number}*{PREFIXES[prefix]}"
        return number

    return _SI_PREFIX_RE.sub(substitute, expr)


def _replace_function_names(expr: str) -> str:
    return _FUNCTION_RE.sub(lambda m: "Math." + m.group(0), expr)


# --- JavaScript-like numeric helpers -------------------------------------------------


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


def _div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _mod(a: float, b: float) -> float:
    if b == 0.0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def _pow(a: float, b: float) -> float:
    if math.isnan(b):
        return math.nan
    if b == 0.0:
        return 1.0
    if abs(a) == 1.0 and math.isinf(b):
        return math.nan
    if a == 0.0 and b < 0.0:
        return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
    except ValueError:
        return math.nan


def _arg(args: tuple[float, ...], index: int) -> float:
    return args[index] if len(args) > index else math.nan


def _unary(fn: Callable[[float], float]) -> Callable[..., float]:
    def wrapped(*args: float) -> float:
        x = _arg(args, 0)
        if math.isnan(x):
            return math.nan
        try:
            return float(fn(x))
        except OverflowError:
            return math.inf
        except (ValueError, ZeroDivisionError):
            return math.nan

    return wrapped


def _log_with(fn: Callable[[float], float]) -> Callable[[float], float]:
    def log(x: float) -> float:
        if x == 0.0:
            return -math.inf
        if x < 0.0:
            return math.nan
        if math.isinf(x):
            return math.inf
        return fn(x)

    return log


def _whole(fn: Callable[[float], int]) -> Callable[[float], float]:
    def rounded(x: float) -> float:
        return x if not math.isfinite(x) else float(fn(x))

    return rounded


def _cbrt(x: float) -> float:
    if not math.isfinite(x) or x == 0.0:
        return x
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _sign(x: float) -> float:
    if x == 0.0:
        return x
    return math.copysign(1.0, x)


def _extreme(pick: Callable[..., float], empty: float) -> Callable[..., float]:
    def extreme(*args: float) -> float:
        if not args:
            return empty
        if any(math.isnan(a) for a in args):
            return math.nan
        return pick(args)

    return extreme


def _atan2(*args: float) -> float:
    y, x = _arg(args, 0), _arg(args, 1)
    if math.isnan(x) or math.isnan(y):
        return math.nan
    return math.atan2(y, x)


def _math_namespace(rng: random.Random) -> dict[str, Any]:
    return {
        "PI": math.pi,
        "E": math.e,
        "abs": _unary(abs),
        "acos": _unary(math.acos),
        "asin": _unary(math.asin),
        "atan": _unary(math.atan),
        "atan2": _atan2,
        "cbrt": _unary(_cbrt),
        "ceil": _unary(_whole(math.ceil)),
        "cos": _unary(math.cos),
        "cosh": _unary(math.cosh),
        "exp": _unary(math.exp),
        "floor": _unary(_whole(math.floor)),
        "log": _unary(_log_with(math.log)),
        "log10": _unary(_log_with(math.log10)),
        "log2": _unary(_log_with(math.log2)),
        "max": _extreme(max, -math.inf),
        "min": _extreme(min, math.inf),
        "pow": lambda *args: _pow(_arg(args, 0), _arg(args, 1)),
        "random": lambda *args: rng.random(),
        "round": _unary(_whole(lambda x: math.floor(x + 0.5))),
        "sign": _unary(_sign),
        "sin": _unary(math.sin),
        "sinh": _unary(math.sinh),
        "sqrt": _unary(math.sqrt),
        "tan": _unary(math.tan),
        "tanh": _unary(math.tanh),
        "trunc": _unary(_whole(math.trunc)),
    }


# --- tokenizer and evaluator ---------------------------------------------------------

_TOKEN_RE = re.compile(
    r"""
    (?P<skip>\s+|//[^\n]*|/\*.*?\*/)
   |(?P<number>0[xX][0-9a-fA-F]+|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)
   |(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
   |(?P<op>\*\*|[-+*/%(),.;])
    """,
    re.VERBOSE | re.DOTALL,
)


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ExpressionError(f"unexpected character {text[pos]!r} at {pos}")
        kind = match.lastgroup
        if kind != "skip":
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


def _number(value: Any) -> float:
    if isinstance(value, float):
        return value
    raise ExpressionError("operand is not a number")


class _Evaluator:
    def __init__(self, tokens: list[tuple[str, str]], lookup: Callable[[str], Any]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._lookup = lookup

    def _peek(self) -> tuple[str, str] | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _at_op(self, *ops: str) -> bool:
        token = self._peek()
        return token is not None and token[0] == "op" and token[1] in ops

    def _take(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            raise ExpressionError("unexpected end of expression")
        self._pos += 1
        return token

    def _expect(self, op: str) -> None:
        kind, text = self._take()
        if kind != "op" or text != op:
            raise ExpressionError(f"expected {op!r}, found {text!r}")

    def program(self) -> Any:
        value: Any = None
        while self._peek() is not None:
            if self._at_op(";"):
                self._pos += 1
                continue
            value = self._additive()
            if self._peek() is not None and not self._at_op(";"):
                raise ExpressionError(f"unexpected token {self._peek()[1]!r}")
        return value

    def _additive(self) -> Any:
        value = self._multiplicative()
        while self._at_op("+", "-"):
            op = self._take()[1]
            right = _number(self._multiplicative())
            left = _number(value)
            value = left + right if op == "+" else left - right
        return value

    def _multiplicative(self) -> Any:
        value = self._unary()
        while self._at_op("*", "/", "%"):
            op = self._take()[1]
            right = _number(self._unary())
            left = _number(value)
            if op == "*":
                value = left * right
            elif op == "/":
                value = _div(left, right)
            else:
                value = _mod(left, right)
        return value

    def _unary(self) -> Any:
        if self._at_op("-"):
            self._pos += 1
            return -_number(self._unary())
        if self._at_op("+"):
            self._pos += 1
            return _number(self._unary())
        return self._exponent()

    def _exponent(self) -> Any:
        base = self._postfix()
        if self._at_op("**"):
            self._pos += 1
            return _pow(_number(base), _number(self._unary()))
        return base

    def _postfix(self) -> Any:
        value = self._primary()
        while True:
            if self._at_op("."):
                self._pos += 1
                kind, name = self._take()
                if kind != "name":
                    raise ExpressionError(f"expected a member name, found {name!r}")
                if not isinstance(value, dict) or name not in value:
                    raise ExpressionError(f"no member {name!r}")
                value = value[name]
            elif self._at_op("("):
                self._pos += 1
                args = self._arguments()
                if not callable(value):
                    raise ExpressionError("value is not a function")
                value = value(*args)
            else:
                return value

    def _arguments(self) -> list[float]:
        args: list[float] = []
        if self._at_op(")"):
            self._pos += 1
            return args
        while True:
            args.append(_number(self._additive()))
            if self._at_op(","):
                self._pos += 1
                continue
            self._expect(")")
            return args

    def _primary(self) -> Any:
        kind, text = self._take()
        if kind == "number":
            if text[:2].lower() == "0x":
                return float(int(text, 16))
            return float(text)
        if kind == "name":
            return self._lookup(text)
        if kind == "op" and text == "(":
            value = self._additive()
            self._expect(")")
            return value
        raise ExpressionError(f"unexpected token {text!r}")


class ExpressionEngine:
    """Evaluates expressions against a set of named numeric variables."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._variables: dict[str, float] = {}
        self._globals: dict[str, Any] = {
            "Math": _math_namespace(rng or random.Random()),
            "Infinity": math.inf,
            "NaN": math.nan,
        }

    def set_variable(self, name: str, value: float) -> None:
        """Bind ``name`` to a number for later evaluations."""
        self._variables[name] = float(value)

    def _lookup(self, name: str) -> Any:
        if name in self._variables:
            return self._variables[name]
        if name in self._globals:
            return self._globals[name]
        raise ExpressionError(f"{name} is not defined")

    def evaluate(self, text: str) -> Any:
        """Evaluate ``text``; returns the last value, or None for an empty program."""
        return _Evaluator(_tokenize(text), self._lookup).program()


def _is_number(value: Any) -> bool:
    return isinstance(value, float)


class SimpleExpressionParser:
    """Evaluates constant expressions typed into numeric fields, such as ``1,5k``."""

    VALID_CHARS = frozenset("0123456789+-*/ekMGTPEmunpfa., " + MICRO_SIGN)

    def __init__(self) -> None:
        self.engine = ExpressionEngine()

    def evaluate(self, expression: str) -> float:
        """Return the value of ``expression``; a non-numeric result gives 0.0."""
        expr = expression.strip().replace(",", ".").replace(MICRO_SIGN, "u")
        if not expr:
            raise ExpressionError("empty expression")
        if expr[0] == "/":
            expr = "1" + expr
        for prefix in sorted(PREFIXES):
            expr = expr.replace(prefix, "*" + PREFIXES[prefix])
        result = self.engine.evaluate(expr)
        return result if _is_number(result) else 0.0

    def validate(self, expression: str) -> bool:
        """Whether every character of ``expression`` may appear in such an expression."""
        return all(c in self.VALID_CHARS for c in expression)


class VariableExpressionParser:
    """Holds one expression of variables, checked once and evaluated repeatedly."""

    def __init__(self) -> None:
        self.expression = ""

    def set_expression(self, engine: ExpressionEngine, expr: str) -> None:
        """Normalise and store ``expr``; raise ExpressionError if it gives no number."""
        expr = expr.replace("pi", "PI").replace("Pi", "PI")
        expr = replace_unit_prefixes(expr)
        expr = _replace_function_names(expr)
        self.expression = ""
        result = engine.evaluate(expr)
        if not _is_number(result):
            raise ExpressionError("expression does not evaluate to a number")
        self.expression = expr

    def evaluate(self, engine: ExpressionEngine) -> float:
        """Evaluate the stored expression with the engine's current variables."""
        result = engine.evaluate(self.expression)
        if not _is_number(result):
            raise ExpressionError("expression does not evaluate to a number")
        return result