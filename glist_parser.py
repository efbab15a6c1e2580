import ast
import enum
import io
import tokenize as tknz
from abc import abstractmethod
from typing import Any, Generic, List, Optional, Set, Tuple, TypeVar

import attr

from glist import GList


class TokenType(enum.Enum):
    INTEGER = enum.auto()
    FLOAT = enum.auto()
    STRING = enum.auto()
    SIGN = enum.auto()
    SYMBOL = enum.auto()
    OPERATOR = enum.auto()
    COMMENT = enum.auto()
    UNKNOWN = enum.auto()


@attr.s
class Token:
    type_: TokenType = attr.ib()
    value: Any = attr.ib()


class Tokenizer:
    @abstractmethod
    def tokenize(self, string: str) -> List[Token]:
        raise NotImplementedError()


class Op(enum.Enum):
    ADD = "add"
    HAS = "has"
    COUNT = "count"
    TAIL = "tail"
    REVERSE = "reverse"
    SHOW = "show"
    FREE = "free"
    DROP = "drop"
    LISTS = "lists"
    STATS = "stats"


@attr.s(auto_detect=True)
class Symbol:
    value: str = attr.ib()

    def __repr__(self):
        return self.value


Literal = int | float | str
Value = Literal | Symbol


@attr.s(frozen=True)
class Command:
    op: Op = attr.ib()
    args: Tuple[Value, ...] = attr.ib(default=())


_SKIPPED = {tknz.ENCODING, tknz.NEWLINE, tknz.NL, tknz.ENDMARKER, tknz.INDENT, tknz.DEDENT}


def python_tokenize_string(string: str) -> List[tknz.TokenInfo]:
    """Uses Python's builtin tokenization on a string"""
    try:
        return list(tknz.tokenize(io.BytesIO(string.encode('utf-8')).readline))
    except (tknz.TokenError, SyntaxError) as e:
        raise ValueError(f"Could not tokenize {string!r}: {e}") from None


class DefaultPythonTokenizer(Tokenizer):
    """
    Relies on Python's built-in tokenizer. As such, requires that tokens match Python's syntax.
    i.e. tokens can be strings, numbers, valid python names, etc. '#' character will create a comment and rest of line will be ignored.
    We also interpret `;` as a comment; whatever follows it must still be tokenizable.
    """

    def __init__(self, operators: Set[str]):
        self._operators: Set[str] = set(operators)

    def tokenize(self, string: str) -> List[Token]:
        python_tokens = python_tokenize_string(string)
        tokens = list(filter(None, (self._match_python_token(tok) for tok in python_tokens)))
        return tokens

    def _match_python_token(self, token: tknz.TokenInfo) -> Optional[Token]:
        if token.type in _SKIPPED:
            return None
        match (token.exact_type, token.string):
            case (tknz.NUMBER, number_string):
                number = ast.literal_eval(number_string)
                match number:
                    case int():
                        return Token(TokenType.INTEGER, number)
                    case float():
                        return Token(TokenType.FLOAT, number)
                    case _:
                        return Token(TokenType.UNKNOWN, number_string)
            case (tknz.STRING, s):
                return Token(TokenType.STRING, ast.literal_eval(s))
            case (tknz.NAME, s) if s in self._operators:
                return Token(TokenType.OPERATOR, s)
            case (tknz.NAME, s):
                return Token(TokenType.SYMBOL, s)
            case (tknz.MINUS | tknz.PLUS, sign):
                return Token(TokenType.SIGN, sign)
            case (tknz.COMMENT, s):
                return Token(TokenType.COMMENT, s)
            case (tknz.SEMI, ";"):
                return Token(TokenType.COMMENT, ";")
            case (_, s):
                return Token(TokenType.UNKNOWN, s)


P = TypeVar("P")


@attr.s
class Parser(Generic[P]):

    @abstractmethod
    def parse(self, s: str) -> P:
        raise NotImplementedError()


class CommandParser(Parser[Optional[Command]]):
    """Parses one console line into a Command, or None if the line holds nothing but a comment"""

    def __init__(self, operators: Optional[Set[str]] = None):
        self._operators: Set[str] = operators if operators is not None else {op.value for op in Op}
        self.tokenizer: Tokenizer = DefaultPythonTokenizer(self._operators)

    def parse(self, s: str) -> Optional[Command]:
        tokens = self.tokenizer.tokenize(s.strip())
        tokens = self._preprocess(tokens)
        return self._parse_tokens(tokens)

    @classmethod
    def _preprocess(cls, tokens: List[Token]) -> List[Token]:
        comment_idx = len(tokens)
        for i, t in enumerate(tokens):
            if t.type_ == TokenType.COMMENT:
                comment_idx = i
                break
        return tokens[:comment_idx]

    @classmethod
    def _parse_tokens(cls, tokens: List[Token]) -> Optional[Command]:
        match tokens:
            case []:
                return None
            case [Token(type_=TokenType.OPERATOR, value=op), *rest]:
                return Command(Op(op), tuple(cls._parse_args(rest)))
            case [t, *_]:
                raise ValueError(f"Expected a command, got {t.value!r}")

    @classmethod
    def _parse_args(cls, tokens: List[Token]) -> List[Value]:
        args: List[Value] = []
        sign = None
        for t in tokens:
            match t:
                case Token(type_=TokenType.SIGN, value=s) if sign is None:
                    sign = s
                    continue
                case Token(type_=TokenType.INTEGER | TokenType.FLOAT, value=v):
                    args.append(-v if sign == "-" else v)
                case Token(type_=TokenType.STRING, value=v) if sign is None:
                    args.append(v)
                case Token(type_=TokenType.SYMBOL | TokenType.OPERATOR, value=v) if sign is None:
                    args.append(Symbol(v))
                case _:
                    raise ValueError(f"Unexpected token: {t.value!r}")
            sign = None
        if sign is not None:
            raise ValueError(f"Dangling sign {sign!r}")
        return args


def print_value(expr: Any) -> str:
    match expr:
        case None:
            return "none"
        case bool():
            return str(expr).lower()
        case int() | float():
            return str(expr)
        case str():
            return repr(expr)
        case Symbol(value=v):
            return str(v)
        case Op():
            return expr.value
        case Command(op=op, args=args):
            return " ".join(print_value(e) for e in (op, *args))
        case dict():
            return " ".join(f"{k}={print_value(v)}" for k, v in expr.items())
        case tuple() | GList():
            return "(" + " ".join(print_value(e) for e in expr) + ")"
        case _:
            return str(expr)
