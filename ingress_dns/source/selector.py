"""
Label selector parsing and matching for Ingress-DNS.

Implements the Kubernetes label selector syntax, which is used both for the
label filter and for the annotation filter expression:

    app=web, tier!=cache, env in (prod, staging), !legacy, replicas>2
"""

import enum
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ingress_dns.errors import SelectorParseError

_NAME = re.compile(r"^[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$")
_DNS_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")

_SPECIAL = "!=<>(),"


class Operator(enum.Enum):
    EQUALS = "="
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    GREATER_THAN = ">"
    LESS_THAN = "<"


class _Token(enum.Enum):
    IDENTIFIER = "identifier"
    END = "end"
    NOT = "!"
    EQUALS = "="
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    OPEN_PAR = "("
    CLOSED_PAR = ")"
    COMMA = ","
    IN = "in"
    NOT_IN = "notin"


_SYMBOLS = {
    "!=": _Token.NOT_EQUALS,
    "==": _Token.DOUBLE_EQUALS,
    "!": _Token.NOT,
    "=": _Token.EQUALS,
    ">": _Token.GREATER_THAN,
    "<": _Token.LESS_THAN,
    "(": _Token.OPEN_PAR,
    ")": _Token.CLOSED_PAR,
    ",": _Token.COMMA,
}

_KEYWORDS = {"in": _Token.IN, "notin": _Token.NOT_IN}

_OPERATOR_TOKENS = {
    _Token.EQUALS: Operator.EQUALS,
    _Token.DOUBLE_EQUALS: Operator.DOUBLE_EQUALS,
    _Token.NOT_EQUALS: Operator.NOT_EQUALS,
    _Token.IN: Operator.IN,
    _Token.NOT_IN: Operator.NOT_IN,
    _Token.GREATER_THAN: Operator.GREATER_THAN,
    _Token.LESS_THAN: Operator.LESS_THAN,
}


def _tokenize(text: str) -> List[Tuple[_Token, str]]:
    tokens = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        two = text[pos : pos + 2]
        if two in _SYMBOLS:
            tokens.append((_SYMBOLS[two], two))
            pos += 2
            continue
        if char in _SYMBOLS:
            tokens.append((_SYMBOLS[char], char))
            pos += 1
            continue
        start = pos
        while pos < len(text) and not text[pos].isspace() and text[pos] not in _SPECIAL:
            pos += 1
        word = text[start:pos]
        tokens.append((_KEYWORDS.get(word, _Token.IDENTIFIER), word))
    tokens.append((_Token.END, ""))
    return tokens


def validate_label_key(key: str) -> None:
    """
    Validate a label key (optional DNS subdomain prefix, '/', name).

    Raises:
        SelectorParseError: If the key is not a valid qualified name
    """
    prefix, _, name = key.rpartition("/")
    if "/" in key and (not prefix or len(prefix) > 253 or not _DNS_SUBDOMAIN.match(prefix)):
        raise SelectorParseError(f"invalid label key {key!r}: bad prefix")
    if not name or len(name) > 63 or not _NAME.match(name):
        raise SelectorParseError(f"invalid label key {key!r}")


def validate_label_value(value: str) -> None:
    """
    Validate a label value (empty, or up to 63 name characters).

    Raises:
        SelectorParseError: If the value is not a valid label value
    """
    if value and (len(value) > 63 or not _NAME.match(value)):
        raise SelectorParseError(f"invalid label value {value!r}")


@dataclass(frozen=True)
class Requirement:
    """
    A single selector term: key, operator and the values it compares against.
    """

    key: str
    operator: Operator
    values: FrozenSet[str] = frozenset()

    def matches(self, labels: Mapping[str, str]) -> bool:
        has_key = self.key in labels
        value = labels.get(self.key)

        if self.operator in (Operator.EQUALS, Operator.DOUBLE_EQUALS, Operator.IN):
            return has_key and value in self.values
        if self.operator in (Operator.NOT_EQUALS, Operator.NOT_IN):
            return not has_key or value not in self.values
        if self.operator == Operator.EXISTS:
            return has_key
        if self.operator == Operator.DOES_NOT_EXIST:
            return not has_key

        # GREATER_THAN / LESS_THAN compare integers
        if not has_key:
            return False
        try:
            label_number = int(value)
        except ValueError:
            return False
        (bound,) = self.values
        if self.operator == Operator.GREATER_THAN:
            return label_number > int(bound)
        return label_number < int(bound)


class Selector:
    """
    A conjunction of requirements. An empty selector matches everything.
    """

    def __init__(self, requirements: Iterable[Requirement] = ()):
        self.requirements: Tuple[Requirement, ...] = tuple(requirements)

    @classmethod
    def everything(cls) -> "Selector":
        return cls()

    @classmethod
    def from_dict(cls, labels: Mapping[str, str]) -> "Selector":
        """Build an equality selector from a key/value map."""
        requirements = []
        for key in sorted(labels):
            validate_label_key(key)
            validate_label_value(labels[key])
            requirements.append(
                Requirement(key, Operator.EQUALS, frozenset([labels[key]]))
            )
        return cls(requirements)

    def empty(self) -> bool:
        return not self.requirements

    def matches(self, labels: Optional[Mapping[str, str]]) -> bool:
        labels = labels or {}
        return all(requirement.matches(labels) for requirement in self.requirements)

    def __repr__(self) -> str:
        return f"Selector({list(self.requirements)!r})"


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.position = 0

    def _peek(self) -> Tuple[_Token, str]:
        return self.tokens[self.position]

    def _next(self) -> Tuple[_Token, str]:
        token = self.tokens[self.position]
        if token[0] != _Token.END:
            self.position += 1
        return token

    def _error(self, message: str) -> SelectorParseError:
        return SelectorParseError(f"unable to parse selector {self.text!r}: {message}")

    def parse(self) -> Selector:
        requirements: List[Requirement] = []
        if self._peek()[0] == _Token.END:
            return Selector()
        while True:
            requirements.append(self._requirement())
            token, literal = self._next()
            if token == _Token.END:
                break
            if token != _Token.COMMA:
                raise self._error(f"found {literal!r}, expected ','")
            if self._peek()[0] not in (_Token.IDENTIFIER, _Token.NOT):
                raise self._error("expected a requirement after ','")
        return Selector(requirements)

    def _requirement(self) -> Requirement:
        token, literal = self._next()
        if token == _Token.NOT:
            token, literal = self._next()
            if token != _Token.IDENTIFIER:
                raise self._error(f"found {literal!r}, expected a key after '!'")
            validate_label_key(literal)
            return Requirement(literal, Operator.DOES_NOT_EXIST)
        if token != _Token.IDENTIFIER:
            raise self._error(f"found {literal!r}, expected a key")
        key = literal
        validate_label_key(key)

        if self._peek()[0] in (_Token.END, _Token.COMMA):
            return Requirement(key, Operator.EXISTS)

        token, literal = self._next()
        if token not in _OPERATOR_TOKENS:
            raise self._error(f"found {literal!r}, expected an operator")
        operator = _OPERATOR_TOKENS[token]

        if operator in (Operator.IN, Operator.NOT_IN):
            values = self._value_set()
        else:
            values = frozenset([self._exact_value()])

        if operator in (Operator.GREATER_THAN, Operator.LESS_THAN):
            (bound,) = values
            try:
                int(bound)
            except ValueError:
                raise self._error(f"{bound!r} is not an integer")
        else:
            for value in values:
                validate_label_value(value)
        return Requirement(key, operator, values)

    def _exact_value(self) -> str:
        token, literal = self._peek()
        if token in (_Token.END, _Token.COMMA):
            return ""
        if token == _Token.IDENTIFIER:
            self._next()
            return literal
        raise self._error(f"found {literal!r}, expected a value")

    def _value_set(self) -> FrozenSet[str]:
        token, literal = self._next()
        if token != _Token.OPEN_PAR:
            raise self._error(f"found {literal!r}, expected '('")
        values = set()
        expect_value = True
        while True:
            token, literal = self._next()
            if token == _Token.CLOSED_PAR:
                if expect_value:
                    values.add("")
                return frozenset(values)
            if token == _Token.COMMA:
                if expect_value:
                    values.add("")
                expect_value = True
                continue
            if token == _Token.IDENTIFIER and expect_value:
                values.add(literal)
                expect_value = False
                continue
            raise self._error(f"found {literal!r}, expected ',' or ')'")


def parse_selector(text: Optional[str]) -> Selector:
    """
    Parse a label selector expression.

    Args:
        text: Selector expression; empty or None matches everything

    Returns:
        Selector: Parsed selector

    Raises:
        SelectorParseError: If the expression is malformed
    """
    if not text or not text.strip():
        return Selector.everything()
    return _Parser(text).parse()


def selector_from(value) -> Selector:
    """
    Coerce a selector expression, label map or Selector into a Selector.
    """
    if value is None:
        return Selector.everything()
    if isinstance(value, Selector):
        return value
    if isinstance(value, dict):
        return Selector.from_dict(value)
    return parse_selector(value)
