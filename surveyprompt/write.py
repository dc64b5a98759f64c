"""Copy prompt answers into user-supplied targets, converting types as needed."""

from __future__ import annotations

import dataclasses
import re
import typing
from collections import deque
from collections.abc import MutableMapping
from datetime import timedelta
from typing import Any, Optional, Protocol, Union, runtime_checkable

TAG_NAME = "survey"


@dataclasses.dataclass
class OptionAnswer:
    """A chosen option: its text and its position in the option list."""

    value: str = ""
    index: int = 0


@runtime_checkable
class Settable(Protocol):
    """Objects that take answers themselves."""

    def write_answer(self, name: str, value: Any) -> None: ...


class FieldNotMatchError(LookupError):
    """No field of the target matches a question name."""

    def __init__(self, question_name: str) -> None:
        super().__init__(f"could not find field matching {question_name}")
        self.question_name = question_name

    def matches(self, other: BaseException) -> bool:
        """True when ``other`` is the same kind of error for a compatible name."""
        if not isinstance(other, FieldNotMatchError):
            return False
        name = other.question_name
        return name == "" or self.question_name == "" or name == self.question_name


def is_field_not_match(err: BaseException | None) -> str | None:
    """Return the unmatched question name, or None if ``err`` is another error."""
    if isinstance(err, FieldNotMatchError):
        return err.question_name
    return None


def option_answer_list(incoming: typing.Iterable[str]) -> list[OptionAnswer]:
    """Wrap option strings as OptionAnswers with their positions."""
    return [OptionAnswer(value=opt, index=i) for i, opt in enumerate(incoming)]


_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_INT_RE = re.compile(r"[+-]?[0-9]+")
_DURATION_PART = re.compile(r"([0-9]*\.?[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _parse_duration(text: str) -> timedelta:
    body = text
    sign = 1
    if body and body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    pos = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(body):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(body):
        raise ValueError(f"invalid duration: {text!r}")
    return timedelta(seconds=sign * seconds)


def _convert_string(text: str, target_type: Any) -> Any:
    if target_type is bool:
        return _parse_bool(text)
    if target_type is int:
        return _parse_int(text)
    if target_type is float:
        return float(text)
    if target_type is timedelta:
        return _parse_duration(text)
    raise TypeError(f"Unable to convert from string to type {getattr(target_type, '__name__', target_type)}")


def convert(value: Any, target_type: Any) -> Any:
    """Convert an answer to ``target_type`` the way answers are written to fields."""
    if target_type is None or target_type is Any:
        return value
    origin = typing.get_origin(target_type)
    args = typing.get_args(target_type)

    if origin is Union:
        if value is None and type(None) in args:
            return None
        last_error: Exception | None = None
        for candidate in args:
            if candidate is type(None):
                continue
            try:
                return convert(value, candidate)
            except (TypeError, ValueError) as exc:
                last_error = exc
        raise last_error or TypeError(f"cannot convert {value!r}")

    if isinstance(value, str) and target_type is not str:
        return _convert_string(value, target_type)

    if isinstance(value, OptionAnswer):
        if target_type is str:
            return value.value
        if target_type is int:
            return value.index
        if target_type is OptionAnswer:
            return value
        raise TypeError(f"Unable to convert from OptionAnswer to type {getattr(target_type, '__name__', target_type)}")

    container = origin or target_type
    if isinstance(value, (list, tuple)) and container in (list, tuple):
        if container is list:
            item_type = args[0] if args else Any
            return [convert(item, item_type) for item in value]
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(convert(item, args[0]) for item in value)
        if args:
            if len(args) != len(value):
                raise ValueError(f"expected {len(args)} items, got {len(value)}")
            return tuple(convert(item, t) for item, t in zip(value, args))
        return tuple(value)

    if isinstance(target_type, type):
        if isinstance(value, bool) and target_type is not bool and target_type is not object:
            raise TypeError(f"cannot assign bool to {target_type.__name__}")
        if isinstance(value, target_type):
            return value
        raise TypeError(f"cannot assign {type(value).__name__} to {target_type.__name__}")
    return value


# Names understood in annotations written as strings.
_ANNOTATION_NAMES: dict[str, Any] = {
    "int": int,
    "str": str,
    "bool": bool,
    "float": float,
    "bytes": bytes,
    "object": object,
    "None": type(None),
    "NoneType": type(None),
    "Any": Any,
    "typing.Any": Any,
    "timedelta": timedelta,
    "datetime.timedelta": timedelta,
    "OptionAnswer": OptionAnswer,
    "list": list,
    "List": list,
    "typing.List": list,
    "tuple": tuple,
    "Tuple": tuple,
    "typing.Tuple": tuple,
    "dict": dict,
    "Dict": dict,
    "typing.Dict": dict,
    "Optional": Optional,
    "typing.Optional": Optional,
    "Union": Union,
    "typing.Union": Union,
}
_LEXEME = re.compile(r"\s*(\.\.\.|[A-Za-z_][\w.]*|[\[\],|])")


class _Unresolvable(Exception):
    """An annotation names something outside the known set."""


def _lex(text: str) -> deque[str]:
    lexemes: deque[str] = deque()
    text = text.strip()
    pos = 0
    while pos < len(text):
        match = _LEXEME.match(text, pos)
        if match is None:
            raise _Unresolvable(text)
        lexemes.append(match.group(1))
        pos = match.end()
    return lexemes


def _parse_union(lexemes: deque[str]) -> Any:
    options = [_parse_atom(lexemes)]
    while lexemes and lexemes[0] == "|":
        lexemes.popleft()
        options.append(_parse_atom(lexemes))
    return options[0] if len(options) == 1 else Union[tuple(options)]


def _parse_atom(lexemes: deque[str]) -> Any:
    if not lexemes:
        raise _Unresolvable("unexpected end")
    name = lexemes.popleft()
    if name == "...":
        return Ellipsis
    if name not in _ANNOTATION_NAMES:
        raise _Unresolvable(name)
    base = _ANNOTATION_NAMES[name]
    if not lexemes or lexemes[0] != "[":
        return base
    lexemes.popleft()
    args = [_parse_union(lexemes)]
    while lexemes and lexemes[0] == ",":
        lexemes.popleft()
        args.append(_parse_union(lexemes))
    if not lexemes or lexemes.popleft() != "]":
        raise _Unresolvable("unbalanced brackets")
    return _subscript(base, args)


def _subscript(base: Any, args: list[Any]) -> Any:
    if base is Optional and len(args) == 1:
        return Optional[args[0]]
    if base is Union:
        return Union[tuple(args)]
    if base is list and len(args) == 1:
        return list[args[0]]
    if base in (tuple, dict):
        return base[tuple(args)]
    raise _Unresolvable(repr(base))


def _resolve(annotation: Any) -> Any:
    """Turn an annotation, possibly a string, into a type; None if unknown."""
    if not isinstance(annotation, str):
        return annotation
    try:
        lexemes = _lex(annotation)
        result = _parse_union(lexemes)
    except (_Unresolvable, TypeError):
        return None
    return None if lexemes else result


def _annotations(cls: type) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        merged.update(vars(klass).get("__annotations__", {}))
    return merged


def _fields(target: Any) -> list[tuple[str, str | None]]:
    if dataclasses.is_dataclass(target):
        return [(f.name, f.metadata.get(TAG_NAME)) for f in dataclasses.fields(target)]
    return [(name, None) for name in _annotations(type(target))]


def find_field(target: Any, name: str) -> str:
    """Return the attribute name matching a question name: tags first, then names."""
    fields = _fields(target)
    for attr, tag in fields:
        if tag and tag == name:
            return attr
    for attr, _ in fields:
        if attr.casefold() == name.casefold():
            return attr
    raise FieldNotMatchError(name)


_IMMUTABLE = (bool, int, float, complex, str, bytes, tuple, frozenset, type(None))


def write_answer(target: Any, name: str, value: Any) -> None:
    """Store ``value`` under ``name`` in ``target`` (a Settable, mapping or object)."""
    if isinstance(target, Settable):
        target.write_answer(name, value)
        return
    if isinstance(target, _IMMUTABLE):
        raise TypeError("the target of a write must be a mutable object")
    if isinstance(target, OptionAnswer):
        answer = convert(value, OptionAnswer)
        target.value, target.index = answer.value, answer.index
        return
    if isinstance(target, MutableMapping):
        target[name] = value
        return

    attr = find_field(target, name)
    current = getattr(target, attr, None)
    if isinstance(current, Settable):
        current.write_answer(name, value)
        return
    hint = _resolve(_annotations(type(target)).get(attr))
    setattr(target, attr, convert(value, hint))