"""Per-call parameter bag with explicit, total coercion.

Wire payloads are JSON-like: every value is one of null, boolean, number,
string, array or object. Operations ask for a value *as* a Python kind
(``int``, ``str``, ``Optional[float]``, an ``Enum`` subclass, ``list``...) and
the bag converts it through one coercion function per kind. Each coercion
returns a :class:`Coercion` result instead of raising; the bag maps failures
onto :class:`ParameterValidationError` at its boundary.
"""

from __future__ import annotations

import copy
import enum
import math
import types
import typing
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, TypeVar, Union

from docedit.exceptions import ParameterValidationError

T = TypeVar("T")

_MISSING: Any = object()

_TRUE_STRINGS = frozenset({"true", "yes", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "0", "off"})


@dataclass(frozen=True)
class Coercion:
    """Outcome of converting one wire value to a target kind."""

    ok: bool
    value: Any = None
    reason: str = ""

    @classmethod
    def success(cls, value: Any) -> "Coercion":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "Coercion":
        return cls(ok=False, reason=reason)


def describe_value(value: Any) -> str:
    """Name the wire type of a value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def coerce_int(value: Any) -> Coercion:
    if isinstance(value, bool):
        return Coercion.failure("expected an integer, got boolean")
    if isinstance(value, int):
        return Coercion.success(value)
    if isinstance(value, float):
        if value.is_integer():
            return Coercion.success(int(value))
        return Coercion.failure(f"{value} is not a whole number")
    if isinstance(value, str):
        text = value.strip()
        try:
            return Coercion.success(int(text))
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return Coercion.failure(f"'{value}' is not an integer")
        return coerce_int(number)
    return Coercion.failure(f"expected an integer, got {describe_value(value)}")


def coerce_float(value: Any) -> Coercion:
    if isinstance(value, bool):
        return Coercion.failure("expected a number, got boolean")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return Coercion.failure(f"'{value}' is not a number")
    else:
        return Coercion.failure(f"expected a number, got {describe_value(value)}")
    if not math.isfinite(number):
        return Coercion.failure(f"{value} is not a finite number")
    return Coercion.success(number)


def coerce_str(value: Any) -> Coercion:
    if isinstance(value, str):
        return Coercion.success(value)
    if isinstance(value, bool):
        return Coercion.success("true" if value else "false")
    if isinstance(value, (int, float)):
        return Coercion.success(str(value))
    return Coercion.failure(f"expected a string, got {describe_value(value)}")


def coerce_bool(value: Any) -> Coercion:
    if isinstance(value, bool):
        return Coercion.success(value)
    if isinstance(value, int) and value in (0, 1):
        return Coercion.success(bool(value))
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return Coercion.success(True)
        if text in _FALSE_STRINGS:
            return Coercion.success(False)
        return Coercion.failure(f"'{value}' is not a boolean (use true or false)")
    return Coercion.failure(f"expected a boolean, got {describe_value(value)}")


def coerce_list(value: Any) -> Coercion:
    if isinstance(value, list):
        return Coercion.success(value)
    if isinstance(value, tuple):
        return Coercion.success(list(value))
    return Coercion.failure(f"expected an array, got {describe_value(value)}")


def coerce_dict(value: Any) -> Coercion:
    if isinstance(value, Mapping):
        return Coercion.success(value)
    return Coercion.failure(f"expected an object, got {describe_value(value)}")


def coerce_enum(value: Any, enum_type: typing.Type[enum.Enum]) -> Coercion:
    if isinstance(value, bool):
        return Coercion.failure(f"expected one of {_enum_choices(enum_type)}, got boolean")
    try:
        return Coercion.success(enum_type(value))
    except ValueError:
        pass
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_type:
            if member.name.lower() == key:
                return Coercion.success(member)
            if isinstance(member.value, str) and member.value.lower() == key:
                return Coercion.success(member)
    return Coercion.failure(f"'{value}' is not one of {_enum_choices(enum_type)}")


def _enum_choices(enum_type: typing.Type[enum.Enum]) -> str:
    return ", ".join(
        str(member.value) if isinstance(member.value, str) else member.name for member in enum_type
    )


_COERCERS: Dict[type, Callable[[Any], Coercion]] = {
    int: coerce_int,
    float: coerce_float,
    str: coerce_str,
    bool: coerce_bool,
    list: coerce_list,
    dict: coerce_dict,
}


def _unwrap(kind: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` into ``(X, True)``; normalise ``List[...]`` to ``list``."""
    nullable = False
    origin = typing.get_origin(kind)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = typing.get_args(kind)
        inner = [arg for arg in args if arg is not type(None)]
        if len(inner) != 1 or len(args) != 2:
            raise TypeError(f"Only Optional[X] unions are supported, got {kind!r}")
        kind = inner[0]
        nullable = True
        origin = typing.get_origin(kind)
    if origin in (list, dict):
        kind = origin
    return kind, nullable


def kind_name(kind: Any) -> str:
    target, nullable = _unwrap(kind)
    if target is Any or target is object:
        name = "any"
    elif isinstance(target, type) and issubclass(target, enum.Enum):
        name = f"one of {_enum_choices(target)}"
    else:
        name = {int: "integer", float: "number", str: "string", bool: "boolean",
                list: "array", dict: "object"}.get(target, getattr(target, "__name__", str(target)))
    return f"{name} or null" if nullable else name


def coerce(value: Any, kind: Any) -> Coercion:
    """Convert a wire value to ``kind``.

    Raises:
        TypeError: If ``kind`` itself is not a supported target (a programming error)
    """
    target, nullable = _unwrap(kind)
    if target is Any or target is object:
        return Coercion.success(value)
    if value is None:
        return Coercion.success(None) if nullable else Coercion.failure("value is null")
    if isinstance(target, type) and issubclass(target, enum.Enum):
        return coerce_enum(value, target)
    coercer = _COERCERS.get(target)
    if coercer is None:
        raise TypeError(f"Unsupported parameter kind: {kind!r}")
    return coercer(value)


def natural_empty(kind: Any) -> Any:
    """Default used by get_optional when the caller supplies none."""
    target, nullable = _unwrap(kind)
    if nullable or target is Any or target is object:
        return None
    if isinstance(target, type) and issubclass(target, enum.Enum):
        return None
    if target not in _COERCERS:
        raise TypeError(f"Unsupported parameter kind: {kind!r}")
    return target()


class OperationParameters(Mapping[str, Any]):
    """Read-only, case-insensitive view over one call's parameters.

    The payload is deep-copied on construction so neither the caller nor the
    operation can change what the other sees. A key bound to ``None`` counts
    as absent.
    """

    __slots__ = ("_values", "_keys")

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        merged: Dict[str, Any] = dict(values or {})
        merged.update(kwargs)
        for key in merged:
            if not isinstance(key, str):
                raise TypeError(f"Parameter keys must be strings, got {type(key).__name__}")
        frozen = copy.deepcopy(merged)
        self._values: Mapping[str, Any] = MappingProxyType(frozen)
        self._keys: Mapping[str, str] = MappingProxyType({key.lower(): key for key in frozen})

    # Mapping protocol ------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self._values[self._keys[key.lower()]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"OperationParameters({dict(self._values)!r})"

    # Typed access ----------------------------------------------------------

    def _raw(self, key: str) -> Any:
        stored = self._keys.get(key.lower())
        if stored is None:
            return _MISSING
        value = self._values[stored]
        return _MISSING if value is None else value

    def has(self, key: str) -> bool:
        """True if ``key`` is present with a non-null value. Never coerces."""
        return self._raw(key) is not _MISSING

    def get_required(self, key: str, kind: Any = Any) -> Any:
        """Return ``key`` coerced to ``kind``.

        Raises:
            ParameterValidationError: If the key is absent, null, or not coercible
        """
        value = self._raw(key)
        if value is _MISSING:
            raise ParameterValidationError(key, f"{key} is required")
        result = coerce(value, kind)
        if not result.ok:
            raise ParameterValidationError(
                key,
                f"Invalid value for {key}: {result.reason}",
                details={"expected": kind_name(kind), "received": describe_value(value)},
            )
        return result.value

    def get_optional(self, key: str, kind: Any = Any, default: Any = _MISSING) -> Any:
        """Return ``key`` coerced to ``kind``, or ``default`` if absent or uncoercible.

        Without an explicit default, the natural empty value of ``kind`` is
        returned (0, "", False, [], {}, or None for Optional/enum/Any kinds).
        """
        fallback = natural_empty(kind) if default is _MISSING else default
        value = self._raw(key)
        if value is _MISSING:
            return fallback
        result = coerce(value, kind)
        return result.value if result.ok else fallback

    def require_all(self, *keys: str) -> None:
        """Check that every key is present before any work starts.

        Raises:
            ParameterValidationError: Naming every missing key at once
        """
        missing: List[str] = [key for key in keys if not self.has(key)]
        if missing:
            raise ParameterValidationError(
                missing[0],
                f"Missing required parameter(s): {', '.join(missing)}",
                details={"missing": missing},
            )

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(dict(self._values))
