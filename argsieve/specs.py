r"""
argsieve argument specifications.

Overview
- Specification: one registered argument. Either *named* (one or more aliases such
  as "--ignore-case", "-i", "i") or a *wildcard* (an unnamed positional slot, the
  "expr" and "file…" in "grep expr file…").

- Configuration (fixed at construction)
  • names: tuple[str, ...] | None (None marks a wildcard).
  • type: converter str -> T (defaults to str); raising ValueError rejects the value.
  • required / allows_param / requires_param / multi_param: normalized so that
    required ⇒ requires_param ⇒ allows_param and multi_param ⇒ allows_param.
    A named spec given an explicit converter allows a parameter as well.
  • only_if: another Specification this one depends on (validation + display nesting).
  • metavar / descr: display-only sample ("value" by default) and one-line description.

- Result slot (written by argsieve.matching, cleared by Registry.reset)
  • found, failed, matched, param, params.
  • value(default) / values(defaults): convenience readers with fallbacks.

- Introspection & representation
  • SpecificationType metaclass exposes every name in __introspectable__ as a read-only
    property over the private "_<name>" field, and provides stable __repr__/__rich_repr__.

Validation highlights
- Names are non-empty strings without whitespace or "=" and must not be bare dashes.
- Cross-spec rules (unique names, registered dependencies) belong to the registry.
"""
import builtins
import functools
import operator
import re

from rich.text import Text

from .utils import *


class SpecificationType(type):
    """
    Metaclass wiring read-only properties and stable representations.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations; the
      fields shown come from __displayable__ (falls back to __introspectable__).

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, names, /):
    """
    Internal: validate alias strings of a named specification.

    Rules
    - every name is a str (TypeError otherwise);
    - non-empty, no whitespace, no "=", not made of dashes only (ValueError otherwise).

    Duplicates are left to Registry.register, which owns the global name set.
    """
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not name:
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"-{0,2}[^\s=-][^\s=]*", name):
            raise ValueError(f"{cls.__typename__} name {name!r} must not contain whitespace or '=' nor be only dashes")
    return tuple(names)


def _sanitize_display(cls, metadata, /):
    """
    Internal: validate display-only metadata ('metavar', 'descr').

    Both are optional; when provided they must be non-empty strings after
    trimming ('descr' may also be a rich Text).
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Specification(metaclass=SpecificationType):
    """
    A named argument (with aliases) or an unnamed wildcard slot.

    Configuration is immutable once constructed; results are rewritten by every
    Registry.match() call and cleared by Registry.reset().

    Warning
    - a Specification can be both found and failed when invalid input was captured.
    """

    __introspectable__ = (
        "names",
        "type",
        "wildcard",
        "required",
        "allows_param",
        "requires_param",
        "multi_param",
        "only_if",
        "metavar",
        "descr",
        "found",
        "failed",
        "matched",
        "param",
        "params",
    )

    __displayable__ = (
        "names",
        "required",
        "allows_param",
        "requires_param",
        "multi_param",
        "found",
        "failed",
        "matched",
        "param",
        "params",
    )

    def __init__(
            self,
            *names,
            type=Unset,
            required=False,
            allows_param=False,
            requires_param=False,
            multi_param=False,
            only_if=Unset,
            metavar=Unset,
            descr=Unset
    ):
        """
        Parameters
        - names: zero or more str
          Aliases exactly as the user types them ("--count", "-c", "c"). No names
          makes a wildcard.
        - type: Callable[[str], T]
          Converter applied to each captured value; ValueError rejects the value.
        - required: bool
          The argument must be present (only checked when its dependency is met).
        - allows_param / requires_param / multi_param: bool
          Parameter policy; see the module docstring for implications.
        - only_if: Specification
          Dependency; this argument is only valid when the other one was found.
        - metavar: str
          Sample shown for the parameter in identify() and help ("value" by default).
        - descr: str | Text
          One-line description for help layers.
        """
        metadata = {"metavar": metavar, "descr": descr}
        _sanitize_display(builtins.type(self), metadata)

        if not callable(type) and type is not Unset:
            raise TypeError(f"{builtins.type(self).__typename__} 'type' must be callable")
        if not isinstance(only_if, Specification | Unset):
            raise TypeError(f"{builtins.type(self).__typename__} 'only_if' must be a specification")

        self._wildcard = not names
        self._names = None if self._wildcard else _sanitize_names(builtins.type(self), names)
        self._type = coalesce(type, str)
        self._required = bool(required)
        self._requires_param = bool(requires_param) or self._required
        self._multi_param = bool(multi_param)
        self._allows_param = (
            bool(allows_param)
            or self._requires_param
            or self._multi_param
            or (type is not Unset and not self._wildcard)
        )
        self._only_if = coalesce(only_if)
        self._metavar = metadata["metavar"]
        self._descr = metadata["descr"]
        self._registry = None
        self._clear()

    def _clear(self):
        self._found = False
        self._failed = False
        self._matched = None
        self._param = None
        self._params = [] if self._multi_param else None

    def value(self, default=None):
        """
        Return the captured value, or `default` when the argument was not found
        or was given without a value (e.g. "--name=").

        For multi-valued specifications this is the first captured value.
        """
        if not self._found or self._param is None:
            return default
        return self._param

    def values(self, defaults=None):
        """
        Return the captured values as a new list, or `defaults` when the argument
        was not found or nothing was captured.
        """
        if not self._found:
            return defaults
        if self._multi_param:
            return list(self._params) if self._params else defaults
        return [self._param] if self._param is not None else defaults


__all__ = (
    "Specification",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del SpecificationType
