"""
argsieve faults (user errors, configuration faults, warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  the matcher can report. Codes are grouped by domain so logs and searches stay
  predictable.
- UserError: one recoverable input problem found during a matching pass. It
  carries the plain message (the string exposed by Registry.errors()) plus a
  read-only options mapping (code, title, spec, token) and knows how to render
  itself through rich.
- MatchExit: an exception group bundling every UserError of a pass.
- MatchWarning: soft diagnostics raised at registration time.
- ConfigurationError / ConversionError: the fatal and the converter-side faults.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

Integration
- The matcher never raises for user input; it folds UserError objects into the
  registry. Registry.check() hands the bundled MatchExit to trigger().
- In non-shell mode, exceptions are raised and warnings go through warnings.warn;
  in shell mode, both are rendered via rich on stderr.
"""
import copy
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the matcher (stable identifiers).

    grouping (by high-level domain)
    - tokens (2110x)
      • INVALID_ARGUMENT
    - parameters (2111x)
      • MISSING_PARAMETER, DUPLICATE_VALUE, INVALID_PARAMETER
    - validation pass (2112x)
      • MISSING_ARGUMENT, DEPENDENCY_VIOLATION
    - delegated errors (2113x)
      • DELEGATED_ERROR (added by the host through Registry.add_error)
    - warnings (22xxx)
      • SHORTCUT_COLLISION
    """
    # --- token errors ---
    INVALID_ARGUMENT     = 21101

    # --- parameter errors ---
    MISSING_PARAMETER    = 21111
    DUPLICATE_VALUE      = 21112
    INVALID_PARAMETER    = 21113

    # --- validation pass errors ---
    MISSING_ARGUMENT     = 21121
    DEPENDENCY_VIOLATION = 21122

    # --- delegated errors ---
    DELEGATED_ERROR      = 21131

    # --- warnings ---
    SHORTCUT_COLLISION   = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_HINTS = {
    FaultCode.INVALID_ARGUMENT: "check the spelling, or pass the value after the argument it belongs to",
    FaultCode.MISSING_PARAMETER: "add a value after the argument (for example: --name value or --name=value)",
    FaultCode.DUPLICATE_VALUE: "pass a single value for this argument",
    FaultCode.INVALID_PARAMETER: "fix the value and try again",
    FaultCode.MISSING_ARGUMENT: "this argument must be given",
    FaultCode.DEPENDENCY_VIOLATION: "add the argument it depends on, or drop this one",
}


def _program():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "argsieve")


class ConfigurationError(ValueError):
    """
    programming mistake in the specification set (e.g. duplicated names).

    raised at registration time and never folded into the user error list.
    """


class ConversionError(ValueError):
    """
    raised by converters to reject a parameter value.

    any ValueError works; this subclass only makes the intent explicit.
    """


class UserError(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", FaultCode.DELEGATED_ERROR)

    @property
    def spec(self):
        return self.options.get("spec")

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        header = Text.assemble(
            "[ ",
            text(_program(), styler("prog-name")),
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.options.get("title", "user error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint", _HINTS.get(self.code)):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*renders), title=header, title_align="left", width=width)

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MatchWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings
            "warning-message": "#D6D6DE",  # slightly lighter gray body
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options.get("code", FaultCode.SHORTCUT_COLLISION)
        header = Text.assemble(
            "[ ",
            text(_program(), "prog-name"),
            " — ",
            text(code.normalize(), "code"),
            " | ",
            text(self.options.get("title", "warning").title(), "warning-title"),
            " ]"
        )
        return Group(header, text(self.message, "warning-message"))

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShortcutCollisionWarning(MatchWarning): ...


class MatchExit(ExceptionGroup[UserError]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad arguments", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad arguments", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble("[ ", text(_program(), "prog-name"), " — ", text(self.message.title(), "title"), " ]")

        renders = [
            copy.replace(exception, colorful=colorful, fancy=self.options.get("fancy", False), ratio=2/3)
            for exception in self.exceptions
        ]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see MatchWarning, MatchExit).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised
      and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "ConversionError",
    "UserError",
    "MatchWarning",
    "ShortcutCollisionWarning",
    "MatchExit",
    "trigger",
)
