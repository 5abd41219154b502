"""
argsieve matching engine: classify tokens, capture values, validate the pass.

What this module provides
- CaptureKind / Capture: the tagged outcome of trying one specification on one token.
  • NAME:     the token named the specification ("-v", "--count", or a bundle "-abc").
  • INLINE:   name and value in one token ("--count=3", bundle tail "-abc~").
  • WILDCARD: the token is a positional value for an unnamed specification.
- Matcher: one matching pass over a token sequence for a given Registry.

Core ideas
- First-registered-wins: every token is offered to the specifications in
  registration order; the first one that captures it owns it. This is why a
  single-valued wildcard ("expr") must be registered before a multi-valued one
  ("file…").
- Values follow names: after a NAME capture for a parameter-allowing argument the
  next token is taken as its value unless it reads as a flag; multi-valued
  arguments and wildcards keep taking values until the next flag.
- Flags vs values: a token is a flag only if it starts with the registry's
  significant dash prefix and is a registered name, so "-1" is a value whenever
  no single-dash name exists.
- Bundles are resolved without side effects until they succeed, so a failed
  bundle leaves the next specification a clean slate.
- User mistakes never raise; they are folded into the registry as UserError
  objects, and the specification involved is marked failed.

Messages
- Invalid argument: "<token>"
- Argument <id> requires parameter
- <id>: Cannot supply multiple values; caused by: <token>
- Argument <id>: <converter message>   (wildcards: <converter message>)
- Missing argument: <id>
- Argument <id> only valid if <dependency id> present
"""
import enum
from typing import NamedTuple

from .faults import FaultCode


class CaptureKind(enum.Enum):
    NAME = "name"
    INLINE = "inline"
    WILDCARD = "wildcard"


class Capture(NamedTuple):
    kind: CaptureKind
    spec: object


class Matcher:
    """
    One matching pass of a token sequence against a registry.

    The matcher keeps the working tokens and index (like a parser cursor) and
    writes straight into the registry's specifications and error list.
    """

    def __init__(self, registry):
        self.registry = registry
        self._tokens = ()
        self._index = 0

    def match(self, tokens):
        """
        classify every token, then run the post-pass validation.

        loop
        - offer the token to each specification in registration order (attempt()).
        - NAME on a parameter-allowing spec: take the following value(s) when the
          next token is not a flag, otherwise report a missing parameter if one
          is required.
        - WILDCARD: take this token and, for multi-valued wildcards, the run of
          values after it.
        - nothing matched: report an invalid argument and move on.
        """
        self._tokens = tuple(tokens)
        self._index = 0

        while self._index < len(self._tokens):
            token = self._tokens[self._index]

            for spec in self.registry.specs:
                if capture := self.attempt(spec, token):
                    break
            else:
                self._fault(None, "Invalid argument: \"%s\"" % token, code=FaultCode.INVALID_ARGUMENT,
                            title="invalid argument", token=token)
                self._index += 1
                continue

            match capture.kind:
                case CaptureKind.NAME if capture.spec.allows_param:
                    if self._value_follows():
                        self._index += 1
                        self._consume(capture.spec)
                    elif capture.spec.requires_param:
                        self._missing_param(capture.spec)
                case CaptureKind.WILDCARD:
                    self._consume(capture.spec)

            self._index += 1

        self._validate()

    def attempt(self, spec, token):
        """
        try one specification on one token.

        returns
        - Capture(kind, spec) on success, where `spec` is the specification that
          owns whatever follows (the last one of a bundle).
        - None when the specification does not claim the token.

        order of checks
        1. wildcard: not yet found and the token is not a flag.
        2. exact alias.
        3. inline "alias=value" (parameter-allowing specs only); an empty value
           counts as no value.
        4. shortcut bundle for aliases of length ≤ 2 ("-abc", "aux", "-abc~").
        """
        if spec.wildcard:
            if not spec.found and not self.registry.is_flag(token):
                spec._found = True
                return Capture(CaptureKind.WILDCARD, spec)
            return None

        for name in spec.names:
            if token == name:
                spec._found = True
                spec._matched = name
                return Capture(CaptureKind.NAME, spec)

            if spec.allows_param and token.startswith(name + "="):
                spec._found = True
                spec._matched = name
                if value := token[len(name) + 1:]:
                    self._capture(spec, value)
                elif spec.requires_param:
                    self._missing_param(spec)
                return Capture(CaptureKind.INLINE, spec)

            if len(name) <= 2 and token.startswith(name):
                if capture := self._bundle(spec, name, token):
                    return capture

        return None

    def _bundle(self, spec, name, token):
        """
        expand a shortcut bundle that starts with `name`.

        each character after the alias is looked up in the registry's shortcut
        index. expansion stops at an unknown character, or right after a
        specification that requires a parameter (it must be last and take the rest).

        outcomes
        - whole token expanded: mark the bundle found, Capture(NAME, last).
        - delimiter skip on and the last one allows a parameter: mark the bundle
          found and capture the remaining suffix as its value, Capture(INLINE, last).
        - otherwise None, with nothing marked.
        """
        last = len(name) - 1
        chain = {last: spec}
        tail = spec

        for position in range(last + 1, len(token)):
            other = self.registry._shortcuts.get(token[position])
            if other is None or tail.requires_param:
                break
            chain[position] = tail = other
            last = position
        else:
            self._mark(chain, token, dashed=len(name) > 1)
            return Capture(CaptureKind.NAME, tail)

        suffix = token[last + 1:]
        if self.registry.delimiter_skip and tail.allows_param and not suffix.startswith(" "):
            self._mark(chain, token, dashed=len(name) > 1)
            self._capture(tail, suffix)
            return Capture(CaptureKind.INLINE, tail)

        return None

    @staticmethod
    def _mark(chain, token, *, dashed):
        # matched names are synthesized per character: "-a", "-b" (or "a", "b")
        for position, spec in chain.items():
            spec._found = True
            spec._matched = ("-" if dashed else "") + token[position]

    def _value_follows(self):
        return self._index < len(self._tokens) - 1 and not self.registry.is_flag(self._tokens[self._index + 1])

    def _consume(self, spec):
        """
        capture the value at the cursor and, for multi-valued specs, every
        following non-flag token. the cursor is left on the last value taken.
        """
        self._capture(spec, self._tokens[self._index])
        while spec.multi_param and self._value_follows():
            self._index += 1
            self._capture(spec, self._tokens[self._index])

    def _capture(self, spec, value):
        """
        store one raw value for a specification.

        - single-valued spec already holding a value: duplicate-value error, value dropped.
        - converter raising ValueError: invalid-parameter error, spec marked failed.
        - otherwise the first value becomes `param`; multi-valued specs append to `params`.
        """
        identity = self.registry.identify(spec)

        if spec._param is not None and not spec.multi_param:
            self._fault(spec, "%s: Cannot supply multiple values; caused by: %s" % (identity, value),
                        code=FaultCode.DUPLICATE_VALUE, title="duplicate value", token=value)
            return

        try:
            converted = spec.type(value)
        except ValueError as exception:
            message = str(exception)
            if not spec.wildcard:
                message = "Argument %s: %s" % (identity, message)
            self._fault(spec, message, code=FaultCode.INVALID_PARAMETER, title="invalid parameter", token=value)
            return

        if spec._param is None:
            spec._param = converted
        if spec.multi_param and converted is not None:
            spec._params.append(converted)

    def _missing_param(self, spec):
        self._fault(spec, "Argument %s requires parameter" % self.registry.identify(spec),
                    code=FaultCode.MISSING_PARAMETER, title="missing parameter")

    def _validate(self):
        """
        post-pass: required arguments and dependencies.

        skipped for specifications that already failed, so each one reports at
        most one problem of this kind. a required argument is only missing once
        its dependency (if any) was found.
        """
        identify = self.registry.identify

        for spec in self.registry.specs:
            if spec.failed:
                continue
            dependency = spec.only_if
            if spec.required and not spec.found and (dependency is None or dependency.found):
                self._fault(spec, "Missing argument: %s" % identify(spec),
                            code=FaultCode.MISSING_ARGUMENT, title="missing argument")
            elif spec.found and dependency is not None and not dependency.found:
                self._fault(spec, "Argument %s only valid if %s present" % (identify(spec), identify(dependency)),
                            code=FaultCode.DEPENDENCY_VIOLATION, title="dependency violation")

    def _fault(self, spec, message, /, **options):
        self.registry._fault(spec, message, **options)


__all__ = (
    "CaptureKind",
    "Capture",
    "Matcher",
)
