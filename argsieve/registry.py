"""
argsieve registry: the ordered specification set and its shared error list.

What this module provides
- Registry: owns the specifications (registration order matters), the indices the
  matcher relies on, and the error list of the current pass.
  • add(*names, **options) / register(spec): build or adopt a Specification.
  • match(tokens): run argsieve.matching over a token sequence.
  • identify(spec): stable display name used by error messages and help layers.
  • reset(): clear every result slot and the error list (registration untouched).
  • has_errors() / errors() / faults(): read the outcome of a pass.
  • add_error(spec, message): fold host-side validation into the same list.
  • check() / report(): surface errors through rich (raise, print or exit).

Indices built at registration
- names: every alias of every specification (uniqueness is enforced here).
- shortcuts: final character → specification, for aliases of length ≤ 2
  ("-a" and "a" both index 'a'). Later registrations take the slot.
- prefix: the dash prefix that marks a token as a flag ("--", "-" or None).
  The first double-dash alias sets "--"; any single-dash alias sets "-".
- dependents: reverse of Specification.only_if, for display nesting.

Quick start
    from argsieve import Registry

    registry = Registry()
    verbose = registry.add("--verbose", "-v")
    count = registry.add("--count", "-c", type=int, requires_param=True)
    files = registry.add(multi_param=True, metavar="file")

    registry.match(["-v", "-c", "3", "a.txt", "b.txt"])
    registry.check()  # raises MatchExit when input was bad
"""
from rich.console import Console

from .faults import *
from .faults import console
from .matching import Matcher
from .specs import Specification


class Registry:
    """
    Ordered collection of specifications plus the shared error list.

    Options
    - delimiter_skip: bool
      Allow a parameter glued onto a shortcut bundle ("-F~" for "-F ~",
      "-abc1" for "-a -b -c 1"). Off by default.
    - shell: bool
      Render faults with rich instead of raising them (see check()).
    - fancy: bool
      Render faults inside panels.
    - colorful: bool
      Use the colour styles (overridable through __styles__ in __main__).
    """

    def __init__(self, *, delimiter_skip=False, shell=False, fancy=False, colorful=True):
        self.delimiter_skip = bool(delimiter_skip)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

        self._specs = []
        self._names = set()
        self._shortcuts = {}
        self._prefix = None
        self._dependents = {}
        self._faults = []

    @property
    def specs(self):
        return tuple(self._specs)

    @property
    def prefix(self):
        return self._prefix

    def allow_delimiter_skip(self):
        """
        Turn on delimiter skip ("-F~" as a shortcut for "-F ~"). Returns self.
        """
        self.delimiter_skip = True
        return self

    def add(self, *names, **options):
        """
        Build a Specification from the given names/options and register it.

        No names makes a wildcard. See Specification for the accepted options.
        """
        return self.register(Specification(*names, **options))

    def register(self, spec, /):
        """
        Register a specification and index its names.

        Raises
        - TypeError: when `spec` is not a Specification.
        - ConfigurationError: when a name is already taken (here or earlier in the
          same specification), when `spec` is already registered, or when its
          dependency is not registered in this registry yet. Requiring dependencies
          first keeps the only_if graph acyclic.
        """
        if not isinstance(spec, Specification):
            raise TypeError("register() argument must be a specification")
        if spec._registry is not None:
            raise ConfigurationError("Specification already registered: %r" % spec)
        if spec.only_if is not None and spec.only_if._registry is not self:
            raise ConfigurationError(
                "Dependency of %s must be registered before it" % (
                    "wildcard" if spec.wildcard else '"%s"' % spec.names[0]
                )
            )

        names = set()
        for name in spec.names or ():
            if name in self._names or name in names:
                raise ConfigurationError("Duplicate argument name: \"%s\"" % name)
            names.add(name)

        for name in spec.names or ():
            # shortcut index for -a -b -c given as -abc (or abc)
            if len(name) <= 2:
                other = self._shortcuts.get(name[-1])
                if other is not None and other is not spec:
                    trigger(ShortcutCollisionWarning(
                        "shortcut %r of %r now resolves to %r" % (name[-1], other.names[0], name),
                        title="shortcut collision",
                        code=FaultCode.SHORTCUT_COLLISION,
                    ), shell=self.shell, colorful=self.colorful)
                self._shortcuts[name[-1]] = spec

            # which dash prefix makes a token a flag rather than a value
            double = name.startswith("--")
            single = not double and name.startswith("-")
            if self._prefix is None and double:
                self._prefix = "--"
            elif self._prefix in (None, "--") and single:
                self._prefix = "-"

        self._names |= names
        self._specs.append(spec)
        if spec.only_if is not None:
            self._dependents.setdefault(spec.only_if, []).append(spec)
        spec._registry = self
        return spec

    def dependents(self, spec, /):
        """
        Specifications registered with only_if=spec, in registration order.
        """
        return tuple(self._dependents.get(spec, ()))

    def identify(self, spec, /):
        """
        Stable display name of a specification.

        - named:    its first alias ("--count").
        - wildcard: a bracketed sample, angles when required ("<file(s)>"),
                    squares otherwise ("[value]").
        """
        if not spec.wildcard:
            return spec.names[0]
        angles = spec.requires_param or spec.required
        return "%s%s%s%s" % (
            "<" if angles else "[",
            spec.metavar or "value",
            "(s)" if spec.multi_param else "",
            ">" if angles else "]",
        )

    def match(self, tokens, /):
        """
        Match a token sequence (typically sys.argv[1:]) against the registry.

        Results land in each specification and in errors(); nothing is returned
        and user mistakes never raise. Call reset() between unrelated passes.
        """
        if isinstance(tokens, str):
            raise TypeError("match() argument must be a sequence of strings, not a string")
        Matcher(self).match(tokens)

    def reset(self):
        """
        Clear every result slot and the error list. Returns self.
        """
        for spec in self._specs:
            spec._clear()
        self._faults.clear()
        return self

    def is_flag(self, token, /):
        """
        Whether `token` would be read as an argument name rather than a value.
        """
        return self._prefix is not None and token.startswith(self._prefix) and token in self._names

    def add_error(self, spec, message, /):
        """
        Record a host-side validation error; `spec` (optional) is marked failed.
        Returns self.
        """
        if not isinstance(message, str):
            raise TypeError("add_error() message must be a string")
        self._fault(spec, message, code=FaultCode.DELEGATED_ERROR, title="invalid input")
        return self

    def _fault(self, spec, message, /, **options):
        if spec is not None:
            spec._failed = True
        self._faults.append(UserError(message, spec=spec, **options))

    def has_errors(self):
        return bool(self._faults)

    def errors(self):
        """
        Error messages of the current pass, in encounter order.
        """
        return [fault.message for fault in self._faults]

    def faults(self):
        """
        UserError objects of the current pass (message plus FaultCode and spec).
        """
        return tuple(self._faults)

    def check(self, *, deferred=False):
        """
        Surface the collected errors, if any.

        - shell=False: raise MatchExit carrying every UserError.
        - shell=True: render them with rich on stderr and exit with status 1
          (unless deferred, in which case control returns to the caller).
        """
        if not self._faults:
            return
        trigger(
            MatchExit(self._faults),
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            deferred=deferred,
        )

    def report(self, file=None):
        """
        Print the error messages one per line (stderr by default).
        """
        output = console if file is None else Console(file=file, highlight=False, color_system=None)
        for message in self.errors():
            output.print(message, markup=False, highlight=False, soft_wrap=True)

    def __repr__(self):
        return "registry(specs=%r, errors=%r)" % (len(self._specs), self.errors())

    def __rich_repr__(self):
        yield "specs", self.specs
        yield "errors", self.errors()


__all__ = (
    "Registry",
)
