"""
Argosy parse results.

ParseResult is built once per parse and never mutated afterwards.

- values: mapping primary option name → value(s), shaped by the destination
  (scalar value, list of values, dict of key → value). Options delivered to
  callbacks are not recorded here.
- operands: residual non-option tokens in input order.
- diagnostics: every error found, in scan order (ParseFault instances).
- warnings: non-fatal faults (e.g., deprecated options); never affect ok.
- ok: True when there are no diagnostics.

Surfacing faults
- report(): print warnings and errors through rich and return the
  conventional exit status (0 on success, 1 otherwise).
- check(): raise ParseExit (an ExceptionGroup of the diagnostics) when not ok.
- warn(): emit the warnings through the stdlib warnings module.
"""
import copy
from types import MappingProxyType

from .faults import ParseExit, trigger


class ParseResult:
    __slots__ = ("_values", "_operands", "_diagnostics", "_warnings")

    def __init__(self, values, operands, diagnostics=(), warnings=()):
        self._values = {name: copy.copy(value) for name, value in values.items()}
        self._operands = list(operands)
        self._diagnostics = tuple(diagnostics)
        self._warnings = tuple(warnings)

    @property
    def values(self):
        """
        read-only view; list and map values are fresh copies on every access.
        """
        return MappingProxyType({name: copy.copy(value) for name, value in self._values.items()})

    @property
    def operands(self):
        return list(self._operands)

    @property
    def diagnostics(self):
        return self._diagnostics

    @property
    def warnings(self):
        return self._warnings

    @property
    def ok(self):
        return not self._diagnostics

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return (
            self._values == other._values and
            self._operands == other._operands and
            self._diagnostics == other._diagnostics and
            self._warnings == other._warnings
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "ok", self.ok
        yield "values", self._values
        yield "operands", self._operands
        if self._diagnostics:
            yield "diagnostics", [str(fault) for fault in self._diagnostics]
        if self._warnings:
            yield "warnings", [str(fault) for fault in self._warnings]

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def report(self, console=None, /, *, colorful=True, fancy=False):
        """
        render warnings then errors and return the exit status for the caller.

        parameters
        - console: rich Console to print on (defaults to the shared stderr console).
        - colorful: apply styles (host overrides via __styles__ in __main__).
        - fancy: wrap each fault in a rich Panel.

        returns
        - 0 when ok, 1 otherwise.
        """
        options = {"shell": True, "colorful": colorful, "fancy": fancy}
        if console is not None:
            options["console"] = console

        for warning in self._warnings:
            trigger(warning, **options)

        if not self._diagnostics:
            return 0

        trigger(ParseExit(self._diagnostics), **options)
        return 1

    def check(self):
        """
        return self when ok; raise ParseExit grouping every diagnostic otherwise.
        """
        if self._diagnostics:
            trigger(ParseExit(self._diagnostics))
        return self

    def warn(self):
        """
        emit every warning through warnings.warn (category: the warning's class).
        """
        for warning in self._warnings:
            trigger(warning)


__all__ = (
    "ParseResult",
)
