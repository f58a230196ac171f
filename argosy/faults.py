"""
Argosy faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- ParseFault / ParseWarning: base types that carry message + options and know
  how to render themselves through rich (header, message, hint).
- ParseExit: an ExceptionGroup bundling every error of one parse, raised by
  ParseResult.check() and rendered by ParseResult.report().
- trigger(): central entry point to surface any fault (print in shell mode,
  raise or warn otherwise).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: every token-level message names the ordinal position
  of the offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single hint.
- Host overrides through __main__: __prog__, __styles__, __codes__, __docs__.
"""
import copy
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - schema (110xx)
      • SCHEMA_CONFLICT
    - option recognition (1110x)
      • UNKNOWN_OPTION, AMBIGUOUS_ABBREVIATION
    - values (1111x/1112x)
      • MISSING_VALUE, UNEXPECTED_VALUE, TYPE_COERCION, MALFORMED_KEYED_VALUE
    - delegated (1113x)
      • CALLBACK_ERROR
    - warnings (12xxx)
      • DEPRECATED_OPTION
    """
    # --- schema errors (110xx) ---
    SCHEMA_CONFLICT         = 11001

    # --- recognition errors (111xx) ---
    UNKNOWN_OPTION          = 11101
    AMBIGUOUS_ABBREVIATION  = 11102

    # --- value errors (111xx/112xx) ---
    MISSING_VALUE           = 11111
    UNEXPECTED_VALUE        = 11112
    TYPE_COERCION           = 11121
    MALFORMED_KEYED_VALUE   = 11122

    # --- delegated errors (113xx) ---
    CALLBACK_ERROR          = 11131

    # --- warnings (12xxx) ---
    DEPRECATED_OPTION       = 12101

    def normalize(self):
        """
        label shown in fault headers: __main__.__codes__[self] when the host
        defines it, the numeric id otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program():
    return getattr(__import__("__main__"), "__prog__", None) or os.path.basename(sys.argv[0] or "") or "argosy"


def _render(fault, palette, title_style):
    """
    rich renderable for one error or warning: "[ prog - code | title ]", the
    message, then " → hint". fancy=True moves the header into a Panel title.
    """
    colorful = fault.options.get("colorful", True)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(_program(), "prog-name"),
        " - ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), title_style),
        " ]"
    )
    body = [text(fault.message, "message")]
    if fault.hint:
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left", width=fault.options.get("width"))
    return Group(header, *body)


class _Fault:
    """
    behavior shared by errors and warnings.

    attributes
    - message: str, one sentence describing what happened and where.
    - options: read-only mapping of context (input, index, argument, hint, ...).
    - code/title/palette: class-level FaultCode, short title and styles for _render.

    two faults are equal when they have the same type, message, and position,
    so results of repeated runs compare equal.
    """
    code = FaultCode.SCHEMA_CONFLICT
    title = "parse error"
    heading = "error-title"
    palette = {}

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return (self.message, self.index) == (other.message, other.index)

    def __hash__(self):
        return hash((type(self), self.message, self.index))

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def index(self):
        return self.options.get("index")

    def __rich__(self):
        return _render(self, self.palette, self.heading)

    def __trigger__(self):
        if self.options.get("shell", False):
            return self.options.get("console", console).print(self)
        self.__surface__()

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **self.options | overrides)


class ParseFault(_Fault, Exception):
    """
    base type for every recoverable or fatal parse error; raised outside shell mode.
    """
    palette = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __surface__(self):
        raise self from None


class SchemaError(ParseFault, ValueError):
    """
    Raised at setup time when option specs are inconsistent or their names collide.
    """
    code = FaultCode.SCHEMA_CONFLICT
    title = "schema conflict"


class UnknownOptionError(ParseFault):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class AmbiguousAbbreviationError(ParseFault):
    code = FaultCode.AMBIGUOUS_ABBREVIATION
    title = "ambiguous abbreviation"

    @property
    def candidates(self):
        return tuple(self.options.get("candidates", ()))


class MissingValueError(ParseFault):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class UnexpectedValueError(ParseFault):
    code = FaultCode.UNEXPECTED_VALUE
    title = "flag cannot take a value"


class TypeCoercionError(ParseFault):
    code = FaultCode.TYPE_COERCION
    title = "invalid value"


class MalformedKeyedValueError(ParseFault):
    code = FaultCode.MALFORMED_KEYED_VALUE
    title = "malformed keyed value"


class CallbackError(ParseFault):
    code = FaultCode.CALLBACK_ERROR
    title = "callback error"

    @property
    def exception(self):
        return self.options.get("exception")


class ParseWarning(_Fault, Warning):
    """
    base type for non-fatal faults; never affects ParseResult.ok.

    outside shell mode it is emitted through warnings.warn.
    """
    code = FaultCode.DEPRECATED_OPTION
    title = "parse warning"
    heading = "warning-title"
    palette = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "warning-title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __surface__(self):
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 5))


class DeprecatedOptionWarning(ParseWarning):
    code = FaultCode.DEPRECATED_OPTION
    title = "deprecated option"


class ParseExit(ExceptionGroup):
    """
    every error of one parse, grouped under a single "bad exit" header.

    raised by ParseResult.check(); printed by ParseResult.report().
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble("[ ", text(_program(), "prog-name"), " - ", text(self.message.title(), "title"), " ]")
        faults = [copy.replace(fault, colorful=colorful, fancy=False) for fault in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*faults), title=header, title_align="left")
        return Group(header, *faults)

    def __trigger__(self):
        if self.options.get("shell", False):
            return self.options.get("console", console).print(self)
        raise self from None

    def __replace__(self, /, **overrides):
        return type(self)(self.exceptions, **self.options | overrides)


def trigger(fault, /, **options):
    """
    surface a fault: print it (shell=True), raise it, or warn it.

    options are merged into a copy of the fault through copy.replace(); the
    copy's __trigger__ decides. console=... redirects shell output.
    """
    if not all(callable(getattr(fault, hook, None)) for hook in ("__trigger__", "__replace__")):
        raise TypeError("trigger() argument must define __trigger__ and __replace__")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation the host registered for code in __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a FaultCode")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParseFault",
    "SchemaError",
    "UnknownOptionError",
    "AmbiguousAbbreviationError",
    "MissingValueError",
    "UnexpectedValueError",
    "TypeCoercionError",
    "MalformedKeyedValueError",
    "CallbackError",
    "ParseWarning",
    "DeprecatedOptionWarning",
    "ParseExit",
    "trigger",
    "getdoc",
)
