r"""
Argosy option specifications.

Overview
- Enumerations
  • Arity: NONE (presence-only flag), REQUIRED (must have a value), OPTIONAL
    (value only when immediately available).
  • ValueType: FLAG, STRING, INTEGER, FLOAT, with coercion and empty values.
  • Destination: SCALAR (last wins), LIST (accumulates), MAP (key=value
    entries), CALLBACK (delivered to a callable in scan order).

- Specs
  • OptionSpec: one recognized option with a primary name plus aliases.

- Builders
  • option("length|l=i@"): compact descriptor strings (names, then a value suffix).
  • getopts("ab:c"): single-letter strings, ":" after a letter that takes a value.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties.

Validation highlights (SchemaError on violation)
- arity NONE if and only if type FLAG.
- MAP requires a value-bearing type; CALLBACK requires a callable, and a
  callable is only accepted with CALLBACK.
- negatable/incremental are flag-only; incremental is scalar-only.
- Names are trimmed of leading dashes, must be non-empty, contain no '=' or
  whitespace, and be unique within a spec.

Quick example:
    >>> from argosy.options import option, getopts, OptionSpec
    >>> option("width|w=i")
    option-spec(names=('width', 'w'), arity=<Arity.REQUIRED: 'required'>, ...)
    >>> getopts("vo:")
    (option-spec(names=('v',), ...), option-spec(names=('o',), ...))
"""
import builtins
import functools
import operator
import re
from enum import StrEnum

from .faults import SchemaError
from .utils import *

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NAME = re.compile(r"\?|\w(?:[\w-]*\w)?")
_DESCRIPTOR = re.compile(
    r"(?P<names>[^=:!+]+?)"
    r"(?:(?P<switch>[!+])|(?P<mode>[=:])(?P<type>[sif])(?P<destination>[@%])?)?"
)


class Arity(StrEnum):
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class ValueType(StrEnum):
    """
    value type of an option, with its coercion rules.

    - FLAG: presence-only; never coerces text.
    - STRING: the raw text.
    - INTEGER: optional sign and decimal digits only ("0x10" and "1.5" fail).
    - FLOAT: optional sign, digits with an optional fraction and exponent.
      Words such as "nan" or "inf" are rejected.
    """
    FLAG = "flag"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"

    @property
    def empty(self):
        """
        value used when an optional-arity option has no attached text.
        """
        return {"flag": True, "string": "", "integer": 0, "float": 0.0}[self.value]

    @property
    def numeric(self):
        return self in (ValueType.INTEGER, ValueType.FLOAT)

    def coerce(self, text, /):
        """
        convert raw text into this type; raise ValueError when it does not fit.
        """
        match self:
            case ValueType.STRING:
                return text
            case ValueType.INTEGER:
                if not _INTEGER.fullmatch(text):
                    raise ValueError("number expected")
                return int(text)
            case ValueType.FLOAT:
                if not _FLOAT.fullmatch(text):
                    raise ValueError("real number expected")
                return float(text)
            case _:
                raise ValueError("flags do not take values")

    def prefix(self, text, /):
        """
        return the leading text a bundled numeric value may take (possibly "").

        strings take everything; numbers take their longest numeric prefix so the
        rest of the bundle can continue as letters (-w80L24 → "80", then L24).
        """
        if self is ValueType.STRING:
            return text
        pattern = _INTEGER if self is ValueType.INTEGER else _FLOAT
        match = pattern.match(text)
        return match.group() if match else ""


class Destination(StrEnum):
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"
    CALLBACK = "callback"


class SpecType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
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


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate and normalize option names.

    - each name must be a string; leading dashes are stripped ("--foo" → "foo").
    - names must match r"\?|\w(?:[\w-]*\w)?" (no '=', no whitespace).
    - duplicates within one spec are rejected.
    - the order is kept: the first name is the primary one.
    """
    names = []
    if not metadata["names"]:
        raise SchemaError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip().lstrip("-")):
            raise SchemaError(f"{cls.__typename__} names cannot be empty-strings")
        elif not _NAME.fullmatch(name):
            raise SchemaError(f"{cls.__typename__} name {name!r} is not a valid option name")
        elif name in names:
            raise SchemaError(f"{cls.__typename__} names cannot contain duplicates ({name!r})")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_kinds(cls, metadata, /):
    """
    Internal: resolve arity/type/destination defaults and check their consistency.

    defaults
    - neither arity nor type: a flag (NONE/FLAG).
    - value-bearing type only: REQUIRED.
    - value-bearing arity only: STRING.
    - destination: CALLBACK when a callback is given, SCALAR otherwise.
    """
    label = "%s %r" % (cls.__typename__, metadata["names"][0])

    try:
        arity = metadata["arity"] if metadata["arity"] is Unset else Arity(metadata["arity"])
        type = metadata["type"] if metadata["type"] is Unset else ValueType(metadata["type"])
        destination = metadata["destination"]
        if destination is not Unset:
            destination = Destination(destination)
    except ValueError as exception:
        raise SchemaError(f"{label}: {exception}") from None

    callback = metadata["callback"]

    if arity is Unset and type is Unset:
        arity, type = Arity.NONE, ValueType.FLAG
    elif arity is Unset:
        arity = Arity.NONE if type is ValueType.FLAG else Arity.REQUIRED
    elif type is Unset:
        type = ValueType.FLAG if arity is Arity.NONE else ValueType.STRING

    if (arity is Arity.NONE) != (type is ValueType.FLAG):
        raise SchemaError(f"{label}: arity {arity.value!r} conflicts with type {type.value!r}")

    if destination is Unset:
        destination = Destination.CALLBACK if callback is not Unset else Destination.SCALAR

    if destination is Destination.CALLBACK and not builtins.callable(callback):
        raise SchemaError(f"{label}: callback destination requires a callable")
    if destination is not Destination.CALLBACK and callback is not Unset:
        raise SchemaError(f"{label}: a callback conflicts with destination {destination.value!r}")
    if destination is Destination.MAP and type is ValueType.FLAG:
        raise SchemaError(f"{label}: map destination requires a value-bearing type")

    if metadata["negatable"] and type is not ValueType.FLAG:
        raise SchemaError(f"{label}: only flags can be negatable")
    if metadata["incremental"]:
        if type is not ValueType.FLAG:
            raise SchemaError(f"{label}: only flags can be incremental")
        if destination is not Destination.SCALAR:
            raise SchemaError(f"{label}: incremental flags require a scalar destination")
        if metadata["negatable"]:
            raise SchemaError(f"{label}: a flag cannot be both negatable and incremental")

    metadata["arity"] = arity
    metadata["type"] = type
    metadata["destination"] = destination
    metadata["callback"] = coalesce(callback)


class OptionSpec(metaclass=SpecType):
    """
    One recognized option.

    Fields (read-only)
    - names: tuple[str, ...], primary name first, then aliases (no dashes).
    - arity: Arity.
    - type: ValueType.
    - destination: Destination.
    - callback: callable(name, value) for CALLBACK destinations, else None.
    - negatable: flags only; "--no-NAME"/"--noNAME" store False.
    - incremental: flags only; each occurrence adds one to a counter.
    - deprecated: using the option records a DeprecatedOptionWarning.

    Derived
    - primary: names[0], the key under which values are delivered.
    - letters: the single-character names (eligible for bundling).
    - takes_value: arity is not NONE.
    """

    __introspectable__ = (
        "names",
        "arity",
        "type",
        "destination",
        "callback",
        "negatable",
        "incremental",
        "deprecated",
    )

    __displayable__ = (
        "names",
        "arity",
        "type",
        "destination",
    )

    __slots__ = (
        "_names",
        "_arity",
        "_type",
        "_destination",
        "_callback",
        "_negatable",
        "_incremental",
        "_deprecated",
    )

    def __new__(
            cls,
            *names,
            arity=Unset,
            type=Unset,
            destination=Unset,
            callback=Unset,
            negatable=False,
            incremental=False,
            deprecated=False
    ):
        """
        Construct an OptionSpec, raising SchemaError on inconsistent metadata.

        Parameters
        - names: one or more str, primary first ("foo", "f", or "--foo").
        - arity: Arity | str ("none", "required", "optional").
        - type: ValueType | str ("flag", "string", "integer", "float").
        - destination: Destination | str ("scalar", "list", "map", "callback").
        - callback: callable(name, value); implies destination CALLBACK.
        - negatable / incremental / deprecated: bool.
        """
        metadata = {
            "names": names,
            "arity": arity,
            "type": type,
            "destination": destination,
            "callback": callback,
            "negatable": bool(negatable),
            "incremental": bool(incremental),
            "deprecated": bool(deprecated),
        }
        _sanitize_names(cls, metadata)
        _sanitize_kinds(cls, metadata)

        self = super().__new__(cls)
        # Specs are sealed after construction; backing fields are written once here.
        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)
        return self

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} is read-only")

    def __replace__(self, **overrides):
        fields = {name: getattr(self, name) for name in type(self).__introspectable__} | overrides
        names = fields.pop("names")
        if fields["callback"] is None:
            fields["callback"] = Unset
        return type(self)(*names, **fields)

    @property
    def primary(self):
        return self._names[0]

    @property
    def letters(self):
        return tuple(name for name in self._names if len(name) == 1)

    @property
    def takes_value(self):
        return self._arity is not Arity.NONE

    def __option__(self):
        """
        Introspection hook: identify this object as an OptionSpec.
        """
        return self


def option(descriptor, /, **metadata):
    """
    Build an OptionSpec from a compact descriptor string.

    Grammar
    - "name|alias|..." followed by an optional suffix:
      • (nothing)  flag
      • "!"        negatable flag (--no-name, --noname)
      • "+"        incremental flag (counter)
      • "=T"       required value, T in s (string), i (integer), f (float)
      • ":T"       optional value
      • then "@" (list) or "%" (map) after a value suffix.
    - keyword arguments are forwarded to OptionSpec (callback=, deprecated=, ...).

    Examples
    - option("verbose|v+")     → incremental flag
    - option("define|D=s%")    → required string into a map
    - option("lib=s@")         → required string accumulated in a list
    - option("size:i")         → optional integer (0 when no value is attached)
    """
    if not isinstance(descriptor, str):
        raise TypeError("option() argument must be a string")
    if not (parsed := _DESCRIPTOR.fullmatch(descriptor.strip())):
        raise SchemaError("option descriptor %r is malformed" % descriptor)

    names = parsed["names"].split("|")
    spec = {}

    match parsed["switch"], parsed["mode"]:
        case "!", None:
            spec["negatable"] = True
        case "+", None:
            spec["incremental"] = True
        case None, "=" | ":" as mode:
            spec["arity"] = Arity.REQUIRED if mode == "=" else Arity.OPTIONAL
            spec["type"] = {"s": ValueType.STRING, "i": ValueType.INTEGER, "f": ValueType.FLOAT}[parsed["type"]]
            if destination := parsed["destination"]:
                spec["destination"] = Destination.LIST if destination == "@" else Destination.MAP

    return OptionSpec(*names, **spec | metadata)


def getopts(letters, /, **metadata):
    """
    Build OptionSpecs from a getopt letter string.

    Each letter is a flag; a letter followed by ':' takes a required string.
    getopts("ab:c") → flags a and c, option b with a required value.
    """
    if not isinstance(letters, str):
        raise TypeError("getopts() argument must be a string")

    specs = []
    for match in re.finditer(r"(.)(:?)", letters):
        letter, colon = match.groups()
        if not (letter.isalnum() or letter == "?"):
            raise SchemaError("getopts() letter %r is not a valid option letter" % letter)
        if colon:
            specs.append(OptionSpec(letter, arity=Arity.REQUIRED, type=ValueType.STRING, **metadata))
        else:
            specs.append(OptionSpec(letter, **metadata))
    return tuple(specs)


__all__ = (
    "Arity",
    "ValueType",
    "Destination",
    "OptionSpec",
    "option",
    "getopts",
)
