"""
Argosy parser engine: scan command-line tokens against a schema.

What this module provides
- Parser: binds a Schema, a ParserConfig, and an optional operand callback;
  Parser.parse(tokens) runs one scan and returns a fresh ParseResult.
- parse(tokens, schema, config): one-shot convenience that never raises for a
  bad schema (the SchemaError becomes the single diagnostic of the result).
- Finish: raise it from a callback to stop option recognition; every later
  token becomes an operand.

Token classification (left to right, while recognition is active)
- "--" stops recognition; it is consumed, later tokens are operands verbatim.
- "--word[=value]" is an option word. A single-dash token is an option word too
  when bundling is off (or, with bundling, when allow_single_dash_words is set
  and its first letter is not a declared letter).
- with bundling, "-abc" is read letter by letter; bundling_override lets a
  whole-token word match win over the letters.
- "-" alone and anything else is an operand; require_order makes the first
  operand stop recognition.

Faults never abort a scan: each one is recorded with the ordinal position of
its token, the occurrence is skipped, and scanning continues so one run reports
every problem.

Quick start
    from argosy import Parser, option

    parser = Parser([option("verbose|v+"), option("width|w=i"), option("lib|I=s@")])
    result = parser.parse(["-v", "--width=80", "src", "-I", "a", "-I", "b"])
    result.values    # {"verbose": 1, "width": 80, "lib": ["a", "b"]}
    result.operands  # ["src"]
"""
import builtins
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .config import ParserConfig
from .faults import *
from .options import Arity, Destination
from .results import ParseResult
from .schema import Schema
from .utils import *


class Finish(Exception):
    """
    Raised by a callback to stop option recognition after the current token.
    """


class _Scan:
    """
    per-invocation scan state; one instance per Parser.parse() call.

    index is the 1-based position of the most recently consumed token.
    """

    def __init__(self, parser, tokens):
        self.schema = parser.schema
        self.config = parser.config
        self.operand = parser.operand
        self.tokens = deque(tokens)
        self.index = 0
        self.active = True
        self.values = {}
        self.operands = []
        self.diagnostics = []
        self.warnings = []

    def run(self):
        while self.tokens:
            token = self.next()

            if not self.active:
                self.keep(token)
            elif token == "--":
                self.active = False
            elif token.startswith("--"):
                self.word(token[2:], token)
            elif token.startswith("-") and len(token) > 1:
                self.dash(token)
            else:
                self.keep(token)
                if self.config.require_order:
                    self.active = False

        return ParseResult(self.values, self.operands, self.diagnostics, self.warnings)

    def next(self):
        self.index += 1
        return self.tokens.popleft()

    def fault(self, cls, message, /, index=Unset, **options):
        self.diagnostics.append(cls(message, index=coalesce(index, self.index), docs=getdoc(cls.code), **options))

    def keep(self, token):
        self.operands.append(token)
        if self.operand is None:
            return
        try:
            self.operand(token)
        except Finish:
            self.active = False
        except Exception as exception:
            self.fault(
                CallbackError,
                "operand callback failed on %r at %s position: %s" % (token, ordinal(self.index), exception),
                input=token,
                exception=exception,
                hint="check the operand handler; the scan continued with the next token",
            )

    def dash(self, token):
        body = token[1:]

        if not self.config.bundling:
            return self.word(body, token)

        # bundling_override: a whole-token word match wins over the letters
        if self.config.bundling_override and len(self.schema.resolve(body.partition("=")[0])) == 1:
            return self.word(body, token)

        if self.config.allow_single_dash_words and self.schema.letter(body[0]) is None:
            return self.word(body, token)

        self.bundle(body, token)

    def word(self, body, token):
        name, equals, inline = body.partition("=")
        input = token.partition("=")[0]
        start = self.index

        hits = self.schema.resolve(name)
        if len(hits) != 1:
            if self.config.pass_through:
                self.keep(token)
                if self.config.require_order:
                    self.active = False
                return
            if not hits:
                return self.fault(
                    UnknownOptionError,
                    "unknown option %r at %s position" % (input, ordinal(start)),
                    input=input,
                    hint="check the spelling, or pass '--' before operands that start with '-'",
                )
            candidates = sorted(hit.name for hit in hits)
            return self.fault(
                AmbiguousAbbreviationError,
                "option %r at %s position is ambiguous (%s)" % (input, ordinal(start), ", ".join(candidates)),
                input=input,
                candidates=candidates,
                hint="type more of the name, for example %r" % ("--" + candidates[0]),
            )

        hit, = hits
        spec = hit.spec
        self.deprecation(spec, input)

        if not spec.takes_value:
            if equals:
                return self.fault(
                    UnexpectedValueError,
                    "flag %r at %s position does not take a value" % (input, ordinal(start)),
                    input=input,
                    argument=spec,
                    hint="remove everything from '=' (for example: %s)" % input,
                )
            return self.deliver(spec, not hit.negated, input, start)

        if equals:
            text = inline
        elif spec.arity is Arity.REQUIRED:
            if (text := self.take(spec, input, start)) is Unset:
                return
        else:
            text = Unset

        if (value := self.convert(spec, input, text, start)) is not Unset:
            self.deliver(spec, value, input, start)

    def bundle(self, body, token):
        start = self.index
        rest = body

        while rest:
            # a callback raised Finish mid-bundle: the unread letters are an operand
            if not self.active:
                return self.keep("-" + rest)

            char, rest = rest[0], rest[1:]
            input = "-" + char

            if (spec := self.schema.letter(char)) is None:
                if self.config.pass_through:
                    self.keep(input + rest)
                    if self.config.require_order:
                        self.active = False
                    return
                self.fault(
                    UnknownOptionError,
                    "unknown option %r in bundle %r at %s position" % (input, token, ordinal(start)),
                    input=input,
                    token=token,
                    hint="bundles only accept single-letter options; use '--' for option words",
                )
                continue

            self.deprecation(spec, input)

            if not spec.takes_value:
                self.deliver(spec, True, input, start)
                continue

            if rest:
                if not spec.type.numeric or spec.destination is Destination.MAP:
                    text, rest = rest, ""
                elif prefix := spec.type.prefix(rest):
                    text, rest = prefix, rest[len(prefix):]
                elif spec.arity is Arity.OPTIONAL:
                    text = Unset
                else:
                    text, rest = rest, ""
            elif spec.arity is Arity.REQUIRED:
                if (text := self.take(spec, input, start)) is Unset:
                    return
            else:
                text = Unset

            if (value := self.convert(spec, input, text, start)) is not Unset:
                self.deliver(spec, value, input, start)

    def take(self, spec, input, start):
        """
        consume the next whole token as the value of a required option.
        """
        if self.tokens and self.tokens[0] != "--":
            return self.next()
        self.fault(
            MissingValueError,
            "option %r at %s position requires a value" % (input, ordinal(start)),
            index=start,
            input=input,
            argument=spec,
            hint="pass a value after it (for example: %s <value>)" % input,
        )
        return Unset

    def convert(self, spec, input, text, start):
        """
        coerce raw text for spec; Unset text means "no attached value".

        maps have no empty value: Unset text for a map is a malformed key=value.

        returns Unset (after recording a fault) when the occurrence is skipped.
        """
        if spec.destination is Destination.MAP:
            key, equals, raw = coalesce(text, "").partition("=")
            if not equals or not key:
                self.fault(
                    MalformedKeyedValueError,
                    "option %r at %s position expects key=value, got %r" % (input, ordinal(start), coalesce(text, "")),
                    index=start,
                    input=input,
                    argument=spec,
                    value=coalesce(text, ""),
                    hint="write the value as key=value (for example: %s name=value)" % input,
                )
                return Unset
            try:
                return key, spec.type.coerce(raw)
            except ValueError as exception:
                self.coercion(spec, input, raw, start, exception)
                return Unset

        if text is Unset:
            return spec.type.empty

        try:
            return spec.type.coerce(text)
        except ValueError as exception:
            self.coercion(spec, input, text, start, exception)
            return Unset

    def coercion(self, spec, input, text, start, exception):
        self.fault(
            TypeCoercionError,
            "value %r for option %r at %s position is not a valid %s (%s)" % (
                text, input, ordinal(start), spec.type.value, exception
            ),
            index=start,
            input=input,
            argument=spec,
            value=text,
            hint="pass a %s value, for example %s" % (
                spec.type.value, {"integer": "42", "float": "2.5"}.get(spec.type.value, "text")
            ),
        )

    def deliver(self, spec, value, input, start):
        name = spec.primary
        match spec.destination:
            case Destination.SCALAR:
                if spec.incremental:
                    self.values[name] = self.values.get(name, 0) + 1
                else:
                    self.values[name] = value
            case Destination.LIST:
                self.values.setdefault(name, []).append(value)
            case Destination.MAP:
                key, item = value
                self.values.setdefault(name, {})[key] = item
            case Destination.CALLBACK:
                try:
                    spec.callback(name, value)
                except Finish:
                    self.active = False
                except Exception as exception:
                    self.fault(
                        CallbackError,
                        "callback for option %r at %s position failed: %s" % (input, ordinal(start), exception),
                        index=start,
                        input=input,
                        argument=spec,
                        exception=exception,
                        hint="check the option handler; the scan continued with the next token",
                    )

    def deprecation(self, spec, input):
        if not spec.deprecated:
            return
        self.warnings.append(DeprecatedOptionWarning(
            "option %r at %s position is deprecated" % (input, ordinal(self.index)),
            input=input,
            index=self.index,
            argument=spec,
            docs=getdoc(DeprecatedOptionWarning.code),
            hint="it still works for now; check the program's documentation for its successor",
        ))


class Parser:
    """
    Reusable option parser.

    Parameters
    - schema: Schema | Iterable[OptionSpec | str]
      the recognized options; descriptor strings go through option().
    - config: ParserConfig | None
      matching policy (defaults to ParserConfig()); when a Schema built for a
      different config is given, it is rebuilt under this one.
    - operand: callable(token) | None
      called for every operand in scan order, interleaved with option callbacks.

    Raises at construction
    - SchemaError for colliding names (setup time, before any token is scanned).
    - TypeError for wrongly typed arguments.

    The parser holds no per-scan state: parse() may be called any number of
    times and returns structurally identical results for identical input.
    """

    def __init__(self, schema=(), config=None, /, *, operand=None):
        if config is not None and not isinstance(config, ParserConfig):
            raise TypeError("parser config must be a ParserConfig")
        if isinstance(schema, Schema):
            if config is not None and config != schema.config:
                schema = Schema(schema.specs, config)
        else:
            schema = Schema(schema, config)
        if operand is not None and not builtins.callable(operand):
            raise TypeError("parser operand callback must be callable")

        self._schema = schema
        self._operand = operand

    @property
    def schema(self):
        return self._schema

    @property
    def config(self):
        return self._schema.config

    @property
    def operand(self):
        return self._operand

    def parse(self, tokens=Unset, /):
        """
        Scan one token sequence and return a fresh ParseResult.

        Parameters
        - tokens:
          • Unset or None: read sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim.

        Raises
        - TypeError when tokens is not one of the above, or contains non-strings.
          Malformed command-line content never raises; it becomes diagnostics.
        """
        if tokens is Unset or tokens is None:
            tokens = sys.argv[1:]
        elif isinstance(tokens, str):
            tokens = shlex.split(tokens)
        elif isinstance(tokens, Iterable):
            tokens = list(tokens)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        return _Scan(self, tokens).run()

    def __repr__(self):
        return "parser(schema=%r, config=%r)" % (self._schema, self._schema.config)


def parse(tokens, schema=(), config=None, /, *, operand=None):
    """
    Parse tokens against schema in one call.

    Unlike Parser(...), a SchemaError does not propagate: the result carries it
    as its single diagnostic (ok is False) and no token is scanned.
    """
    try:
        parser = Parser(schema, config, operand=operand)
    except SchemaError as fault:
        return ParseResult({}, [], (fault,))
    return parser.parse(tokens)


__all__ = (
    "Finish",
    "Parser",
    "parse",
)
