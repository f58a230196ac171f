"""
Argosy schema: the set of options one parser recognizes.

A Schema is assembled once, at setup time, from OptionSpec objects (or
descriptor strings understood by option()). Assembly validates that every name
is unique under the configured matching policy and raises SchemaError naming
both owners otherwise.

Lookups
- resolve(word): option words, with case folding and unique-prefix
  abbreviation when the config asks for them. Returns every distinct hit so
  the caller can tell unknown (none) from ambiguous (several) input.
- letter(char): exact single-character lookup used by bundles.

Negatable flags also register "no-NAME" and "noNAME" for each of their names.
"""
from collections.abc import Iterable

from .config import ParserConfig
from .faults import SchemaError
from .options import OptionSpec, option


class Hit:
    """
    one resolved option word: the spec, whether it was negated, and the name
    (as declared, with any "no" prefix) that matched.
    """
    __slots__ = ("spec", "negated", "name")

    def __init__(self, spec, negated, name):
        self.spec = spec
        self.negated = negated
        self.name = name

    def __eq__(self, other):
        if not isinstance(other, Hit):
            return NotImplemented
        return (self.spec, self.negated) == (other.spec, other.negated)

    def __hash__(self):
        return hash((id(self.spec), self.negated))

    def __repr__(self):
        return "hit(name=%r, negated=%r)" % (self.name, self.negated)


class Schema:
    """
    Validated, immutable collection of OptionSpecs bound to a ParserConfig.

    Construction raises
    - TypeError when an item is neither an OptionSpec, a descriptor string, nor an
      object whose __option__() hook returns an OptionSpec.
    - SchemaError when two names collide (after case folding, when enabled).
    """

    def __init__(self, specs=(), config=None, /):
        if config is None:
            config = ParserConfig()
        if not isinstance(config, ParserConfig):
            raise TypeError("schema config must be a ParserConfig")
        if isinstance(specs, (str, OptionSpec)) or not isinstance(specs, Iterable):
            raise TypeError("schema specs must be an iterable of option specs")

        self._config = config
        self._specs = []
        self._words = {}
        self._letters = {}

        for spec in specs:
            if isinstance(spec, str):
                spec = option(spec)
            elif hasattr(spec, "__option__") and callable(spec.__option__):
                spec = spec.__option__()
            if not isinstance(spec, OptionSpec):
                raise TypeError("schema items must be option specs or descriptor strings, not %s" % type(spec).__name__)
            self._register(spec)
            self._specs.append(spec)

    def _register(self, spec):
        for name in spec.names:
            self._claim(name, spec, False)
            if len(name) == 1:
                self._letters[name] = spec
            if spec.negatable:
                self._claim("no-" + name, spec, True)
                self._claim("no" + name, spec, True)

    def _claim(self, name, spec, negated):
        key = self.fold(name)
        if (owner := self._words.get(key)) is not None:
            if owner.spec is spec:
                raise SchemaError(
                    "option %r declares %r twice under the current matching rules" % (spec.primary, name),
                    names=(name,),
                )
            raise SchemaError(
                "option name %r of %r conflicts with %r of %r" % (name, spec.primary, owner.name, owner.spec.primary),
                names=(owner.name, name),
            )
        self._words[key] = Hit(spec, negated, name)

    @property
    def config(self):
        return self._config

    @property
    def specs(self):
        return tuple(self._specs)

    def fold(self, name, /):
        """
        return the lookup key for a name under the configured case policy.

        with bundling on, single-character names are always exact so that
        "-v" and "-V" can be distinct letters.
        """
        if not self._config.case_insensitive:
            return name
        if self._config.bundling and len(name) == 1:
            return name
        return name.casefold()

    def resolve(self, word, /):
        """
        return the distinct hits for an option word (without dashes or value).

        - exact match (after folding) wins outright.
        - otherwise names equal to the word ignoring case (when case_insensitive),
          and, with auto_abbreviate, every name the word is a prefix of.
          Letters keep their exact keys; only this word lookup folds them.
        - several names of the same option (and negation) count as one hit.
        """
        if (hit := self._words.get(self.fold(word))) is not None:
            return [hit]
        if not word:
            return []

        loose = str.casefold if self._config.case_insensitive else str
        needle = loose(word)
        hits = []
        for name, hit in self._words.items():
            name = loose(name)
            if name == needle or self._config.auto_abbreviate and name.startswith(needle):
                if hit not in hits:
                    hits.append(hit)
        return hits

    def letter(self, char, /):
        """
        return the spec owning a single-character name, or None.
        """
        return self._letters.get(char)

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __getitem__(self, primary):
        for spec in self._specs:
            if spec.primary == primary:
                return spec
        raise KeyError(primary)

    def __repr__(self):
        return "schema(%s)" % ", ".join(repr(spec.primary) for spec in self._specs)


__all__ = (
    "Schema",
)
