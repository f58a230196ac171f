"""
Argosy parser configuration.

ParserConfig is an immutable value describing the matching policy of one
parser. Fields are read-only properties; derive variants with configure()
(directive strings such as "bundling" or "no_ignore_case") or copy.replace() (keyword overrides).

Fields (defaults)
- case_insensitive (True): option words match regardless of case. With
  bundling on, single-character names still match exactly.
- auto_abbreviate (True): unambiguous prefixes of option words are accepted.
- bundling (False): "-abc" is read as "-a -b -c"; a value-taking letter absorbs
  the rest of the token.
- bundling_override (False): with bundling, a single-dash token that matches an
  option word is read as that word instead of a letter bundle. Implies bundling.
- require_order (False): recognition stops at the first operand.
- allow_single_dash_words (False): with bundling, a single-dash token whose
  first letter is not a declared letter is read as an option word.
- pass_through (False): unknown or ambiguous options are kept as operands.

Example
    >>> config = ParserConfig().configure("bundling", "no_ignore_case")
    >>> config.bundling, config.case_insensitive
    (True, False)
"""
from .options import SpecType

_DIRECTIVES = {
    "bundling": {"bundling": True},
    "no_bundling": {"bundling": False, "bundling_override": False},
    "bundling_override": {"bundling": True, "bundling_override": True},
    "no_bundling_override": {"bundling_override": False},
    "ignore_case": {"case_insensitive": True},
    "no_ignore_case": {"case_insensitive": False},
    "auto_abbrev": {"auto_abbreviate": True},
    "no_auto_abbrev": {"auto_abbreviate": False},
    "require_order": {"require_order": True},
    "permute": {"require_order": False},
    "pass_through": {"pass_through": True},
    "no_pass_through": {"pass_through": False},
    "single_dash_words": {"allow_single_dash_words": True},
    "no_single_dash_words": {"allow_single_dash_words": False},
}


class ParserConfig(metaclass=SpecType):
    """
    Immutable matching policy for a parser (see module docstring for fields).
    """

    __introspectable__ = (
        "case_insensitive",
        "auto_abbreviate",
        "bundling",
        "bundling_override",
        "require_order",
        "allow_single_dash_words",
        "pass_through",
    )

    __slots__ = tuple("_" + name for name in __introspectable__)

    def __new__(
            cls,
            *,
            case_insensitive=True,
            auto_abbreviate=True,
            bundling=False,
            bundling_override=False,
            require_order=False,
            allow_single_dash_words=False,
            pass_through=False
    ):
        self = super().__new__(cls)
        fields = {
            "case_insensitive": bool(case_insensitive),
            "auto_abbreviate": bool(auto_abbreviate),
            "bundling": bool(bundling) or bool(bundling_override),
            "bundling_override": bool(bundling_override),
            "require_order": bool(require_order),
            "allow_single_dash_words": bool(allow_single_dash_words),
            "pass_through": bool(pass_through),
        }
        for name, value in fields.items():
            object.__setattr__(self, "_" + name, value)
        return self

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} is read-only")

    def __eq__(self, other):
        if not isinstance(other, ParserConfig):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash(tuple(self.__rich_repr__()))

    def __replace__(self, **overrides):
        return type(self)(**dict(self.__rich_repr__()) | overrides)

    def configure(self, *directives):
        """
        return a new config with the directives applied in order.

        directives
        - bundling / no_bundling, bundling_override / no_bundling_override
        - ignore_case / no_ignore_case
        - auto_abbrev / no_auto_abbrev
        - require_order / permute
        - pass_through / no_pass_through
        - single_dash_words / no_single_dash_words

        names are case-insensitive and may use '-' instead of '_'.

        raises
        - TypeError for non-string directives.
        - ValueError for unknown directives.
        """
        fields = dict(self.__rich_repr__())
        for directive in directives:
            if not isinstance(directive, str):
                raise TypeError("configure() directives must be strings")
            try:
                fields |= _DIRECTIVES[directive.strip().lower().replace("-", "_")]
            except KeyError:
                raise ValueError("unknown configuration directive %r" % directive) from None
        return type(self)(**fields)


__all__ = (
    "ParserConfig",
)
