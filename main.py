import sys

from rich.pretty import pprint

from argosy import *

__prog__ = "argosy-demo"


def trace(name, value):
    print("option %s -> %r" % (name, value), file=sys.stderr)


parser = Parser(
    [
        option("all|a"),
        option("verbose|v+"),
        option("width|w=i"),
        option("lines|L=i"),
        option("exclude|x=s@"),
        option("define|D=s%"),
        option("color!"),
        option("trace|t", callback=trace),
    ],
    ParserConfig().configure("bundling"),
)


if __name__ == '__main__':
    result = parser.parse()
    pprint(result)
    sys.exit(result.report())
