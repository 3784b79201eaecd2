from .errors import (
    SelectorError,
    SelectorSyntaxError,
    TypeMismatchError,
    UnsupportedFeatureError,
    XMLLoadError,
)
from .loader import parse_xml
from .matchset import MatchSet
from .node import Node, TextNode
from .parser import parse
from .selector import (
    AttributeOperator,
    AttributeTest,
    Combinator,
    CompiledSelector,
    SelectorBuilder,
    SelectorList,
    SimpleSelector,
)
from .serialize import to_xml
from .traverser import CombinatorMode, Traverser, TraverserOpts, matches, query

__all__ = [
    "AttributeOperator",
    "AttributeTest",
    "Combinator",
    "CombinatorMode",
    "CompiledSelector",
    "MatchSet",
    "Node",
    "SelectorBuilder",
    "SelectorError",
    "SelectorList",
    "SelectorSyntaxError",
    "SimpleSelector",
    "TextNode",
    "Traverser",
    "TraverserOpts",
    "TypeMismatchError",
    "UnsupportedFeatureError",
    "XMLLoadError",
    "matches",
    "parse",
    "parse_xml",
    "query",
    "to_xml",
]
