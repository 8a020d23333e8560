from typing import Any, Iterable, List, NamedTuple, Tuple, Union

from lark import Lark, Transformer, v_args

GRAMMAR = r"""
?start: annotations
annotations: (":"? annotation)*
annotation: SYMBOL                 -> bare_annotation
          | SYMBOL "(" ")"         -> bare_annotation
          | SYMBOL "(" args ")"    -> annotation
args: arg (("," | "=>") arg)* ","?
?arg: SYMBOL   -> bareword
    | STRING   -> string
    | NUMBER   -> number
SYMBOL: /[A-Za-z_][A-Za-z0-9_]*(?:(?:::|\.)[A-Za-z_][A-Za-z0-9_]*)*/
STRING: /'[^']*'|"[^"]*"/
NUMBER: /-?\d+/
%ignore /\s+/
"""

parser = Lark(GRAMMAR, start="start", parser="lalr")


class Annotation(NamedTuple):
    name: str
    args: Tuple[Any, ...] = ()

    @classmethod
    def of(cls, name: str, data=None) -> "Annotation":
        """Normalize raw attribute data: nothing, one value or a list of values."""
        if data is None:
            return cls(name)
        if isinstance(data, (list, tuple)):
            return cls(name, tuple(data))
        return cls(name, (data,))

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(map(str, self.args))})"


@v_args(inline=True)
class AnnotationBuilder(Transformer):
    def annotations(self, *items): return list(items)
    def bare_annotation(self, name): return Annotation(str(name))
    def annotation(self, name, args): return Annotation(str(name), tuple(args))
    def args(self, *xs): return list(xs)
    def bareword(self, tok): return str(tok)
    def string(self, tok): return str(tok)[1:-1]
    def number(self, tok): return int(tok)


def parse_annotations(src: str) -> List[Annotation]:
    tree = parser.parse(src)
    return AnnotationBuilder().transform(tree)


def coerce_annotations(items: Iterable[Union[str, Annotation]]) -> List[Annotation]:
    out = []
    for item in items:
        if isinstance(item, Annotation):
            out.append(item)
        elif isinstance(item, str):
            out.extend(parse_annotations(item))
        else:
            raise TypeError(f"Expected an annotation or annotation text, got {type(item).__name__}")
    return out
