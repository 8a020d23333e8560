from typing import Callable, Dict, NamedTuple

class AttrSpec(NamedTuple):
    name: str
    impl: Callable
    target: str     # "code" | "any"
    doc: str

REGISTRY: Dict[str, AttrSpec] = {}

def register(name, target="code", doc="", table=None):
    if target not in ("code", "any"):
        raise ValueError(f"target must be 'code' or 'any', got {target!r}")
    table = REGISTRY if table is None else table
    def deco(fn):
        table[name] = AttrSpec(name, fn, target, doc)
        return fn
    return deco

def get_attr(name: str, table=None) -> AttrSpec:
    table = REGISTRY if table is None else table
    if name not in table:
        raise KeyError(f"Unknown attribute '{name}'")
    return table[name]

def list_attributes(table=None):
    table = REGISTRY if table is None else table
    return [{"name": k, "target": spec.target, "doc": spec.doc}
            for k, spec in sorted(table.items())]
