import functools
import sys

from ..errors import AbstractMethodError
from ..registry import register

def _caller_location():
    frame = sys._getframe(2)
    while frame is not None and frame.f_globals.get("__name__", "").startswith("attrutil."):
        frame = frame.f_back
    if frame is None:
        return "<unknown>", 0
    return frame.f_code.co_filename, frame.f_lineno

def abstract_stub(name: str):
    def stub(*args, **kwargs):
        filename, lineno = _caller_location()
        raise AbstractMethodError(name, filename, lineno)
    stub.__name__ = stub.__qualname__ = name.rpartition(".")[2]
    return stub

def abstract(fn):
    """Decorator for methods that subclasses must override."""
    stub = abstract_stub(f"{fn.__module__}.{fn.__qualname__}")
    return functools.wraps(fn)(stub)

@register("Abstract", target="code", doc="Abstract: calling the function raises AbstractMethodError")
def abstract_attr(ctx, pkg, symbol, *_):
    symbol.code = abstract_stub(symbol.qualified_name)
