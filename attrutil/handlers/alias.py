from ..registry import register
from ..symbols import is_qualified

@register("Alias", target="any", doc="Alias(name, ...): bind more names to the same glob")
def alias(ctx, pkg, symbol, *names):
    for name in map(str, names):
        if is_qualified(name):
            ctx.symbols.bind(name, symbol)
        else:
            pkg.bind(name, symbol)
