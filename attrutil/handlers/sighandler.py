from ..registry import register
from ..symbols import CodeRef

@register("SigHandler", target="code", doc="SigHandler(ALRM, __WARN__, ...): install as handler for each signal")
def sig_handler(ctx, pkg, symbol, *names):
    handler = CodeRef(symbol)
    for name in names:
        ctx.signals.register(name, handler)
