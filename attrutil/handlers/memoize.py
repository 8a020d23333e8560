from ..registry import register

@register("Memoize", target="code", doc="Memoize(OPTION => value, ...): cache results keyed by the arguments")
def memoize(ctx, pkg, symbol, *options):
    # options naming functions must be fully qualified, e.g. NORMALIZER => 'main.normalize_f'
    ctx.memo.memoize(symbol.qualified_name, *options)
