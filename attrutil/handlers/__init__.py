from . import abstract, alias, memoize, sighandler  # noqa: F401
