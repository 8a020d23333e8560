"""Memoization of named functions on top of functools.lru_cache.

Calls are keyed by their arguments, or by what NORMALIZER returns for them.
Keys that cannot be hashed fall back to their repr.

Options follow the attribute syntax: ``NORMALIZER => 'pkg.func'``,
``INSTALL => 'other_name'``, ``MAXSIZE => 128``. Lower-case keyword names work
too when calling from Python.
"""
import functools
import logging
from typing import Callable, Dict, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UndefinedSubroutineError
from .symbols import Glob, SymbolTable, is_qualified

logger = logging.getLogger(__name__)


class MemoizeOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    normalizer: Optional[Union[str, Callable]] = Field(None, alias="NORMALIZER")
    install: Optional[str] = Field(None, alias="INSTALL")
    maxsize: Optional[int] = Field(None, alias="MAXSIZE", ge=0)

    @classmethod
    def from_args(cls, args=(), **kwargs) -> "MemoizeOptions":
        if len(args) % 2:
            raise ValueError(f"Odd number of memoize options: {list(args)!r}")
        it = iter(args)
        values = {str(k): v for k, v in zip(it, it)}
        values.update(kwargs)
        return cls.model_validate(values)


class _Call:
    """One call's arguments, compared and hashed by its normalized key."""
    __slots__ = ("key", "args", "kwargs")

    def __init__(self, key, args, kwargs):
        self.key, self.args, self.kwargs = key, args, kwargs

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        return isinstance(other, _Call) and self.key == other.key


class _Memo(NamedTuple):
    glob: Glob
    original: Callable
    wrapper: Callable


class Memoizer:
    def __init__(self, symbols: SymbolTable, default_maxsize: Optional[int] = None):
        self.symbols = symbols
        self.default_maxsize = default_maxsize
        self._memos: Dict[str, _Memo] = {}

    def memoize(self, name: str, *options, **kwargs) -> Callable:
        """Wrap the function bound to fully-qualified `name` in a cache.

        Returns the wrapper, which is also installed in the symbol table under
        `name` (or under INSTALL when given).
        """
        opts = MemoizeOptions.from_args(options, **kwargs)
        glob = self.symbols.lookup(name)
        fn = glob.code
        if fn is None:
            raise UndefinedSubroutineError(glob.qualified_name)
        maxsize = opts.maxsize if "maxsize" in opts.model_fields_set else self.default_maxsize

        normalizer = opts.normalizer or default_key
        if isinstance(normalizer, str):
            normalizer = self.symbols.resolve(normalizer)
        wrapper = _keyed_cache(fn, normalizer, maxsize)

        if opts.install is None:
            target = glob
        elif is_qualified(opts.install):
            target = self.symbols.glob(opts.install)
        else:
            target = self.symbols.package(glob.package).glob(opts.install)
        target.code = wrapper
        self._memos[target.qualified_name] = _Memo(target, fn, wrapper)
        logger.debug("memoized %s as %s (maxsize=%s)", glob.qualified_name, target.qualified_name, maxsize)
        return wrapper

    def _memo(self, name: str) -> _Memo:
        glob = self.symbols.lookup(name)
        memo = self._memos.get(glob.qualified_name)
        if memo is None:
            raise KeyError(f"'{name}' is not memoized")
        return memo

    def flush_cache(self, name: str):
        self._memo(name).wrapper.cache_clear()

    def unmemoize(self, name: str) -> Callable:
        memo = self._memo(name)
        if memo.glob.code is not memo.wrapper:
            raise KeyError(f"'{name}' was redefined after memoizing")
        memo.glob.code = memo.original
        del self._memos[memo.glob.qualified_name]
        return memo.original


def _hashable(key):
    try:
        hash(key)
    except TypeError:
        return repr(key)
    return key


def default_key(*args, **kwargs):
    """Key a call by its positional and keyword arguments."""
    return (args, tuple(sorted(kwargs.items())))


def _keyed_cache(fn: Callable, normalizer: Callable, maxsize: Optional[int]) -> Callable:
    @functools.lru_cache(maxsize=maxsize)
    def cached(call):
        return fn(*call.args, **call.kwargs)

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return cached(_Call(_hashable(normalizer(*args, **kwargs)), args, kwargs))

    wrapper.cache_info = cached.cache_info
    wrapper.cache_clear = cached.cache_clear
    return wrapper
