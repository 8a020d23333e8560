"""Symbol tables: names bound to shared storage handles.

A `Glob` bundles every slot that can live under one name (code, scalar,
array, hash). Packages map names to globs; two names are aliases when they
map to the same glob object, so writes through either name land in the same
storage.
"""
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import UndefinedSubroutineError, UnresolvableNameError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Glob:
    package: str
    name: str
    code: Optional[Callable] = None
    scalar: Any = None
    array: List[Any] = field(default_factory=list)
    hash: Dict[Any, Any] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}"


class Package:
    def __init__(self, name: str):
        self.name = name
        self._globs: Dict[str, Glob] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._globs

    def __repr__(self) -> str:
        return f"Package({self.name!r})"

    def names(self) -> List[str]:
        return sorted(self._globs)

    def glob(self, name: str) -> Glob:
        if name not in self._globs:
            self._globs[name] = Glob(self.name, name)
        return self._globs[name]

    def lookup(self, name: str) -> Glob:
        if name not in self._globs:
            raise KeyError(f"No symbol '{name}' in package '{self.name}'")
        return self._globs[name]

    def define(self, name: str, fn: Callable) -> Glob:
        g = self.glob(name)
        g.code = fn
        return g

    def bind(self, name: str, glob: Glob) -> Glob:
        """Point `name` at `glob`.

        Whatever glob the name pointed at before is dropped from this package,
        slots and all.
        """
        prev = self._globs.get(name)
        if prev is not None and prev is not glob:
            logger.debug("%s.%s now refers to %s", self.name, name, glob.qualified_name)
        self._globs[name] = glob
        return glob

    def alias(self, existing: str, *names: str) -> Glob:
        g = self.glob(existing)
        for n in names:
            self.bind(n, g)
        return g

    def code(self, name: str) -> Callable:
        g = self._globs.get(name)
        if g is None or g.code is None:
            raise UndefinedSubroutineError(f"{self.name}.{name}")
        return g.code

    def call(self, name: str, *args, **kwargs):
        return self.code(name)(*args, **kwargs)

    def scalar(self, name: str):
        return self.lookup(name).scalar

    def set_scalar(self, name: str, value) -> Glob:
        g = self.glob(name)
        g.scalar = value
        return g

    def array(self, name: str) -> List[Any]:
        return self.glob(name).array

    def hash(self, name: str) -> Dict[Any, Any]:
        return self.glob(name).hash


def normalize_name(name: str) -> str:
    # Foo::Bar::baz and Foo.Bar.baz name the same symbol
    return name.replace("::", ".")


def is_qualified(name: str) -> bool:
    return "." in normalize_name(name)


def split_name(qualified: str, default_package: str = "main"):
    pkg, sep, name = normalize_name(qualified).rpartition(".")
    if not sep:
        return default_package, qualified
    return pkg, name


class SymbolTable:
    def __init__(self, default_package: str = "main"):
        self.default_package = default_package
        self._packages: Dict[str, Package] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._packages

    def packages(self) -> List[str]:
        return sorted(self._packages)

    def package(self, name: Optional[str] = None) -> Package:
        name = normalize_name(name or self.default_package)
        if name not in self._packages:
            self._packages[name] = Package(name)
        return self._packages[name]

    def glob(self, qualified: str) -> Glob:
        pkg, name = split_name(qualified, self.default_package)
        return self.package(pkg).glob(name)

    def bind(self, qualified: str, glob: Glob) -> Glob:
        pkg, name = split_name(qualified, self.default_package)
        return self.package(pkg).bind(name, glob)

    def lookup(self, qualified: str) -> Glob:
        pkg, name = split_name(qualified, self.default_package)
        if pkg not in self._packages:
            raise KeyError(f"No package '{pkg}'")
        return self._packages[pkg].lookup(name)

    def resolve(self, qualified: str) -> Callable:
        """Find the function bound to a fully-qualified name.

        Packages in this table win; otherwise the dotted prefix is imported as
        a Python module and the last component looked up on it.
        """
        pkg, name = split_name(qualified, self.default_package)
        if pkg in self._packages and name in self._packages[pkg]:
            fn = self._packages[pkg].lookup(name).code
            if fn is not None:
                return fn
        try:
            module = importlib.import_module(pkg)
        except ImportError:
            raise UnresolvableNameError(qualified) from None
        fn = getattr(module, name, None)
        if not callable(fn):
            raise UnresolvableNameError(qualified)
        return fn

    def clear(self):
        self._packages.clear()


class CodeRef:
    """Callable that dispatches to whatever the glob's code slot holds when called."""

    def __init__(self, glob: Glob):
        self.glob = glob

    def __call__(self, *args, **kwargs):
        fn = self.glob.code
        if fn is None:
            raise UndefinedSubroutineError(self.glob.qualified_name)
        return fn(*args, **kwargs)

    def __repr__(self) -> str:
        return f"CodeRef({self.glob.qualified_name})"
