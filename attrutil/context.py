"""The process context that owns every table the attributes write to.

A `Context` holds the symbol table, the signal-dispatch table, the memoizer
and the attribute handlers it knows about. Open it before relying on OS signal
delivery and close it to restore the process hooks::

    with Context() as ctx:
        @ctx.sub("Memoize")
        def fib(n):
            return n if n < 2 else fib(n - 1) + fib(n - 2)
"""
import logging
from typing import Callable, Optional, Union

from . import handlers  # noqa: F401  registers the built-in attributes
from .config import Settings
from .errors import InvalidAttributeError
from .memo import Memoizer
from .parser import Annotation, coerce_annotations
from .registry import REGISTRY, get_attr, list_attributes, register
from .signals import SignalTable
from .symbols import Glob, Package, SymbolTable, split_name

logger = logging.getLogger(__name__)

AnnotationLike = Union[str, Annotation]
VAR_SLOTS = ("scalar", "array", "hash")


class Context:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.symbols = SymbolTable(self.settings.default_package)
        self.signals = SignalTable(install_hooks=self.settings.install_signal_hooks)
        self.memo = Memoizer(self.symbols, self.settings.memoize_maxsize)
        self.attributes = dict(REGISTRY)

    def open(self) -> "Context":
        self.signals.open()
        logger.debug("context opened")
        return self

    def close(self):
        self.signals.close()
        self.symbols.clear()
        logger.debug("context closed")

    def __enter__(self) -> "Context":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def attribute(self, name: str, target: str = "code", doc: str = ""):
        """Register a custom attribute visible to this context only.

        The handler is called as ``impl(ctx, package, glob, *data)``.
        """
        return register(name, target, doc, table=self.attributes)

    def list_attributes(self):
        return list_attributes(self.attributes)

    def package(self, name: Optional[str] = None) -> Package:
        return self.symbols.package(name)

    def sub(self, *annotations: AnnotationLike, package: Optional[str] = None,
            name: Optional[str] = None) -> Callable:
        """Decorator: define a function in `package` and apply `annotations` in order.

        Returns whatever sits in the code slot afterwards, so a memoized
        function's own name refers to the cached wrapper.
        """
        anns = coerce_annotations(annotations)

        def deco(fn):
            pkg = self.package(package)
            glob = pkg.define(name or fn.__name__, fn)
            for ann in anns:
                self._apply(pkg, glob, ann, "code")
            return glob.code
        return deco

    def var(self, name: str, value=None, *annotations: AnnotationLike,
            package: Optional[str] = None, slot: str = "scalar") -> Glob:
        if slot not in VAR_SLOTS:
            raise ValueError(f"slot must be one of {VAR_SLOTS}, got {slot!r}")
        pkg = self.package(package)
        glob = pkg.glob(name)
        if value is not None or slot == "scalar":
            setattr(glob, slot, value)
        for ann in coerce_annotations(annotations):
            self._apply(pkg, glob, ann, slot)
        return glob

    def apply(self, package: Optional[str], name: str, annotation: AnnotationLike) -> Glob:
        pkg = self.package(package)
        glob = pkg.lookup(name)
        slot = "code" if glob.code is not None else "scalar"
        for ann in coerce_annotations([annotation]):
            self._apply(pkg, glob, ann, slot)
        return glob

    def call(self, qualified: str, *args, **kwargs):
        pkg, name = split_name(qualified, self.symbols.default_package)
        return self.package(pkg).call(name, *args, **kwargs)

    def _apply(self, pkg: Package, glob: Glob, ann: Annotation, slot: str):
        spec = get_attr(ann.name, self.attributes)
        if spec.target == "code" and slot != "code":
            raise InvalidAttributeError(slot, ann.name)
        logger.debug("applying %s to %s", ann, glob.qualified_name)
        spec.impl(self, pkg, glob, *ann.args)
