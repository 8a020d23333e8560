"""Signal-dispatch table.

One handler per signal name; `register` overwrites. OS signals get a
trampoline installed through `signal.signal` that looks the handler up at
delivery time. The pseudo-signals hook into the warnings machinery
(`__WARN__`) and `sys.excepthook` (`__DIE__`). Only one open table may own
those hooks at a time.
"""
import logging
import signal
import sys
import warnings
from typing import Callable, Dict, List, Optional

from .errors import HooksInUseError

logger = logging.getLogger(__name__)

WARN = "__WARN__"
DIE = "__DIE__"
PSEUDO_SIGNALS = (WARN, DIE)


def normalize_signal_name(name: str) -> str:
    name = str(name).strip()
    if name in PSEUDO_SIGNALS:
        return name
    name = name.upper()
    return name[3:] if name.startswith("SIG") else name


def signal_number(name: str) -> signal.Signals:
    # KeyError for names this platform does not know
    return signal.Signals["SIG" + normalize_signal_name(name)]


def canonical_signal_name(name: str) -> str:
    name = normalize_signal_name(name)
    if name in PSEUDO_SIGNALS:
        return name
    return signal_number(name).name[3:]


class SignalTable:
    # the one open table allowed to own the process hooks
    _hooked: Optional["SignalTable"] = None

    def __init__(self, install_hooks: bool = True):
        self.install_hooks = install_hooks
        self._handlers: Dict[str, Callable] = {}
        self._saved: Dict[str, object] = {}
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "SignalTable":
        active = SignalTable._hooked
        if self.install_hooks and active is not None and active is not self:
            raise HooksInUseError()
        if self.install_hooks:
            SignalTable._hooked = self
        self._open = True
        for name in self._handlers:
            self._install(name)
        return self

    def close(self):
        for name in list(self._saved):
            self._restore(name)
        self._handlers.clear()
        self._open = False
        if SignalTable._hooked is self:
            SignalTable._hooked = None

    def register(self, name: str, handler: Callable) -> Optional[Callable]:
        """Make `handler` the one handler for `name`; return the one it replaced."""
        name = canonical_signal_name(name)
        if self._open:
            self._install(name)
        previous = self._handlers.get(name)
        self._handlers[name] = handler
        if previous is not None:
            logger.debug("handler for %s overwritten", name)
        return previous

    def lookup(self, name: str) -> Optional[Callable]:
        return self._handlers.get(self._key(name))

    def registered(self) -> List[str]:
        return sorted(self._handlers)

    def trigger(self, name: str, *args):
        name = self._key(name)
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"No handler registered for '{name}'")
        if not args and name not in PSEUDO_SIGNALS:
            args = (name,)
        return handler(*args)

    @staticmethod
    def _key(name: str) -> str:
        try:
            return canonical_signal_name(name)
        except KeyError:
            return normalize_signal_name(name)

    # process hooks

    def _install(self, name: str):
        if not self.install_hooks or name in self._saved:
            return
        if name == WARN:
            self._saved[name] = warnings.showwarning
            warnings.showwarning = self._showwarning
        elif name == DIE:
            self._saved[name] = sys.excepthook
            sys.excepthook = self._excepthook
        else:
            signum = signal_number(name)
            self._saved[name] = signal.signal(signum, self._deliver)
        logger.debug("installed hook for %s", name)

    def _restore(self, name: str):
        saved = self._saved.pop(name)
        if name == WARN:
            warnings.showwarning = saved
        elif name == DIE:
            sys.excepthook = saved
        else:
            signal.signal(signal_number(name), saved if saved is not None else signal.SIG_DFL)
        logger.debug("restored hook for %s", name)

    def _deliver(self, signum, frame):
        name = signal.Signals(signum).name[3:]
        handler = self._handlers.get(name)
        if handler is not None:
            handler(name)

    def _showwarning(self, message, category, filename, lineno, file=None, line=None):
        handler = self._handlers.get(WARN)
        if handler is None:
            return self._saved[WARN](message, category, filename, lineno, file, line)
        handler(warnings.formatwarning(message, category, filename, lineno, line))

    def _excepthook(self, exc_type, exc, tb):
        handler = self._handlers.get(DIE)
        if handler is not None:
            handler(exc)
        self._saved[DIE](exc_type, exc, tb)
