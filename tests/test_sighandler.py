import signal
import sys
import warnings

import pytest
from attrutil.config import Settings
from attrutil.context import Context
from attrutil.errors import HooksInUseError

needs_usr = pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="SIGUSR1/SIGUSR2 not available")

@needs_usr
def test_one_handler_for_two_signals(ctx):
    seen = []

    @ctx.sub("SigHandler(USR1, SIGUSR2)")
    def on_usr(name):
        seen.append(name)

    ctx.signals.trigger("USR1")
    ctx.signals.trigger("SIGUSR2")
    assert seen == ["USR1", "USR2"]
    assert ctx.signals.registered() == ["USR1", "USR2"]

@needs_usr
def test_real_signal_delivery(ctx):
    seen = []

    @ctx.sub("SigHandler(USR1)")
    def on_usr1(name):
        seen.append(name)

    signal.raise_signal(signal.SIGUSR1)
    assert seen == ["USR1"]

def test_last_registration_wins(ctx):
    seen = []

    @ctx.sub("SigHandler(__WARN__)")
    def first_warn(msg):
        seen.append(("first", msg))

    @ctx.sub("SigHandler(__WARN__)")
    def second_warn(msg):
        seen.append(("second", msg))

    ctx.signals.trigger("__WARN__", "careful")
    assert seen == [("second", "careful")]

def test_warn_hook_receives_formatted_warning(ctx):
    seen = []

    @ctx.sub("SigHandler(__WARN__)")
    def mywarn(msg):
        seen.append(msg)

    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.warn("disk almost full")
    assert len(seen) == 1
    assert "UserWarning: disk almost full" in seen[0]

def test_die_hook_runs_before_excepthook(ctx, capsys):
    seen = []

    @ctx.sub("SigHandler(__DIE__)")
    def mydie(exc):
        seen.append(exc)

    err = ValueError("boom")
    sys.excepthook(ValueError, err, None)
    assert seen == [err]
    assert "boom" in capsys.readouterr().err

def test_handler_is_late_bound(ctx):
    seen = []

    @ctx.sub("SigHandler(__WARN__)")
    def mywarn(msg):
        seen.append("old")

    ctx.package().define("mywarn", lambda msg: seen.append("new"))
    ctx.signals.trigger("__WARN__", "x")
    assert seen == ["new"]

@needs_usr
def test_close_restores_previous_handlers():
    before_usr = signal.getsignal(signal.SIGUSR2)
    before_warn = warnings.showwarning
    before_hook = sys.excepthook

    with Context() as ctx:
        @ctx.sub("SigHandler(USR2, __WARN__, __DIE__)")
        def h(*args):
            pass
        assert signal.getsignal(signal.SIGUSR2) is not before_usr
        assert warnings.showwarning is not before_warn
        assert sys.excepthook is not before_hook

    assert signal.getsignal(signal.SIGUSR2) == before_usr
    assert warnings.showwarning is before_warn
    assert sys.excepthook is before_hook
    assert ctx.signals.registered() == []

@needs_usr
def test_unopened_context_does_not_touch_process_hooks():
    before = signal.getsignal(signal.SIGUSR1)
    ctx = Context()

    @ctx.sub("SigHandler(USR1)")
    def h(name):
        return name

    assert signal.getsignal(signal.SIGUSR1) == before
    assert ctx.signals.trigger("USR1") == "USR1"
    ctx.close()

@needs_usr
def test_hooks_disabled_by_settings():
    before = signal.getsignal(signal.SIGUSR1)
    with Context(Settings(install_signal_hooks=False)) as ctx:
        @ctx.sub("SigHandler(USR1)")
        def h(name):
            return name
        assert signal.getsignal(signal.SIGUSR1) == before
        assert ctx.signals.lookup("SIGUSR1") is not None

def test_register_returns_previous_handler(ctx):
    first, second = (lambda m: 1), (lambda m: 2)
    assert ctx.signals.register("__WARN__", first) is None
    assert ctx.signals.register("__WARN__", second) is first
    assert ctx.signals.lookup("__WARN__") is second

def test_unknown_signal_name(ctx):
    with pytest.raises(KeyError):
        @ctx.sub("SigHandler(NOT_A_SIGNAL)")
        def h(name):
            pass
    assert ctx.signals.lookup("NOT_A_SIGNAL") is None
    with pytest.raises(KeyError):
        ctx.signals.trigger("__DIE__")

@pytest.mark.skipif(not hasattr(signal, "SIGKILL"), reason="SIGKILL not available")
def test_refused_signal_leaves_table_unchanged(ctx):
    with pytest.raises(OSError):
        @ctx.sub("SigHandler(KILL)")
        def h(name):
            pass
    assert ctx.signals.lookup("KILL") is None
    assert ctx.signals.registered() == []

def test_second_hooked_context_is_refused(ctx):
    other = Context()
    with pytest.raises(HooksInUseError):
        other.open()
    assert not other.signals.is_open

    with Context(Settings(install_signal_hooks=False)) as quiet:
        assert quiet.signals.is_open

def test_hooks_free_after_close():
    with Context():
        pass
    with Context() as ctx:
        assert ctx.signals.is_open
