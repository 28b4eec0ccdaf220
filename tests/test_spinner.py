import io
import re
import time

from mcphost.spinner import DOT, POINTS, Spinner, SpinnerFrames

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(text):
    return _ANSI.sub("", text)


def test_spinner_draws_message_and_stops():
    buf = io.StringIO()
    spinner = Spinner("Thinking...", stream=buf)
    spinner.start()
    time.sleep(0.05)
    assert spinner.running
    spinner.stop()
    assert not spinner.running
    out = plain(buf.getvalue())
    assert "Thinking..." in out
    assert POINTS.frames[0] in out


def test_spinner_custom_frames_cycle():
    buf = io.StringIO()
    with Spinner("work", frames=SpinnerFrames(("A", "B"), 0.005), stream=buf) as spinner:
        time.sleep(0.08)
        assert spinner.running
    out = plain(buf.getvalue())
    assert "A work" in out
    assert "B work" in out
    assert not spinner.running


def test_stop_clears_line_at_end():
    buf = io.StringIO()
    spinner = Spinner("msg", stream=buf)
    spinner.start()
    spinner.stop()
    assert buf.getvalue().endswith("\r\x1b[K")


def test_stop_without_start_writes_nothing():
    buf = io.StringIO()
    spinner = Spinner("idle", stream=buf)
    spinner.stop()
    spinner.stop()
    assert buf.getvalue() == ""
    assert not spinner.running


def test_themed_spinner_uses_dot_frames():
    buf = io.StringIO()
    from mcphost.theme import get_theme

    spinner = Spinner.themed("loading", get_theme().tool, stream=buf)
    spinner.start()
    time.sleep(0.02)
    spinner.stop()
    assert DOT.frames[0].strip() in plain(buf.getvalue())


def test_start_twice_runs_one_animation():
    buf = io.StringIO()
    spinner = Spinner("once", frames=SpinnerFrames(("X",), 0.01), stream=buf)
    spinner.start()
    first = spinner._thread
    spinner.start()
    assert spinner._thread is first
    spinner.stop()
    assert not spinner.running