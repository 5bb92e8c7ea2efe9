import io
import sys

from kindtool.iostreams import IOStreams, standard_iostreams


def test_standard_iostreams_uses_process_streams():
    streams = standard_iostreams()
    assert streams.stdin is sys.stdin
    assert streams.stdout is sys.stdout
    assert streams.stderr is sys.stderr


def test_standard_iostreams_follows_replaced_streams(monkeypatch):
    out = io.StringIO()
    err = io.StringIO()
    monkeypatch.setattr(sys, "stdout", out)
    monkeypatch.setattr(sys, "stderr", err)
    streams = standard_iostreams()
    assert streams.stdout is out
    assert streams.stderr is err


def test_custom_streams_carry_data():
    source = io.StringIO("payload")
    out = io.StringIO()
    err = io.StringIO()
    streams = IOStreams(stdin=source, stdout=out, stderr=err)
    streams.stdout.write(streams.stdin.read())
    assert out.getvalue() == "payload"
    assert err.getvalue() == ""


def test_streams_compare_by_members():
    assert standard_iostreams() == standard_iostreams()
    assert standard_iostreams() != IOStreams(io.StringIO(), io.StringIO(), io.StringIO())