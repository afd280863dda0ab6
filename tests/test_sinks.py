import io
import threading

import pytest

from webweave.sinks import ConsoleSink, FileSink, LogSink


def test_console_sink_writes_line_to_stdout(capsys):
    ConsoleSink().submit("hello log")
    assert capsys.readouterr().out == "hello log\n"


def test_console_sink_custom_stream():
    stream = io.StringIO()
    sink = ConsoleSink(stream)
    sink.submit("one")
    sink.submit("two")
    assert stream.getvalue().splitlines() == ["one", "two"]


def test_file_sink_appends(tmp_path):
    path = tmp_path / "access.log"
    with FileSink(path) as sink:
        sink.submit("first")
    with FileSink(path) as sink:
        sink.submit("second")
    assert path.read_text(encoding="utf-8").splitlines() == ["first", "second"]


def test_file_sink_flushes_each_line(tmp_path):
    path = tmp_path / "access.log"
    sink = FileSink(path)
    sink.submit("visible")
    assert path.read_text(encoding="utf-8") == "visible\n"
    sink.close()


def test_file_sink_open_failure(tmp_path):
    missing = tmp_path / "no_such_dir" / "log.txt"
    with pytest.raises(OSError, match="Failed to open log file"):
        FileSink(missing)


def test_file_sink_concurrent_submits(tmp_path):
    path = tmp_path / "access.log"
    sink = FileSink(path)

    def worker(n):
        for i in range(50):
            sink.submit(f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    sink.close()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 8 * 50
    assert set(lines) == {f"{n}-{i}" for n in range(8) for i in range(50)}


def test_log_sink_is_abstract():
    with pytest.raises(TypeError):
        LogSink()