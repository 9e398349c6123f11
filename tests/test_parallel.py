from gaze_lines.domain.dataset import Recording
from gaze_lines.parallel import process_recordings


def _recordings(session_builder):
    return [
        Recording(id="three", samples=session_builder(n_lines=3)),
        Recording(id="two", samples=session_builder(n_lines=2)),
    ]


def test_sequential(session_builder):
    results = process_recordings(_recordings(session_builder), n_jobs=1)
    assert [r.recording.id for r in results] == ["three", "two"]
    assert [r.lines.line_count for r in results] == [3, 2]


def test_threading_backend(session_builder):
    results = process_recordings(_recordings(session_builder), n_jobs=2, backend="threading")
    assert [r.recording.id for r in results] == ["three", "two"]
    assert [r.lines.line_count for r in results] == [3, 2]


def test_empty_input():
    assert process_recordings([]) == []
