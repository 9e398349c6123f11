from typing import Callable, List, Optional

import pytest

from gaze_lines.domain.dataset import GazeSample, Recording


LINE_SAMPLES = 41
SAMPLE_INTERVAL_MS = 20.0
LINE_GAP_MS = 50.0


def build_reading_session(
    n_lines: int = 3,
    samples_per_line: int = LINE_SAMPLES,
    with_line_context: bool = True,
    context_value: Optional[int] = None,
) -> List[GazeSample]:
    """Synthetic paragraph: left-to-right ramps, one return sweep per line break.

    Each line moves from x=100 to x=900 in 20 px steps every 20 ms; the next
    line starts 50 ms after the previous one ended, back at x=100 and 50 px
    lower. The content line index switches to the next line a little past
    the middle of each line (the text reveals the next line early).
    """
    samples: List[GazeSample] = []
    line_duration = (samples_per_line - 1) * SAMPLE_INTERVAL_MS + LINE_GAP_MS
    for k in range(n_lines):
        for j in range(samples_per_line):
            if not with_line_context:
                line_index = None
            elif context_value is not None:
                line_index = context_value
            else:
                line_index = min(k + 1, n_lines - 1) if j >= 25 else k
            samples.append(
                GazeSample(
                    t=k * line_duration + j * SAMPLE_INTERVAL_MS,
                    x=100.0 + 20.0 * j,
                    y=200.0 + 50.0 * k,
                    line_index=line_index,
                )
            )
    return samples


@pytest.fixture
def session_builder() -> Callable[..., List[GazeSample]]:
    return build_reading_session


@pytest.fixture
def reading_session() -> List[GazeSample]:
    return build_reading_session()


@pytest.fixture
def reading_recording() -> Recording:
    return Recording(id="paragraph", samples=build_reading_session())
