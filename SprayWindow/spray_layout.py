"""Layout logic for the spray window badge - pure functions for testability."""
from typing import Any, List, Tuple
from spray_data import (
    SprayRecommendation,
    parse_time,
    STATE_GOOD,
    STATE_CAUTION,
    STATE_DONT,
    REASON_GOOD,
    REASON_CAUTION,
    REASON_RAIN,
    REASON_WIND,
)

STATE_COLORS = {
    STATE_GOOD: (76, 175, 80),      # green
    STATE_CAUTION: (255, 152, 0),   # orange
    STATE_DONT: (244, 67, 54),      # red
}

STATE_LABELS = {
    STATE_GOOD: "Good",
    STATE_CAUTION: "Caution",
    STATE_DONT: "Don't spray",
}

REASON_TEXT = {
    REASON_GOOD: "Weather looks suitable",
    REASON_CAUTION: "Use caution",
    REASON_RAIN: "Because of expected rain",
    REASON_WIND: "Because of strong wind",
}

NO_WINDOW_TEXT = "No good window"


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs


def get_state_color(state: str) -> Tuple[int, int, int]:
    """
    Get RGB badge color for a spray state.

    Unknown states get the "don't spray" color.
    """
    return STATE_COLORS.get(state, STATE_COLORS[STATE_DONT])


def get_state_label(state: str) -> str:
    return STATE_LABELS.get(state, STATE_LABELS[STATE_DONT])


def get_reason_text(reason: str) -> str:
    return REASON_TEXT.get(reason, reason)


def _format_time(value: Any) -> str:
    parsed = parse_time(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%H:%M")


def format_window(rec: SprayRecommendation) -> str:
    """
    Format the next good window for display.

    Args:
        rec: Spray recommendation

    Returns:
        "HH:MM-HH:MM" for ISO bounds, raw labels otherwise, or
        NO_WINDOW_TEXT when there is no window
    """
    if not rec.has_window:
        return NO_WINDOW_TEXT
    start = _format_time(rec.next_good_start)
    end = _format_time(rec.next_good_end)
    if start == end:
        return start
    return f"{start}-{end}"


def format_summary(rec: SprayRecommendation) -> str:
    """One-line text summary of a recommendation."""
    return (
        f"{get_state_label(rec.state)}: {get_reason_text(rec.reason)} "
        f"(max rain {rec.max_rain:g}%, max wind {rec.max_wind:g} km/h) "
        f"| next window: {format_window(rec)}"
    )


def calculate_layout(rec: SprayRecommendation, width: int = 128, height: int = 48) -> List[DrawOp]:
    """
    Calculate layout operations for the spray badge.

    This is a pure function that returns drawing operations,
    making it easy to test without actual rendering.

    Args:
        rec: Recommendation to display
        width: Canvas width
        height: Canvas height

    Returns:
        List of DrawOp objects representing what to draw
    """
    r, g, b = get_state_color(rec.state)
    ops = [DrawOp("fill", r=r, g=g, b=b)]

    # Rough estimate: ~6 pixels per character
    lines = [
        get_state_label(rec.state),
        get_reason_text(rec.reason),
        format_window(rec),
    ]
    line_height = max(height // len(lines), 1)
    for i, text in enumerate(lines):
        x = max(0, (width - len(text) * 6) // 2)
        ops.append(DrawOp(
            "text",
            text=text,
            x=x,
            y=i * line_height,
            r=255,
            g=255,
            b=255
        ))

    return ops
