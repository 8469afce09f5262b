"""Spray reminder planning - turns a recommendation's window into a reminder."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple

from spray_data import SprayRecommendation, parse_time
from spray_layout import format_window


@dataclass
class Reminder:
    """A reminder to spray at a given moment."""
    at: datetime
    message: str


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def plan_reminder(
    rec: SprayRecommendation,
    now: Optional[datetime] = None,
    lead_minutes: int = 0
) -> Optional[Reminder]:
    """
    Plan a reminder for the start of the next good spray window.

    Args:
        rec: Spray recommendation
        now: Current time (defaults to UTC now)
        lead_minutes: Fire this many minutes before the window opens

    Returns:
        Reminder, or None when there is no actionable window (no window,
        bounds that are not ISO-8601, or a window that already ended)
    """
    if not rec.has_window:
        return None

    start = parse_time(rec.next_good_start)
    if start is None:
        logging.debug(f"Window start is not a timestamp: {rec.next_good_start!r}")
        return None

    now = _as_utc(now or datetime.now(timezone.utc))
    start = _as_utc(start)

    end = parse_time(rec.next_good_end)
    if end is not None and _as_utc(end) < now:
        logging.debug("Good window already ended, no reminder")
        return None

    at = max(start - timedelta(minutes=lead_minutes), now)
    return Reminder(at=at, message=f"Spray window: {format_window(rec)}")



class ReminderScheduler:
    """
    Plans reminders and hands them to an injected notifier.

    The notifier is any callable taking a Reminder (push service, logger,
    test double). Each window is notified once: repeated refreshes that
    report the same window bounds do not notify again.
    """

    def __init__(self, notifier: Callable[[Reminder], None], lead_minutes: int = 0):
        self.notifier = notifier
        self.lead_minutes = lead_minutes
        self._scheduled_window: Optional[Tuple[Any, Any]] = None

    def schedule(self, rec: SprayRecommendation, now: Optional[datetime] = None) -> Optional[Reminder]:
        """
        Notify about the recommendation's window unless already done.

        Returns:
            The new Reminder, or None when nothing was sent
        """
        reminder = plan_reminder(rec, now=now, lead_minutes=self.lead_minutes)
        if reminder is None:
            logging.info("No good spray window in horizon, reminder not scheduled")
            self._scheduled_window = None
            return None

        window = (rec.next_good_start, rec.next_good_end)
        if window == self._scheduled_window:
            logging.debug(f"Reminder for window {window[0]}..{window[1]} already scheduled")
            return None

        logging.info(f"Scheduling spray reminder at {reminder.at.isoformat()}")
        self.notifier(reminder)
        self._scheduled_window = window
        return reminder
