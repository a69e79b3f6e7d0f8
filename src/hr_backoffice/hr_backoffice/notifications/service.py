from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from ..common.datetime_utils import now_local
from ..core.constants import APPRAISAL_LOOKAHEAD_DAYS
from ..employees.repository import EmployeeRepository
from .notifier import Notification, Notifier

logger = logging.getLogger(__name__)


class AlertService:
    """Birthday and appraisal reminders built from the employee directory.

    Meant to be run by an external scheduler (see scripts/send_alerts.py).
    Each method returns the number of notifications handed to the notifier.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] = now_local,
        company_name: str = "HR Back-Office",
    ):
        self._employees = employees
        self._notifier = notifier
        self._clock = clock
        self._company_name = company_name

    def send_birthday_alerts(self) -> int:
        today = self._clock().date()
        employees = self._employees.list_birthdays(month=today.month, day=today.day)
        if not employees:
            return 0

        sent = 0
        hr_emails = self._employees.list_hr_emails()
        if hr_emails:
            names = ", ".join(e.full_name for e in employees)
            self._notifier.send(
                Notification(
                    to=hr_emails,
                    subject="Employee Birthday Reminder",
                    text=f"The following employee(s) have birthdays today: {names}",
                )
            )
            sent += 1

        for employee in employees:
            self._notifier.send(
                Notification(
                    to=[employee.email],
                    subject="Happy Birthday!",
                    text=(
                        f"Dear {employee.first_name},\n\n"
                        f"Happy Birthday from the entire team at {self._company_name}! "
                        "We wish you a wonderful day and a great year ahead.\n\n"
                        "Best regards,\nHR Team"
                    ),
                )
            )
            sent += 1

        logger.info("Sent %d birthday notification(s) for %s", sent, today.isoformat())
        return sent

    def send_appraisal_alerts(self) -> int:
        today = self._clock().date()
        until = today + timedelta(days=APPRAISAL_LOOKAHEAD_DAYS)
        employees = self._employees.list_appraisals_due(start=today, end=until)
        if not employees:
            return 0

        sent = 0
        hr_emails = self._employees.list_hr_emails()
        if hr_emails:
            lines = "\n".join(
                f"{e.full_name} - Due on {e.next_appraisal.strftime('%a %b %d %Y')}" for e in employees
            )
            self._notifier.send(
                Notification(
                    to=hr_emails,
                    subject="Upcoming Employee Appraisals",
                    text=f"The following employee(s) have appraisals due in the next {APPRAISAL_LOOKAHEAD_DAYS} days:\n\n{lines}",
                )
            )
            sent += 1

        for employee in employees:
            self._notifier.send(
                Notification(
                    to=[employee.email],
                    subject="Upcoming Performance Appraisal",
                    text=(
                        f"Dear {employee.first_name},\n\n"
                        "This is a reminder that your performance appraisal is scheduled for "
                        f"{employee.next_appraisal.strftime('%a %b %d %Y')}. Please prepare any necessary "
                        "documentation and self-assessment before the meeting.\n\n"
                        "Best regards,\nHR Team"
                    ),
                )
            )
            sent += 1

        logger.info("Sent %d appraisal notification(s) for %s..%s", sent, today.isoformat(), until.isoformat())
        return sent
