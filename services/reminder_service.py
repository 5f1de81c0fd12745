from dataclasses import dataclass
from datetime import date
from services.recurring_overview_service import RecurringOverviewService
from utils.constants import UPCOMING_REMINDER_DAYS
from utils.currency import format_currency


@dataclass
class Reminder:
    type: str       # 'upcoming_recurring' | 'overdue_recurring'
    severity: str   # 'info' | 'warning'
    title: str
    detail: str
    key: str = ""   # e.g. "expense:3" or "income:5"


class ReminderService:
    def __init__(self, overview_service: RecurringOverviewService):
        self._overview = overview_service

    def get_reminders(
        self,
        ref: date,
        upcoming_days: int = UPCOMING_REMINDER_DAYS,
        currency_symbol: str = "₹",
    ) -> list[Reminder]:
        reminders: list[Reminder] = []
        for item in self._overview.get_upcoming(ref, upcoming_days):
            verb = "received" if item.is_income else "paid"
            amount = format_currency(item.amount, currency_symbol)
            key = f"{item.kind}:{item.id}"
            if item.is_overdue:
                reminders.append(Reminder(
                    type="overdue_recurring",
                    severity="warning",
                    title=f"{item.title} is overdue",
                    detail=(
                        f"Was due on {item.next_date.strftime('%b %d')} · {amount} · "
                        f"{item.due_description} · not yet {verb}"
                    ),
                    key=key,
                ))
            else:
                reminders.append(Reminder(
                    type="upcoming_recurring",
                    severity="info",
                    title=f"{item.title} {item.due_description.lower()}",
                    detail=f"Due on {item.next_date.strftime('%b %d')} · {amount}",
                    key=key,
                ))
        order = {"error": 0, "warning": 1, "info": 2}
        return sorted(reminders, key=lambda r: order[r.severity])
