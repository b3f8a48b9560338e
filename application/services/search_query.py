# application/services/search_query.py
from __future__ import annotations
from datetime import date, datetime, timezone

# IMAP dates use English month names whatever the process locale is (RFC 3501 date-text)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def first_of_month(today: date) -> date:
    return today.replace(day=1)


def imap_date(d: date) -> str:
    # "01-Oct-2026"
    return f"{d.day:02d}-{_MONTHS[d.month - 1]}-{d.year:04d}"


def build_search_query(sender: str, subject: str, today: date) -> str:
    """FROM <sender> SUBJECT "<subject>" SINCE <first day of today's month>"""
    since = imap_date(first_of_month(today))
    return f'FROM {sender} SUBJECT "{subject}" SINCE {since}'
