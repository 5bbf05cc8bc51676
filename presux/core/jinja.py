"""Jinja2 environment shared by the HTML routes, with the display filters registered."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from fastapi.templating import Jinja2Templates

from .config import settings


def _to_dt(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _fmt_date(value: Any, fmt: str = "%d/%m/%Y") -> str:
    dt = _to_dt(value)
    return dt.strftime(fmt) if dt else ""


def _fmt_currency(value: Any) -> str:
    """Euro amounts the Spanish way: ``1.234,50 €``."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return ""
    text = f"{number:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"


def get_templates() -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
    templates.env.filters["fmt_date"] = _fmt_date
    templates.env.filters["fmt_currency"] = _fmt_currency
    templates.env.globals["app_name"] = settings.APP_NAME
    return templates
