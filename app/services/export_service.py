# app/services/export_service.py
import os
from datetime import datetime
from typing import Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.clock import as_utc, utcnow
from app.core.config import settings
from app.models.application import Application

CSV_HEADER = ["Discord Username", "Department", "Status", "Priority", "Applied Date", "Email", "Age"]

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "print")


# Helper to get template
def get_template(template_name: str):
    env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), autoescape=select_autoescape(["html"]))
    return env.get_template(template_name)


def _row(app: Application) -> List[str]:
    return [
        app.discord_username,
        app.department,
        getattr(app.status, "value", app.status),
        getattr(app.priority, "value", app.priority),
        as_utc(app.created_at).strftime("%m/%d/%Y"),
        app.applicant_email or "",
        "" if app.applicant_age is None else str(app.applicant_age),
    ]


def to_csv(applications: Iterable[Application]) -> str:
    """
    Plain comma join, one line per application. Values are not quoted, so
    a comma inside a value shifts the columns of that row.
    """
    lines = [",".join(CSV_HEADER)]
    lines.extend(",".join(_row(app)) for app in applications)
    return "\n".join(lines)


def print_html(applications: Iterable[Application], now: Optional[datetime] = None) -> str:
    template = get_template("applications.html")
    return template.render(
        community=settings.COMMUNITY_NAME,
        generated_on=(now or utcnow()).strftime("%m/%d/%Y %H:%M UTC"),
        columns=CSV_HEADER,
        rows=[_row(app) for app in applications],
    )


def mailto_link(applications: Iterable[Application]) -> str:
    emails = [app.applicant_email for app in applications if app.applicant_email]
    return "mailto:" + ",".join(emails)
