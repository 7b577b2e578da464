"""E-mail report of a run.

The message carries a plain-text body and an HTML alternative with the
backup and copy result tables.
"""

from __future__ import annotations

import html
import logging
import smtplib
import socket
from email.message import EmailMessage
from typing import TYPE_CHECKING, Sequence

from ..config import EmailConfig
from . import BACKUP_HEADERS, COPY_HEADERS, render_backup_rows, render_copy_rows

if TYPE_CHECKING:
    from ..core.context import RunContext

logger = logging.getLogger(__name__)


def _text_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(c)) for w, c in zip(widths, row)]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines += ["  ".join(c.ljust(w) for c, w in zip(row, widths)) for row in rows]
    return "\n".join(lines)


def _html_table(title: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in headers)
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(c)}</td>" for c in row) + "</tr>"
        for row in rows
    )
    return (
        f"<h3>{html.escape(title)}</h3>"
        f'<table border="1" cellpadding="4" cellspacing="0">'
        f"<tr>{head}</tr>{body}</table>"
    )


def render_report(context: RunContext, error: BaseException | None = None) -> tuple[str, str]:
    """Return (plain text, html) bodies for a finished run."""
    if error is None:
        status = f"Run '{context.name}' completed in {context.duration_text}."
    else:
        status = f"Run '{context.name}' FAILED after {context.duration_text}: {error}"

    text_parts = [status]
    html_parts = [f"<p>{html.escape(status)}</p>"]

    sections = (
        ("Backup", BACKUP_HEADERS, render_backup_rows(context.backup_table)),
        ("Copy", COPY_HEADERS, render_copy_rows(context.copy_table)),
    )
    for title, headers, rows in sections:
        if rows:
            text_parts.append(f"{title}:\n{_text_table(headers, rows)}")
            html_parts.append(_html_table(title, headers, rows))

    return "\n\n".join(text_parts) + "\n", "<html><body>" + "".join(html_parts) + "</body></html>"


class EmailNotifier:
    """Sends run reports over SMTP."""

    def __init__(self, settings: EmailConfig, name: str) -> None:
        self.settings = settings
        self.name = name

    def _subject(self, outcome: str) -> str:
        return f"duplicacy-wrapper: {self.name} {outcome} ({socket.gethostname()})"

    def build_message(self, subject: str, text: str, html_body: str | None = None) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.from_address
        msg["To"] = ", ".join(self.settings.to_addresses)
        msg.set_content(text)
        if html_body is not None:
            msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, msg: EmailMessage) -> None:
        s = self.settings
        logger.debug("Sending '%s' via %s:%d", msg["Subject"], s.smtp_host, s.smtp_port)
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=60) as smtp:
            if s.starttls:
                smtp.starttls()
            if s.username:
                smtp.login(s.username, s.password)
            smtp.send_message(msg)

    def notify_start(self) -> None:
        if not self.settings.send_on_start:
            return
        self.send(
            self.build_message(self._subject("started"), f"Run '{self.name}' started.\n")
        )

    def notify_success(self, context: RunContext) -> None:
        text, html_body = render_report(context)
        self.send(self.build_message(self._subject("succeeded"), text, html_body))

    def notify_failure(self, context: RunContext, error: BaseException) -> None:
        text, html_body = render_report(context, error)
        self.send(self.build_message(self._subject("FAILED"), text, html_body))
