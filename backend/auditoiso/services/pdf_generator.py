"""
PDF Generator Service - printable audit reports.

Uses Jinja2 to lay the audit out as HTML and WeasyPrint to convert it to PDF.
Sections always come in the same order: title, metadata, details, optional
notes, generation footer. Page breaks are left to WeasyPrint.
"""

import os
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from jinja2 import Environment, FileSystemLoader, select_autoescape
from weasyprint import CSS, HTML

from auditoiso.config import settings
from auditoiso.logger import logger
from auditoiso.schemas.audit import Audit, RecordedScore
from auditoiso.timestamps import parse_timestamp

DEFAULT_TITLE = "Auditoría"
DEFAULT_FILENAME = "informe"
PLACEHOLDER = "-"
DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# CR/LF and other control chars, path separators, quotes
_UNSAFE_FILENAME_CHARS = {chr(c) for c in range(32)} | {chr(127), "/", "\\", '"'}


class RenderFailure(Exception):
    """The document could not be produced; nothing was returned."""


def _report_tz() -> Optional[tzinfo]:
    if not settings.REPORT_TIMEZONE:
        return None
    try:
        return ZoneInfo(settings.REPORT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown REPORT_TIMEZONE {settings.REPORT_TIMEZONE!r}, using local time")
        return None


def format_number(value) -> str:
    """3.0 -> '3', 2.5 -> '2.5'."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def attachment_filename(audit: Audit) -> str:
    """Download name for an audit report: '<name>.pdf', or 'informe.pdf'."""
    name = "".join(ch for ch in (audit.name or "") if ch not in _UNSAFE_FILENAME_CHARS).strip()
    return f"{name or DEFAULT_FILENAME}.pdf"


def content_disposition(filename: str) -> str:
    """Attachment header value; adds an RFC 5987 filename* for non-ASCII names."""
    if filename.isascii():
        return f'attachment; filename="{filename}"'
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"attachment; filename=\"{ascii_name}\"; filename*=utf-8''{quote(filename)}"


class PdfGenerator:
    """Generate PDF reports from audit records."""

    def __init__(self, clock: Callable[[], datetime] = None, tz: Optional[tzinfo] = None):
        self.template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self.tz = tz if tz is not None else _report_tz()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def format_timestamp(self, value: Any) -> str:
        """Display form of ``value``; falls back to the current time when it
        cannot be parsed or shifted into the report timezone."""
        dt = parse_timestamp(value)
        if dt is not None:
            try:
                return self._display(dt)
            except (OverflowError, ValueError, OSError):
                logger.warning(f"Timestamp {value!r} cannot be displayed, using current time")
        return self._display(self.clock())

    def _display(self, dt: datetime) -> str:
        if dt.tzinfo is not None:
            # naive values are already wall-clock time
            dt = dt.astimezone(self.tz)
        return dt.strftime(DATE_FORMAT)

    def build_context(self, audit: Audit) -> Dict[str, Any]:
        """Resolve every displayed value, with its fallback."""
        score = audit.score or RecordedScore()
        return {
            "title": audit.name or DEFAULT_TITLE,
            "standard": audit.standard or PLACEHOLDER,
            "auditor": audit.auditor or PLACEHOLDER,
            "audited_at": self.format_timestamp(audit.created_at_audit),
            "achieved": format_number(score.total_achieved or 0),
            "possible": format_number(score.total_possible or 0),
            "percent": format_number(score.percent or 0),
            "items": [
                {
                    "status": "OK" if item.passed else "NO",
                    "weight": format_number(item.weight or 0),
                    "text": item.text or "",
                }
                for item in audit.checklist
            ],
            "notes": audit.notes or "",
            "generated_at": self.format_timestamp(None),
        }

    def render_html(self, audit: Audit) -> str:
        template = self.env.get_template("audit_report.html")
        return template.render(**self.build_context(audit))

    def generate(self, audit: Audit) -> bytes:
        """Generate PDF bytes for an audit.

        Args:
            audit: A resolved audit record

        Returns:
            bytes: PDF file content

        Raises:
            RenderFailure: if templating or PDF encoding fails
        """
        try:
            html_string = self.render_html(audit)
            css = CSS(filename=os.path.join(self.template_dir, "audit_report.css"))
            pdf_bytes = HTML(string=html_string, base_url=self.template_dir).write_pdf(stylesheets=[css])
        except Exception as e:
            logger.error(f"Failed to generate PDF for audit {audit.id}: {e}")
            raise RenderFailure(str(e)) from e

        if not pdf_bytes:
            logger.error(f"PDF for audit {audit.id} came out empty")
            raise RenderFailure("empty document")

        logger.info(f"Generated PDF report for audit {audit.id} ({len(pdf_bytes)} bytes)")
        return pdf_bytes
