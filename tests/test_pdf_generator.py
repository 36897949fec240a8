from datetime import datetime, timezone

import pytest

from auditoiso.schemas.audit import Audit
from auditoiso.services import pdf_generator
from auditoiso.api import deps
from auditoiso.config import settings
from auditoiso.services.pdf_generator import PdfGenerator, RenderFailure
from auditoiso.timestamps import parse_timestamp

from conftest import FIXED_NOW, visible_lines


def test_q1_review_lines(generator, q1_audit):
    lines = visible_lines(generator.render_html(q1_audit))

    assert lines == [
        "Q1 Review",
        "Norma: ISO 9001",
        "Auditor: Jane",
        "Fecha/Hora: 01/03/2026 09:30:00",
        "Resultado: 3 / 3 (100%)",
        "Detalles:",
        "- [OK] (3) Existe un proceso documentado",
        "Generado: 02/01/2026 03:04:05",
    ]


def test_empty_checklist_has_details_header_and_no_items(generator):
    audit = Audit(id="a-empty", name="Vacía", standard="ISO 14001", checklist=[])
    html = generator.render_html(audit)
    lines = visible_lines(html)

    details = lines.index("Detalles:")
    assert lines[details + 1].startswith("Generado:")
    assert "<li" not in html


def test_zero_possible_renders_zero_percent(generator):
    audit = Audit.model_validate({
        "id": "a-zero",
        "name": "Zero",
        "score": {"totalAchieved": 0, "totalPossible": 0, "percent": 0},
    })
    assert "Resultado: 0 / 0 (0%)" in visible_lines(generator.render_html(audit))


def test_missing_score_and_optional_fields_use_placeholders(generator):
    audit = Audit.model_validate({"id": "a-bare", "name": "", "createdAtAudit": "not a date"})
    lines = visible_lines(generator.render_html(audit))

    assert lines[0] == "Auditoría"
    assert "Norma: -" in lines
    assert "Auditor: -" in lines
    assert "Fecha/Hora: 02/01/2026 03:04:05" in lines
    assert "Resultado: 0 / 0 (0%)" in lines


def test_stored_percent_is_displayed_as_is(generator):
    # not recomputed from the checklist
    audit = Audit.model_validate({
        "id": "a-odd",
        "name": "Odd",
        "checklist": [{"id": "1", "text": "x", "weight": 2, "passed": False}],
        "score": {"totalAchieved": 2, "totalPossible": 2, "percent": 100},
    })
    lines = visible_lines(generator.render_html(audit))
    assert "Resultado: 2 / 2 (100%)" in lines
    assert "- [NO] (2) x" in lines


def test_items_keep_submission_order(generator):
    audit = Audit.model_validate({
        "id": "a-order",
        "name": "Order",
        "checklist": [
            {"id": "b", "text": "second", "weight": 1.5, "passed": False},
            {"id": "a", "text": "first", "weight": 2, "passed": True},
        ],
    })
    lines = visible_lines(generator.render_html(audit))
    start = lines.index("Detalles:")
    assert lines[start + 1:start + 3] == ["- [NO] (1.5) second", "- [OK] (2) first"]


def test_notes_section_only_when_notes_present(generator, q1_audit):
    assert "Observaciones:" not in visible_lines(generator.render_html(q1_audit))

    with_notes = q1_audit.model_copy(update={"notes": "abc"})
    lines = visible_lines(generator.render_html(with_notes))
    notes = lines.index("Observaciones:")
    assert lines[notes + 1] == "abc"
    assert lines[notes + 2].startswith("Generado:")


def test_user_text_is_escaped(generator, q1_audit):
    audit = q1_audit.model_copy(update={"notes": "<script>alert(1)</script>"})
    html = generator.render_html(audit)
    assert "<script>" not in html
    assert "<script>alert(1)</script>" in visible_lines(html)


def test_render_is_deterministic_apart_from_footer(q1_audit):
    first = PdfGenerator(clock=lambda: FIXED_NOW, tz=timezone.utc)
    later = PdfGenerator(clock=lambda: datetime(2027, 5, 6, 7, 8, 9, tzinfo=timezone.utc), tz=timezone.utc)

    assert first.render_html(q1_audit) == first.render_html(q1_audit)

    a = visible_lines(first.render_html(q1_audit))
    b = visible_lines(later.render_html(q1_audit))
    assert a[:-1] == b[:-1]
    assert a[-1] != b[-1]


def test_generate_returns_pdf_bytes(generator, q1_audit):
    pdf = generator.generate(q1_audit)
    assert len(pdf) > 0
    assert pdf.startswith(b"%PDF-")


def test_generate_empty_audit(generator):
    pdf = generator.generate(Audit(id="a-empty"))
    assert pdf.startswith(b"%PDF-")


def test_encoding_failure_raises_render_failure(generator, q1_audit, monkeypatch):
    class BrokenHTML:
        def __init__(self, *args, **kwargs):
            pass

        def write_pdf(self, *args, **kwargs):
            raise OSError("disk full")

    monkeypatch.setattr(pdf_generator, "HTML", BrokenHTML)
    with pytest.raises(RenderFailure):
        generator.generate(q1_audit)


@pytest.mark.parametrize("value, expected", [
    ("2026-03-01T09:30:00Z", datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)),
    ("2026-03-01T09:30:00.123+00:00", datetime(2026, 3, 1, 9, 30, 0, 123000, tzinfo=timezone.utc)),
    (1772357400000, datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)),
    ("yesterday", None),
    ("", None),
    (None, None),
])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


def test_naive_timestamp_is_shown_as_written(generator):
    assert generator.format_timestamp("2026-03-01T09:30:00") == "01/03/2026 09:30:00"


@pytest.mark.parametrize("value", [
    "0001-01-01T00:00:00+05:00",
    "9999-12-31T23:00:00-05:00",
])
def test_timestamp_outside_display_range_falls_back_to_now(generator, value):
    assert parse_timestamp(value) is not None
    assert generator.format_timestamp(value) == "02/01/2026 03:04:05"


def test_out_of_range_audit_time_still_renders(generator, q1_audit):
    audit = q1_audit.model_copy(update={"created_at_audit": "9999-12-31T23:00:00-05:00"})
    lines = visible_lines(generator.render_html(audit))
    assert "Fecha/Hora: 02/01/2026 03:04:05" in lines


def test_malformed_stored_fields_render_with_defaults(generator):
    audit = Audit.model_validate({
        "id": "a-legacy",
        "name": "Legacy",
        "auditor": None,
        "score": {"totalAchieved": "n/a", "totalPossible": 4},
        "checklist": [
            {"id": "1", "text": "cero", "weight": 0, "passed": True},
            {"id": "2", "text": None, "weight": "heavy", "passed": "maybe"},
        ],
        "createdAtAudit": {"when": "today"},
    })
    lines = visible_lines(generator.render_html(audit))

    assert "Auditor: -" in lines
    assert "Resultado: 0 / 4 (0%)" in lines
    assert "Fecha/Hora: 02/01/2026 03:04:05" in lines
    start = lines.index("Detalles:")
    assert lines[start + 1:start + 3] == ["- [OK] (0) cero", "- [NO] (0)"]


def test_pdf_generator_is_shared_and_timezone_resolved_once(monkeypatch, caplog):
    monkeypatch.setattr(settings, "REPORT_TIMEZONE", "Mars/Olympus_Mons")
    monkeypatch.setattr(deps, "_pdf_generator", None)

    with caplog.at_level("WARNING", logger="auditoiso"):
        first = deps.get_pdf_generator()
        second = deps.get_pdf_generator()

    assert first is second
    assert first.tz is None
    warnings = [r for r in caplog.records if "REPORT_TIMEZONE" in r.getMessage()]
    assert len(warnings) == 1
