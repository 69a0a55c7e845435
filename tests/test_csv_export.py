"""Tests for export/csv_export.py"""
import csv
import io
from datetime import date, datetime

from src.core.applicant import Applicant
from src.export.csv_export import (
    COLUMNS,
    application_to_row,
    export_filename,
    resume_link,
    to_delimited_text,
    write_export,
)

from tests.conftest import make_application, make_job


def _parse(text):
    return list(csv.reader(io.StringIO(text)))


def _application(**profile):
    cover_letter = profile.pop("cover_letter", "")
    return make_application(
        "a1", make_job("j1", "Backend Engineer"), "u1",
        cover_letter=cover_letter,
        created_at=datetime(2026, 3, 14, 16, 30),
        applicant=profile,
    )


class TestRows:
    def test_header_and_order(self):
        rows = _parse(to_delimited_text([_application()]))
        assert rows[0] == COLUMNS
        assert rows[1][0] == "Ada Lovelace"
        assert rows[1][COLUMNS.index("Applied Date")] == "2026-03-14"
        assert rows[1][COLUMNS.index("Job Title")] == "Backend Engineer"
        assert rows[1][COLUMNS.index("Status")] == "pending"

    def test_special_characters_survive(self):
        letter = 'Dear team,\nI said "hello", twice.'
        application = _application(cover_letter=letter, title="Engineer, Senior")
        rows = _parse(to_delimited_text([application]))
        assert rows[1][COLUMNS.index("Cover Letter")] == letter
        assert rows[1][COLUMNS.index("Title")] == "Engineer, Senior"

    def test_bare_carriage_return_is_quoted(self):
        letter = "line1\rline2"
        rows = _parse(to_delimited_text([_application(cover_letter=letter)]))
        assert len(rows) == 2
        assert rows[1][COLUMNS.index("Cover Letter")] == letter

    def test_quoting_only_where_needed(self):
        text = to_delimited_text([_application(title='Say "hi"')])
        assert '"Say ""hi"""' in text
        assert "Ada Lovelace" in text and '"Ada Lovelace"' not in text

    def test_phone_kept_as_text(self):
        row = application_to_row(_application(phone="0044123456789"))
        assert row[COLUMNS.index("Phone")] == "'0044123456789"

    def test_missing_values(self):
        application = make_application("a1", make_job("j1"), "u1").model_copy(
            update={"applicant": Applicant(id="u1", name="Ada")}
        )
        row = application_to_row(application)
        for column in ("Email", "Phone", "Title", "Location", "Skills", "Cover Letter", "Resume Link"):
            assert row[COLUMNS.index(column)] == "N/A"

    def test_both_skill_shapes(self):
        plain = application_to_row(_application(skills=["Python", "SQL"]))
        records = application_to_row(_application(skills=[{"name": "Python"}, {"name": "SQL"}]))
        assert plain[COLUMNS.index("Skills")] == "Python; SQL"
        assert records[COLUMNS.index("Skills")] == "Python; SQL"

    def test_job_title_falls_back_to_job_list(self):
        application = _application().model_copy(update={"job": None})
        jobs = {"j1": make_job("j1", "Platform Engineer")}
        row = application_to_row(application, jobs=jobs)
        assert row[COLUMNS.index("Job Title")] == "Platform Engineer"

    def test_output_is_stable(self):
        applications = [_application(skills=["Go"]), _application(phone="555")]
        assert to_delimited_text(applications) == to_delimited_text(applications)


class TestResumeLink:
    def test_relative_path_is_made_absolute(self):
        assert resume_link("/uploads/cv.pdf", "https://app.example.com/") == \
            "https://app.example.com/uploads/cv.pdf"

    def test_absolute_url_untouched(self):
        assert resume_link("https://cdn.example.com/cv.pdf", "https://app.example.com") == \
            "https://cdn.example.com/cv.pdf"

    def test_empty(self):
        assert resume_link(None, "https://app.example.com") is None

    def test_row_uses_origin(self):
        row = application_to_row(_application(resume="/uploads/cv.pdf"), origin="https://app.example.com")
        assert row[COLUMNS.index("Resume Link")] == "https://app.example.com/uploads/cv.pdf"


class TestFiles:
    def test_filename(self):
        assert export_filename("j1", date(2026, 3, 14)) == "applications_j1_2026-03-14.csv"
        assert export_filename(None, date(2026, 3, 14)) == "applications_all_2026-03-14.csv"

    def test_write_export(self, tmp_path):
        path = write_export([_application()], tmp_path / "out", "all", today=date(2026, 3, 14))
        assert path.name == "applications_all_2026-03-14.csv"
        rows = _parse(path.read_text(encoding="utf-8"))
        assert len(rows) == 2
