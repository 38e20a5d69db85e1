"""Tests for the printable plan document."""

import os

from models import PlanRecord
from services import document_renderer
from services.document_renderer import (
    build_document_context,
    document_filename,
    generate_pdf,
    render_document_html,
)
from services.signature_pad import PointerEvent, SignaturePad


def signed_record():
    images = []
    pad = SignaturePad(on_stroke_committed=images.append)
    pad.pointer_down(PointerEvent(client_x=10, client_y=10))
    pad.pointer_move(PointerEvent(client_x=90, client_y=40))
    pad.pointer_up()
    return PlanRecord(signature_data=images[-1])


def test_context_sentences(document_config):
    context = build_document_context(PlanRecord(), document_config)

    assert context["seek_sentence"] == (
        "I would like to seek employment as a Procurement Officer in the Supply chain and logistics field."
    )
    assert context["requirements_text"] == (
        "degree in procurement or supply chain management, experience with supplier management, "
        "compliance knowledge, strong reporting skills"
    )
    assert context["folder_label"] == "Google Doc Task[Joel_[YourLastname]]"
    assert context["full_name"] == "Joel [YourLastname]"


def test_empty_answers_print_as_blanks(document_config):
    record = PlanRecord(selected_job_option="", field="", location="  ", company="", reason="")
    future = build_document_context(record, document_config)["future"]

    assert future["selected_job_option"] == "___________"
    assert future["field"] == "_____________"
    assert future["location"] == "_____________"
    assert future["company"] == "______________________"
    assert future["reason"] == "____________________"


def test_empty_requirements_render_as_empty_text(document_config):
    context = build_document_context(PlanRecord(requirements=[]), document_config)
    assert context["requirements_text"] == ""


def test_html_has_three_pages(document_config):
    html = render_document_html(PlanRecord(), document_config)

    assert html.count('class="doc-page') == 3
    for number in (1, 2, 3):
        assert f"Page {number}" in html
    assert "My Folder" in html
    assert "Employment Considerations" in html
    assert "My Future Employment" in html
    assert "Sign in Planner" in html
    assert PlanRecord().date in html


def test_html_embeds_signature(document_config):
    record = signed_record()
    html = render_document_html(record, document_config)

    assert record.signature_data in html
    assert "Sign in Planner" not in html


def test_broken_signature_falls_back_to_placeholder(document_config):
    html = render_document_html(PlanRecord(signature_data="garbage"), document_config)
    assert "Sign in Planner" in html


def test_user_text_is_escaped(document_config):
    html = render_document_html(PlanRecord(company="<script>x</script>"), document_config)
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_stylesheet_inlining(document_config):
    inlined = render_document_html(PlanRecord(), document_config)
    bare = render_document_html(PlanRecord(), document_config, inline_css=False)
    assert ".doc-page" in inlined
    assert ".doc-page {" not in bare


def test_document_filename():
    assert document_filename(PlanRecord()) == "Employment_Plan_Joel_YourLastname"
    assert document_filename(PlanRecord(first_name="Mary Ann", last_name="O'Neil")) == "Employment_Plan_Mary_Ann_O'Neil"


def test_generate_pdf_writes_html_and_pdf(tmp_path, document_config, monkeypatch):
    written = {}

    def fake_create_pdf(html_content, pdf_output_path, config):
        written["html"] = html_content
        with open(pdf_output_path, "wb") as f:
            f.write(b"%PDF-1.7\n")

    monkeypatch.setattr(document_renderer, "_create_pdf_from_html", fake_create_pdf)

    output_dir = tmp_path / "exports"
    pdf_path = generate_pdf(PlanRecord(), str(output_dir), document_config)

    assert pdf_path == os.path.join(str(output_dir), "Employment_Plan_Joel_YourLastname.pdf")
    assert os.path.exists(pdf_path)
    assert (output_dir / "Employment_Plan_Joel_YourLastname.html").exists()
    assert "Employment Considerations" in written["html"]


def test_unvalidated_values_still_render(document_config):
    # Direct store edits skip type checks; the document still has to print.
    record = PlanRecord().model_copy(update={"location": 5, "company": None, "requirements": None})
    context = build_document_context(record, document_config)

    assert context["future"]["location"] == "5"
    assert context["future"]["company"] == "______________________"
    assert context["requirements_text"] == ""
    assert "Employment Considerations" in render_document_html(record, document_config)
