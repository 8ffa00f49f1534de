"""Batch signing scenarios."""
import fitz
import pytest

from conftest import build_pdf, build_png, to_data_uri
from core.batch import sign_documents, signed_file_name
from core.errors import EmbeddingError, UnsupportedImageFormatError
from core.models import Document, Position, SignatureConfig


def selected_doc(name, content, position=None):
    return Document(name=name, content=content, selected=True, position=position)


def stamp_rects(content):
    """(page_index, rect) for every image placement in ``content``."""
    found = []
    with fitz.open(stream=content, filetype="pdf") as doc:
        for page in doc:
            for info in page.get_image_info():
                found.append((page.number, tuple(round(v, 1) for v in info["bbox"])))
    return found


@pytest.mark.parametrize("name, expected", [
    ("contract.pdf", "contract_signed.pdf"),
    ("Report.PDF", "Report_signed.PDF"),
    ("archive.v2.pdf", "archive.v2_signed.pdf"),
    ("noext", "noext_signed.pdf"),
])
def test_signed_file_name(name, expected):
    assert signed_file_name(name) == expected


def test_three_documents_share_default_position(signature_uri):
    docs = [selected_doc(f"doc{i}.pdf", build_pdf()) for i in range(3)]
    config = SignatureConfig(image=signature_uri, size=100, opacity=1.0)

    results = sign_documents(docs, config, Position(100, 100, 1))

    assert [r.file_name for r in results] == ["doc0_signed.pdf", "doc1_signed.pdf", "doc2_signed.pdf"]
    placements = [stamp_rects(r.content) for r in results]
    assert placements[0] == [(0, (100.0, 100.0, 200.0, 150.0))]
    assert placements[0] == placements[1] == placements[2]


def test_unsupported_image_fails_every_document_without_raising():
    docs = [selected_doc("a.pdf", build_pdf()), selected_doc("b.pdf", build_pdf())]
    config = SignatureConfig(image=to_data_uri(build_png(), "image/gif"))
    errors = []

    results = sign_documents(docs, config, Position(), on_error=lambda doc, e: errors.append((doc.name, e)))

    assert results == []
    assert [name for name, _ in errors] == ["a.pdf", "b.pdf"]
    assert all(isinstance(e, UnsupportedImageFormatError) for _, e in errors)


def test_page_beyond_end_lands_on_last_page(signature_uri):
    docs = [selected_doc("long.pdf", build_pdf(pages=5), Position(100, 100, 99))]
    config = SignatureConfig(image=signature_uri)

    results = sign_documents(docs, config, Position(100, 100, 1))

    assert len(results) == 1
    pages = {page for page, _ in stamp_rects(results[0].content)}
    assert pages == {4}


def test_corrupt_document_is_skipped(signature_uri):
    docs = [
        selected_doc("good1.pdf", build_pdf()),
        selected_doc("broken.pdf", b"not a pdf at all"),
        selected_doc("good2.pdf", build_pdf()),
    ]
    errors = []

    results = sign_documents(
        docs,
        SignatureConfig(image=signature_uri),
        Position(),
        on_error=lambda doc, e: errors.append((doc.name, e)),
    )

    assert [r.file_name for r in results] == ["good1_signed.pdf", "good2_signed.pdf"]
    assert len(errors) == 1
    assert errors[0][0] == "broken.pdf"
    assert isinstance(errors[0][1], EmbeddingError)


def test_own_position_overrides_default(signature_uri):
    docs = [
        selected_doc("own.pdf", build_pdf(), Position(300, 400, 1)),
        selected_doc("default.pdf", build_pdf()),
    ]

    results = sign_documents(docs, SignatureConfig(image=signature_uri), Position(100, 100, 1))

    own, default = (stamp_rects(r.content)[0][1] for r in results)
    assert own[:2] == (300.0, 400.0)
    assert default[:2] == (100.0, 100.0)


def test_unselected_documents_are_skipped(signature_uri):
    docs = [
        selected_doc("yes.pdf", build_pdf()),
        Document(name="no.pdf", content=build_pdf(), selected=False),
    ]

    results = sign_documents(docs, SignatureConfig(image=signature_uri), Position())

    assert [r.file_name for r in results] == ["yes_signed.pdf"]


def test_progress_reports_each_selected_document(signature_uri):
    docs = [selected_doc("a.pdf", build_pdf()), selected_doc("b.pdf", build_pdf())]
    progress = []

    sign_documents(
        docs,
        SignatureConfig(image=signature_uri),
        Position(),
        on_progress=lambda idx, total, name: progress.append((idx, total, name)),
    )

    assert progress == [(0, 2, "a.pdf"), (1, 2, "b.pdf")]


def test_documents_keep_original_content(signature_uri):
    content = build_pdf()
    doc = selected_doc("keep.pdf", content)

    results = sign_documents([doc], SignatureConfig(image=signature_uri), Position())

    assert doc.content == content
    assert results[0].content != content


@pytest.mark.parametrize("page", [0, -3])
def test_page_zero_or_below_lands_on_last_page(signature_uri, page):
    docs = [selected_doc("long.pdf", build_pdf(pages=3), Position(100, 100, page))]

    results = sign_documents(docs, SignatureConfig(image=signature_uri), Position(100, 100, 1))

    assert {p for p, _ in stamp_rects(results[0].content)} == {2}
