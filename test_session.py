"""Tests for document selection, positions and pre-flight validation."""
import pytest

from conftest import build_pdf
from core.errors import ValidationError
from core.models import Position, SignatureConfig
from core.session import SigningSession, is_pdf_path


@pytest.fixture
def session(signature_uri):
    s = SigningSession(SignatureConfig(image=signature_uri))
    for name in ("a.pdf", "b.pdf", "c.pdf"):
        s.add_document(name, build_pdf())
    return s


def test_new_documents_are_unselected(session):
    assert session.selected_documents() == []
    assert not session.all_selected


def test_select_all_and_toggle(session):
    session.select_all()
    assert session.all_selected

    first = session.documents[0]
    session.set_selected(first.id, False)
    assert not session.all_selected
    assert [d.name for d in session.selected_documents()] == ["b.pdf", "c.pdf"]


def test_empty_session_is_not_all_selected():
    assert not SigningSession().all_selected


def test_remove_and_clear(session):
    doc = session.documents[1]
    session.remove_document(doc.id)
    assert [d.name for d in session.documents] == ["a.pdf", "c.pdf"]
    with pytest.raises(KeyError):
        session.get(doc.id)

    session.clear()
    assert session.documents == []


def test_set_position_keeps_page_zero_for_last_page_fallback(session):
    doc = session.documents[0]
    session.set_position(doc.id, Position(10, 10, 0))
    assert doc.position == Position(10, 10, 0)


def test_set_position_for_selected(session):
    session.set_selected(session.documents[0].id, True)
    session.set_selected(session.documents[2].id, True)

    changed = session.set_position_for_selected(Position(50, 60, 2))

    assert changed == 2
    assert [d.position for d in session.documents] == [Position(50, 60, 2), None, Position(50, 60, 2)]


def test_clear_position(session):
    doc = session.documents[0]
    session.set_position(doc.id, Position(1, 2, 3))
    session.clear_position(doc.id)
    assert doc.position is None


def test_signature_settings_are_replaced_not_mutated(session):
    before = session.signature
    session.set_signature_size(150)
    session.set_signature_opacity(0.4)

    assert before.size == 100
    assert session.signature.size == 150
    assert session.signature.opacity == 0.4
    assert session.signature.image == before.image


def test_invalid_opacity_is_rejected(session):
    with pytest.raises(ValidationError):
        session.set_signature_opacity(1.5)
    with pytest.raises(ValidationError):
        SignatureConfig(opacity=-0.1)


def test_invalid_size_is_rejected():
    with pytest.raises(ValidationError):
        SignatureConfig(size=0)


def test_clear_signature(session):
    assert session.has_signature
    session.clear_signature()
    assert not session.has_signature


# ------------------------------------------------------------------
# Pre-flight
# ------------------------------------------------------------------
def test_validate_requires_selection(session):
    with pytest.raises(ValidationError, match="Select at least one file"):
        session.validate_for_signing()


def test_validate_requires_signature(session):
    session.select_all()
    session.clear_signature()
    with pytest.raises(ValidationError, match="signature image"):
        session.validate_for_signing()


def test_validate_requires_some_position(session):
    session.select_all()
    with pytest.raises(ValidationError, match="position"):
        session.validate_for_signing()


def test_first_selected_position_is_the_default(session):
    a, b, c = session.documents
    session.set_position(a.id, Position(1, 1, 1))
    session.set_position(c.id, Position(300, 200, 2))
    session.set_selected(b.id, True)
    session.set_selected(c.id, True)

    assert session.validate_for_signing() == Position(300, 200, 2)


def test_configured_fallback_position_is_used(session):
    session.default_position = Position(40, 50, 1)
    session.select_all()
    assert session.validate_for_signing() == Position(40, 50, 1)


def test_own_position_beats_configured_fallback(session):
    session.default_position = Position(40, 50, 1)
    doc = session.documents[1]
    session.set_position(doc.id, Position(7, 8, 9))
    session.select_all()
    assert session.resolve_default_position() == Position(7, 8, 9)


# ------------------------------------------------------------------
# Loading files
# ------------------------------------------------------------------
def test_add_files_skips_non_pdf_and_missing(tmp_path):
    pdf = tmp_path / "one.PDF"
    pdf.write_bytes(build_pdf())
    txt = tmp_path / "notes.txt"
    txt.write_text("hello")
    missing = tmp_path / "gone.pdf"

    session = SigningSession()
    added = session.add_files([str(pdf), str(txt), str(missing)])

    assert [d.name for d in added] == ["one.PDF"]
    assert added[0].source_path == str(pdf)
    assert added[0].content == pdf.read_bytes()
    assert not added[0].selected
    assert session.documents == added


@pytest.mark.parametrize("path, expected", [
    ("a.pdf", True),
    ("A.PDF", True),
    ("a.pdf.txt", False),
    ("pdf", False),
])
def test_is_pdf_path(path, expected):
    assert is_pdf_path(path) is expected
