"""End-of-batch reporting."""
from core.constants import MAX_ERRORS_DISPLAYED
from core.persistence import SaveOutcome
from ui.log_panel import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_WARNING
from ui.processing import MSG_NONE_SIGNED, save_log_lines, summarize_signing


def test_nothing_signed_is_reported_as_error():
    severity, title, message = summarize_signing(0, ["Failed a.pdf: unsupported format"])
    assert severity == SEVERITY_ERROR
    assert message == MSG_NONE_SIGNED


def test_clean_batch_is_reported_as_info():
    severity, title, message = summarize_signing(3, [])
    assert severity == SEVERITY_INFO
    assert "3 document(s)" in message


def test_partial_batch_lists_errors():
    errors = [f"Failed doc{i}.pdf: broken" for i in range(MAX_ERRORS_DISPLAYED + 2)]

    severity, title, message = summarize_signing(1, errors)

    assert severity == SEVERITY_WARNING
    assert f"Errors: {len(errors)}" in message
    assert errors[0] in message
    assert errors[-1] not in message
    assert "...and 2 more." in message


def test_only_written_files_are_logged_as_signed():
    lines = save_log_lines([
        SaveOutcome("a_signed.pdf", saved=True, path="/out/a_signed.pdf"),
        SaveOutcome("b_signed.pdf", saved=False),
        SaveOutcome("c_signed.pdf", saved=True),
    ])

    assert lines == [
        "Signed: a_signed.pdf -> /out/a_signed.pdf",
        "Not saved: b_signed.pdf",
        "Signed: c_signed.pdf",
    ]
