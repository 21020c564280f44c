from feed2issues.processors.normalize import (
    ELLIPSIS,
    TRUNCATION_NOTICE,
    NormalizationError,
    normalize_content,
    normalize_entry,
    render_issue_body,
    truncate_markdown,
)
from feed2issues.processors.markdown import ConversionError
from feed2issues.utils.pipeline_config import PipelineConfig

import pytest


def _identity(html: str) -> str:
    return html


def test_truncation_is_exact_character_cut():
    text = "x" * 500
    out = truncate_markdown(text, 100)
    assert out == "x" * 100 + ELLIPSIS + TRUNCATION_NOTICE
    assert len(out) == 100 + len(ELLIPSIS) + len(TRUNCATION_NOTICE)


def test_truncation_does_not_snap_to_words():
    out = truncate_markdown("alpha beta gamma", 8)
    assert out.startswith("alpha be" + ELLIPSIS)


def test_no_truncation_at_or_below_limit():
    assert truncate_markdown("abc", 3) == "abc"
    assert truncate_markdown("abc", 10) == "abc"


@pytest.mark.parametrize("limit", [None, 0, -5])
def test_truncation_disabled(limit):
    assert truncate_markdown("x" * 50, limit) == "x" * 50


def test_render_body_with_content_and_link():
    assert render_issue_body("Body", "https://e.x/a") == "\n\nBody\n\n\n\n<https://e.x/a>\n\n"


def test_render_body_omits_empty_sections():
    assert render_issue_body("", "https://e.x/a") == "\n\n\n\n<https://e.x/a>\n\n"
    assert render_issue_body("Body", "") == "\n\nBody\n\n\n"
    assert render_issue_body("", "") == "\n\n\n"


def test_normalize_content_falls_back_to_description():
    assert normalize_content("", "<b>desc</b>", None, converter=_identity) == "<b>desc</b>"
    assert normalize_content("<i>c</i>", "<b>desc</b>", None, converter=_identity) == "<i>c</i>"


def test_normalize_entry_renders_markdown(make_entry):
    entry = make_entry(content="<p>Hello <strong>world</strong></p>", link="https://e.x/1")
    body = normalize_entry(entry, PipelineConfig())
    assert body == "\n\nHello **world**\n\n\n\n<https://e.x/1>\n\n"


def test_normalize_entry_truncates_content_portion(make_entry):
    entry = make_entry(content="y" * 500, link="https://e.x/1")
    body = normalize_entry(entry, PipelineConfig(character_limit=100), converter=_identity)
    expected_content = "y" * 100 + ELLIPSIS + TRUNCATION_NOTICE
    assert body == render_issue_body(expected_content, "https://e.x/1")


def test_normalize_entry_wraps_converter_failure(make_entry):
    def broken(_html: str) -> str:
        raise ConversionError("boom")

    with pytest.raises(NormalizationError, match="boom"):
        normalize_entry(make_entry(), PipelineConfig(), converter=broken)


def test_normalize_entry_rejects_invalid_character_limit(make_entry):
    with pytest.raises(NormalizationError, match="characterLimit"):
        normalize_entry(make_entry(), PipelineConfig(invalid_character_limit="ten"))
