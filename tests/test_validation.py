import pytest

from domain.errors import ValidationError
from domain.schema import Tone
from security.validation import (
    MSG_MESSAGE_REQUIRED,
    MSG_MESSAGE_TOO_SHORT,
    MSG_TONE_INVALID,
    sanitize_message,
    validate_generate_request,
)


def test_valid_request_is_normalised():
    req = validate_generate_request({"message": "  Where is my parcel?  ", "tone": "Professional"})

    assert req.message == "Where is my parcel?"
    assert req.tone is Tone.PROFESSIONAL
    assert req.language == "auto"


def test_html_tags_are_stripped_before_trimming():
    assert sanitize_message("  <b>Hello</b> <i>there</i>  ") == "Hello there"


def test_language_is_passed_through_loosely():
    req = validate_generate_request({"message": "Please refund my order", "tone": "Concise", "language": "French"})
    assert req.language == "French"


@pytest.mark.parametrize("language", [None, "", "   "])
def test_blank_language_defaults_to_auto(language):
    req = validate_generate_request({"message": "Please refund my order", "tone": "Concise", "language": language})
    assert req.language == "auto"


def test_message_under_ten_chars_after_sanitizing_is_rejected():
    # 9 visible characters once the tags are gone
    with pytest.raises(ValidationError) as exc:
        validate_generate_request({"message": "<p>123456789</p>", "tone": "Friendly"})
    assert exc.value.message == MSG_MESSAGE_TOO_SHORT


def test_tags_do_not_count_towards_minimum_length():
    with pytest.raises(ValidationError):
        validate_generate_request({"message": "<div><span>hi</span></div>", "tone": "Friendly"})


def test_long_message_is_truncated_not_rejected():
    req = validate_generate_request({"message": "x" * 3000, "tone": "Friendly"})
    assert len(req.message) == 2500


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"tone": "Friendly"}, MSG_MESSAGE_REQUIRED),
        ({"message": 42, "tone": "Friendly"}, MSG_MESSAGE_REQUIRED),
        ({"message": "A perfectly fine message"}, MSG_TONE_INVALID),
        ({"message": "A perfectly fine message", "tone": "Sarcastic"}, MSG_TONE_INVALID),
        ({"message": "A perfectly fine message", "tone": "friendly"}, MSG_TONE_INVALID),
    ],
)
def test_schema_failures_map_to_readable_messages(raw, expected):
    with pytest.raises(ValidationError) as exc:
        validate_generate_request(raw)
    assert exc.value.message == expected
    assert exc.value.http_status == 400


@pytest.mark.parametrize("raw", [None, [], "message", 7])
def test_non_object_body_is_rejected(raw):
    with pytest.raises(ValidationError):
        validate_generate_request(raw)


def test_message_error_reported_before_tone_error():
    with pytest.raises(ValidationError) as exc:
        validate_generate_request({"message": None, "tone": "Nope"})
    assert exc.value.message == MSG_MESSAGE_REQUIRED


def test_validation_is_pure():
    raw = {"message": "<em>My invoice</em> shows the wrong amount  ", "tone": "Concise", "language": "German"}

    first = validate_generate_request(raw)
    second = validate_generate_request(raw)

    assert first == second
    assert raw["message"] == "<em>My invoice</em> shows the wrong amount  "
