import pytest

from app.errors import PostValidationError
from app.utils.validators import validate_post_content


@pytest.mark.parametrize("content", ["a", " ", "hello", "x" * 255])
def test_accepts_lengths_1_to_255(content):
    assert validate_post_content(content) == content


@pytest.mark.parametrize("content", ["", " " * 256, "x" * 1000])
def test_rejects_out_of_range_lengths(content):
    with pytest.raises(PostValidationError) as excinfo:
        validate_post_content(content)
    assert excinfo.value.code == "VALIDATION_ERROR"


def test_rejects_non_strings():
    with pytest.raises(PostValidationError):
        validate_post_content(42)
