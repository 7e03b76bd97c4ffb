"""Tests for new-todo form validation."""
import pytest

from todoboard.forms import TodoForm, FormError


class TestTodoForm:

    def test_valid_input_is_trimmed(self):
        assert TodoForm("  Buy milk ", " 2% reduced fat  ").validate() == ("Buy milk", "2% reduced fat")

    def test_exact_minimum_lengths_pass(self):
        assert TodoForm("abcd", "abcdef").validate() == ("abcd", "abcdef")

    @pytest.mark.parametrize("title, desc, field, message", [
        ("", "Long enough", "title", "Title is required"),
        ("   ", "Long enough", "title", "Title is required"),
        ("abc", "Long enough", "title", "Title min. 4 characters."),
        (" ab  ", "Long enough", "title", "Title min. 4 characters."),
        ("Good title", "", "desc", "Description is required"),
        ("Good title", "     ", "desc", "Description is required"),
        ("Good title", "abcde", "desc", "Description min. 6 characters."),
    ])
    def test_invalid_input(self, title, desc, field, message):
        with pytest.raises(FormError) as exc:
            TodoForm(title, desc).validate()
        assert exc.value.field == field
        assert exc.value.message == message
        assert str(exc.value) == message

    def test_title_checked_before_description(self):
        with pytest.raises(FormError) as exc:
            TodoForm("", "").validate()
        assert exc.value.field == "title"

    def test_none_is_treated_as_empty(self):
        with pytest.raises(FormError, match="Title is required"):
            TodoForm(None, None).validate()
