"""Unit tests for the password complexity policy."""

import pytest
from sii_dicri.application.password_policy import password_policy_error

pytestmark = pytest.mark.unit


def test_too_short_is_rejected():
    assert "al menos 6 caracteres" in password_policy_error("abc")


def test_letters_only_is_rejected():
    assert "letra y un número" in password_policy_error("abcdef")


def test_digits_only_is_rejected():
    assert password_policy_error("123456") is not None


def test_letters_and_digits_pass():
    assert password_policy_error("abc123") is None


def test_accented_letters_count_as_letters():
    assert password_policy_error("ñandú1") is None


def test_none_is_rejected():
    assert password_policy_error(None) is not None


def test_custom_min_length():
    assert password_policy_error("abc123", min_length=8) is not None
    assert password_policy_error("abcd1234", min_length=8) is None
