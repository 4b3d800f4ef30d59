import pytest

from app.errors import ConfigError
from app.settings.env_validation import (
    is_hashed_password,
    log_environment_validation,
    validate_environment,
    validate_password_strength
)


def test_test_environment_is_valid(test_settings):
    result = validate_environment(test_settings)
    assert result.is_valid
    assert result.errors == []

def test_missing_passwords_are_errors(test_settings):
    result = validate_environment(test_settings.model_copy(update={"ADMIN_PASSWORD": None, "VIEWER_PASSWORD": ""}))
    assert "ADMIN_PASSWORD is not set" in result.errors
    assert "VIEWER_PASSWORD is not set" in result.errors

def test_plaintext_password_requires_opt_in(test_settings):
    result = validate_environment(test_settings.model_copy(update={"ADMIN_PASSWORD": "plain"}))
    assert any("plain text" in error for error in result.errors)

    allowed = validate_environment(
        test_settings.model_copy(update={"ADMIN_PASSWORD": "plain", "ALLOW_PLAINTEXT_PASSWORDS": True})
    )
    assert allowed.is_valid
    assert any("weak" in warning for warning in allowed.warnings)

def test_selected_backend_needs_credentials(test_settings):
    result = validate_environment(test_settings.model_copy(update={"STORAGE_BACKEND": "b2"}))
    assert any("B2_APPLICATION_KEY_ID" in error for error in result.errors)

def test_suspicious_vercel_token_is_a_warning(test_settings):
    result = validate_environment(test_settings.model_copy(update={"BLOB_READ_WRITE_TOKEN": "abc"}))
    assert result.is_valid
    assert "BLOB_READ_WRITE_TOKEN format looks incorrect" in result.warnings

def test_log_environment_validation_raises_on_errors(test_settings):
    with pytest.raises(ConfigError):
        log_environment_validation(test_settings.model_copy(update={"VIEWER_PASSWORD": None}))

def test_password_helpers():
    assert is_hashed_password("$2b$12$abcdefghijklmnopqrstuv")
    assert not is_hashed_password("hunter2")
    assert validate_password_strength("Abcdefgh123!xyz") == []
    assert "must contain a number" in validate_password_strength("Abcdefghijk!")
