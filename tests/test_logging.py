"""
Tests for structured logging helpers.
"""

import json
import logging

import pytest
import structlog


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestJSONFormatter:

    def test_includes_extra_data(self):
        from twofa_core.logging_config import JSONFormatter

        record = logging.LogRecord("audit", logging.INFO, __file__, 1, "Audit: auth.login", None, None)
        record.extra_data = {"action": "auth.login", "outcome": "success"}

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Audit: auth.login"
        assert data["level"] == "INFO"
        assert data["action"] == "auth.login"

    def test_includes_exception(self):
        from twofa_core.logging_config import JSONFormatter

        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord("errors", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"


class TestSetupLogging:

    def test_structlog_routed_through_stdlib(self, restore_logging, capsys):
        from twofa_core.logging_config import setup_logging

        setup_logging("twofa-test", level="INFO", json_output=True)
        structlog.get_logger("twofa_core.test").info("OTP issued", username="alice")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
        event = next(line for line in lines if line["message"] == "OTP issued")

        assert event["username"] == "alice"
        assert event["service"] == "twofa-test"
        assert event["logger"] == "twofa_core.test"

    def test_audit_never_contains_password(self, restore_logging, capsys):
        import asyncio
        from twofa_core.auth import AuthService
        from twofa_core.config import AuthConfig
        from twofa_core.logging_config import setup_logging

        setup_logging("twofa-test", level="DEBUG", json_output=False)
        config = AuthConfig(argon2_time_cost=1, argon2_memory_cost=1024, argon2_parallelism=1)
        service = AuthService(config)

        async def flow():
            await service.register("alice", "Sup3rSecretPw")
            await service.login("alice", "Sup3rSecretPw")

        asyncio.run(flow())

        output = capsys.readouterr().out
        assert "Audit: auth.login (success)" in output
        assert "Sup3rSecretPw" not in output


class TestRedaction:

    def test_formatter_redacts_credential_fields(self):
        from twofa_core.logging_config import ConsoleFormatter, JSONFormatter

        record = logging.LogRecord("twofa_core.auth", logging.INFO, __file__, 1, "Login attempt", None, None)
        record.extra_data = {"username": "alice", "password": "hunter2", "otp": "123456"}

        data = json.loads(JSONFormatter().format(record))
        line = ConsoleFormatter().format(record)

        assert data["username"] == "alice"
        assert data["password"] == "[redacted]"
        assert data["otp"] == "[redacted]"
        assert "hunter2" not in line
        assert "123456" not in line

    def test_structlog_fields_redacted(self, restore_logging, capsys):
        from twofa_core.logging_config import setup_logging

        setup_logging("twofa-test", level="INFO", json_output=True)
        structlog.get_logger("twofa_core.test").info("Login attempt", username="alice", password="hunter2")

        output = capsys.readouterr().out
        event = next(json.loads(line) for line in output.splitlines() if "Login attempt" in line)

        assert "hunter2" not in output
        assert event["password"] == "[redacted]"


class TestLogError:

    def test_storage_error_fields(self, restore_logging, capsys):
        from twofa_core.errors import StorageUnavailable
        from twofa_core.logging_config import log_error, setup_logging

        setup_logging("twofa-test", level="INFO", json_output=True)
        try:
            raise StorageUnavailable("connection reset", store="otp")
        except StorageUnavailable as e:
            log_error(e, context="verify_otp", username="alice")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
        event = next(line for line in lines if line["message"] == "Error: verify_otp")

        assert event["logger"] == "errors"
        assert event["level"] == "ERROR"
        assert event["error_code"] == "STORAGE_UNAVAILABLE"
        assert event["store"] == "otp"
        assert event["username"] == "alice"
        assert event["exception"]["type"] == "StorageUnavailable"

    def test_audit_failure_is_warning(self, restore_logging, capsys):
        from twofa_core.logging_config import log_audit, setup_logging

        setup_logging("twofa-test", level="INFO", json_output=True)
        log_audit("auth.login", "alice", "failure", reason="invalid_credentials")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
        event = next(line for line in lines if line["message"] == "Audit: auth.login (failure)")

        assert event["level"] == "WARNING"
        assert event["logger"] == "audit"
        assert event["username"] == "alice"
        assert event["reason"] == "invalid_credentials"
