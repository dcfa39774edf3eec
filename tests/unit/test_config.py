import pytest

from sfnmock import config


class TestEnvironmentHelpers:
    @pytest.mark.parametrize(
        "value, expected", [("1", True), ("true", True), ("TRUE", True), ("0", False), ("", False)]
    )
    def test_is_env_true(self, monkeypatch, value, expected):
        monkeypatch.setenv("SFN_TEST_FLAG", value)
        assert config.is_env_true("SFN_TEST_FLAG") == expected

    @pytest.mark.parametrize("value, expected", [("", True), ("1", True), ("0", False), ("false", False)])
    def test_is_env_not_false(self, monkeypatch, value, expected):
        monkeypatch.setenv("SFN_TEST_FLAG", value)
        assert config.is_env_not_false("SFN_TEST_FLAG") == expected

    def test_unset_variables(self, monkeypatch):
        monkeypatch.delenv("SFN_TEST_FLAG", raising=False)
        assert not config.is_env_true("SFN_TEST_FLAG")
        assert config.is_env_not_false("SFN_TEST_FLAG")

    def test_eval_int(self, monkeypatch):
        monkeypatch.delenv("SFN_TEST_INT", raising=False)
        assert config.eval_int("SFN_TEST_INT", 100) == 100

        monkeypatch.setenv("SFN_TEST_INT", " 25 ")
        assert config.eval_int("SFN_TEST_INT", 100) == 25

        monkeypatch.setenv("SFN_TEST_INT", "many")
        with pytest.raises(ValueError, match="SFN_TEST_INT"):
            config.eval_int("SFN_TEST_INT", 100)

    def test_eval_backend(self, monkeypatch):
        monkeypatch.delenv("SFN_TEST_BACKEND", raising=False)
        assert config.eval_backend("SFN_TEST_BACKEND") == "mock"

        monkeypatch.setenv("SFN_TEST_BACKEND", "Live")
        assert config.eval_backend("SFN_TEST_BACKEND") == "live"

        monkeypatch.setenv("SFN_TEST_BACKEND", "remote")
        with pytest.raises(ValueError, match="mock, live"):
            config.eval_backend("SFN_TEST_BACKEND")


class TestLogConfig:
    @pytest.mark.parametrize(
        "value, expected", [("debug", "debug"), (" WARN ", "warn"), ("verbose", False), ("", False)]
    )
    def test_eval_log_type(self, monkeypatch, value, expected):
        monkeypatch.setenv("SFN_TEST_LOG", value)
        assert config.eval_log_type("SFN_TEST_LOG") == expected

    def test_is_trace_logging_enabled(self, monkeypatch):
        monkeypatch.setattr(config, "SFN_LOG", "trace")
        assert config.is_trace_logging_enabled()

        monkeypatch.setattr(config, "SFN_LOG", "debug")
        assert not config.is_trace_logging_enabled()

        monkeypatch.setattr(config, "SFN_LOG", False)
        assert not config.is_trace_logging_enabled()
