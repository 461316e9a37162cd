from planweave.runtime import PlanRuntimeConfig, get_runtime_config, normalize_step_logging, unescape_separator


def test_defaults():
    config = get_runtime_config()
    assert config == PlanRuntimeConfig()
    assert config.trim_results is True
    assert config.result_separator == "\n"
    assert config.step_logging == "info"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PLANWEAVE_TRIM_RESULTS", "false")
    monkeypatch.setenv("PLANWEAVE_RESULT_SEPARATOR", "\\n---\\n")
    monkeypatch.setenv("PLANWEAVE_STEP_LOGGING", "DEBUG")

    config = get_runtime_config()

    assert config.trim_results is False
    assert config.result_separator == "\n---\n"
    assert config.step_logging == "debug"


def test_normalize_step_logging():
    assert normalize_step_logging(None) == "info"
    assert normalize_step_logging(" Quiet ") == "quiet"
    assert normalize_step_logging("verbose") == "info"


def test_non_ascii_separator_is_kept(monkeypatch):
    monkeypatch.setenv("PLANWEAVE_RESULT_SEPARATOR", " → ")
    assert get_runtime_config().result_separator == " → "


def test_separator_escapes_mix_with_unicode():
    assert unescape_separator("\\n→\\t") == "\n→\t"
    assert unescape_separator("\\\\n") == "\\n"
    assert unescape_separator("\\x41") == "\\x41"
