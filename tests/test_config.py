"""Tests for EngineConfig defaults and environment loading."""

import pytest
from pydantic import ValidationError

from frost_journey.api import build_service
from frost_journey.config import EngineConfig, load_config
from frost_journey.generation import (
    DEFAULT_BASE_URL,
    DEFAULT_TEXT_MODEL,
    HttpGenerationService,
    ScriptedGenerationService,
)

ENV_VARS = (
    "GENAI_API_KEY",
    "GENAI_BASE_URL",
    "GENAI_TEXT_MODEL",
    "GENAI_IMAGE_MODEL",
    "FROST_REQUEST_TIMEOUT_MS",
    "FROST_SCRIPTED",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes anything load_dotenv adds
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path / "missing.env"


class TestDefaults:
    def test_timings(self) -> None:
        cfg = EngineConfig()
        assert cfg.progress_duration_ms == 5000
        assert cfg.typewriter_cadence_ms == 50
        assert cfg.auto_advance_ms == 5000
        assert cfg.request_timeout_ms == 30000

    def test_sizes(self) -> None:
        cfg = EngineConfig()
        assert (cfg.artifact_total, cfg.artifact_initial, cfg.phrase_total) == (12, 2, 7)

    def test_chains(self) -> None:
        cfg = EngineConfig()
        assert cfg.passage_chain == [("line_1", 0), ("line_2", 3000), ("line_3", 6000), ("line_4", 9000)]
        assert cfg.conversation_chain == [("line_a", 2000), ("line_b", 5000), ("input_panel", 6500)]

    def test_non_positive_duration_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(progress_duration_ms=0)


class TestLoadConfig:
    def test_defaults_without_environment(self, clean_env) -> None:
        cfg = load_config(clean_env)
        assert cfg.api_key == ""
        assert cfg.base_url == DEFAULT_BASE_URL
        assert cfg.text_model == DEFAULT_TEXT_MODEL
        assert cfg.scripted is False

    def test_reads_environment(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("GENAI_API_KEY", "k")
        monkeypatch.setenv("GENAI_BASE_URL", "http://local:1")
        monkeypatch.setenv("FROST_REQUEST_TIMEOUT_MS", "1500")
        monkeypatch.setenv("FROST_SCRIPTED", "1")
        cfg = load_config(clean_env)
        assert cfg.api_key == "k"
        assert cfg.base_url == "http://local:1"
        assert cfg.request_timeout_ms == 1500
        assert cfg.scripted is True

    def test_zero_timeout_disables_bound(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("FROST_REQUEST_TIMEOUT_MS", "0")
        assert load_config(clean_env).request_timeout_ms is None

    def test_bad_timeout_names_the_setting(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("FROST_REQUEST_TIMEOUT_MS", "soon")
        with pytest.raises(ValidationError, match="request_timeout_ms"):
            load_config(clean_env)

    def test_negative_timeout_rejected(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("FROST_REQUEST_TIMEOUT_MS", "-5")
        with pytest.raises(ValidationError):
            load_config(clean_env)

    @pytest.mark.parametrize("value", ["0", "false"])
    def test_scripted_off_values(self, clean_env, monkeypatch, value) -> None:
        monkeypatch.setenv("FROST_SCRIPTED", value)
        assert load_config(clean_env).scripted is False

    def test_reads_env_file(self, clean_env, monkeypatch, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("GENAI_TEXT_MODEL=from-file\n")
        cfg = load_config(env_file)
        assert cfg.text_model == "from-file"


class TestBuildService:
    def test_scripted(self) -> None:
        assert isinstance(build_service(EngineConfig(scripted=True)), ScriptedGenerationService)

    def test_http(self) -> None:
        service = build_service(EngineConfig(api_key="k", base_url="http://local:1"))
        assert isinstance(service, HttpGenerationService)
