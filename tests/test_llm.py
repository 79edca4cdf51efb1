# tests/test_llm.py

from types import SimpleNamespace

import pytest

import paper_sections.llm as llm_module
from paper_sections.llm import GeminiClient, GeminiConfig, LlmClientError, build_prompt


class FakeModel:
    def __init__(self, name, reply="This is the summary.", error=None):
        self.name = name
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


def _fake_genai(monkeypatch, **model_kwargs):
    state = {"models": []}

    def configure(api_key):
        state["api_key"] = api_key

    def generative_model(name):
        model = FakeModel(name, **model_kwargs)
        state["models"].append(model)
        return model

    monkeypatch.setattr(
        llm_module,
        "genai",
        SimpleNamespace(configure=configure, GenerativeModel=generative_model),
    )
    return state


def test_build_prompt_layout():
    text = build_prompt(
        "Summarize this.",
        {"abstract": "This is the abstract.", "conclusion": "This is the conclusion."},
    )

    assert text == (
        "User Prompt: Summarize this.\n\n"
        "Selected Document Sections:\n---\n"
        "Section: abstract\nThis is the abstract.\n---\n"
        "Section: conclusion\nThis is the conclusion.\n---\n"
    )


def test_generate_returns_model_text(monkeypatch):
    state = _fake_genai(monkeypatch)

    client = GeminiClient(GeminiConfig(api_key="MOCK_API_KEY", model_name="gemini-1.5-flash"))
    result = client.generate("Summarize this.", {"abstract": "This is the abstract."})

    assert result == "This is the summary."
    assert state["api_key"] == "MOCK_API_KEY"
    model = state["models"][0]
    assert model.name == "gemini-1.5-flash"
    assert "User Prompt: Summarize this." in model.prompts[0]
    assert "Section: abstract\nThis is the abstract." in model.prompts[0]


def test_model_is_created_once(monkeypatch):
    state = _fake_genai(monkeypatch)

    client = GeminiClient(GeminiConfig(api_key="k"))
    client.generate("a", {"body": "b"})
    client.generate("c", {"body": "d"})

    assert len(state["models"]) == 1


def test_missing_api_key_raises(monkeypatch):
    _fake_genai(monkeypatch)

    with pytest.raises(LlmClientError, match="Missing Google API Key configuration."):
        GeminiClient(GeminiConfig(api_key=None))


def test_api_errors_are_wrapped(monkeypatch):
    _fake_genai(monkeypatch, error=RuntimeError("Google API Error"))

    client = GeminiClient(GeminiConfig(api_key="k"))
    with pytest.raises(LlmClientError) as exc_info:
        client.generate("Summarize this.", {"abstract": "x"})

    assert str(exc_info.value) == "Failed to get response from LLM: Google API Error"


def test_config_from_env(monkeypatch):
    monkeypatch.delenv("PAPER_SECTIONS_GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.setenv("PAPER_SECTIONS_LLM_MODEL_NAME", "gemini-test")

    config = GeminiConfig.from_env()

    assert config.api_key == "from-env"
    assert config.model_name == "gemini-test"
