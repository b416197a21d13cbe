import json
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

from mcq_generator.app import create_app
from mcq_generator.clients import Completion, CompletionClient
from mcq_generator.config import Settings


def make_mcqs(count: int) -> List[dict]:
    return [
        {
            "question": f"Question {i}?",
            "options": ["A) one", "B) two", "C) three", "D) four"],
            "answer": "B",
            "explanation": f"Because {i}.",
        }
        for i in range(1, count + 1)
    ]


def fenced(items: Any) -> str:
    return "```json\n" + json.dumps(items, indent=2) + "\n```"


class FakeCompletionClient(CompletionClient):
    def __init__(self, text: str = "", response: Any = None, error: Optional[Exception] = None):
        self.text = text
        self.response = response if response is not None else {"output_text": text}
        self.error = error
        self.calls = []

    async def complete(self, model, system_prompt, user_prompt, temperature, max_output_tokens):
        self.calls.append({
            "model": model,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })
        if self.error is not None:
            raise self.error
        return Completion(text=self.text, response=self.response)


class FakeClientFactory:
    def __init__(self, client: FakeCompletionClient):
        self.client = client
        self.credentials = []

    def __call__(self, settings, credential=None):
        self.credentials.append(credential)
        return self.client

    @property
    def call_count(self) -> int:
        return len(self.client.calls)


SETTINGS_ENV = (
    "MCQ_VARIANT", "LLM_PROVIDER", "MODEL", "OPENAI_API_KEY", "GROQ_API_KEY",
    "RECORD_COUNT", "MAX_TOKENS", "CREDENTIAL_SOURCE", "ENFORCE_CALLER_AUTH",
    "CALLER_TOKENS", "REQUEST_TIMEOUT", "CORS_ORIGINS", "LOG_LEVEL", "PORT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


def make_settings(variant: str = "shared", **overrides) -> Settings:
    values = {"mcq_variant": variant, "openai_api_key": "sk-server"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def build_test_client():
    def _build(client: FakeCompletionClient, variant: str = "shared", **overrides):
        factory = FakeClientFactory(client)
        app = create_app(make_settings(variant, **overrides), client_factory=factory)
        return TestClient(app), factory
    return _build
