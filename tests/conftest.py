import json

import pytest


class FakeChat:
    """Scripted chat backend: each entry is a reply string, dict or exception."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []

    def complete(self, model, system, user, temperature, max_tokens, json_mode=True):
        self.calls.append(
            {
                "model": model,
                "system": system,
                "user": user,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        step = self.script.pop(0) if self.script else "{}"
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, dict):
            return json.dumps(step)
        return step

    @property
    def models_tried(self):
        return [call["model"] for call in self.calls]


@pytest.fixture
def make_chat():
    return FakeChat
