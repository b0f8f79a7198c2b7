"""OpenAI chat wrapper that reports failures as a tagged error kind."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import openai
from openai import OpenAI


logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    MODEL_UNAVAILABLE = "model_unavailable"
    INVALID_REQUEST = "invalid_request"
    TRANSPORT = "transport"


class ChatError(RuntimeError):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.code = code


def should_try_next_model(kind: ErrorKind) -> bool:
    return kind is ErrorKind.MODEL_UNAVAILABLE


def classify_error(exc: Exception) -> ChatError:
    if isinstance(exc, ChatError):
        return exc
    message = str(exc)
    if isinstance(exc, openai.APIConnectionError):
        return ChatError(ErrorKind.TRANSPORT, message)
    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        code = getattr(exc, "code", None)
        if status == 404 or code == "model_not_found":
            kind = ErrorKind.MODEL_UNAVAILABLE
        elif status == 429:
            kind = ErrorKind.RATE_LIMITED
        elif status >= 500:
            kind = ErrorKind.TRANSPORT
        else:
            kind = ErrorKind.INVALID_REQUEST
        return ChatError(kind, message, status=status, code=code)
    return ChatError(ErrorKind.INVALID_REQUEST, message)


class ChatClient:
    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ) -> None:
        # SDK retries would hide model_not_found behind repeated calls
        self.client = client or OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    def complete(
        self,
        model: str,
        system: str,
        user: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool = True,
    ) -> str:
        kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as exc:
            raise classify_error(exc) from exc
        content = response.choices[0].message.content
        return content or "{}"
