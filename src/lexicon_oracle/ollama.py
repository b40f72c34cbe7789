# SPDX-License-Identifier: Apache-2.0
"""HTTP client for an Ollama text-generation server."""

from __future__ import annotations

from typing import Callable, Optional

import requests

from .config import OllamaConfig
from .errors import ExternalGeneratorError
from .logging import get_logger

LOGGER = get_logger(__name__)

USER_AGENT = "LexiconOracle/0.1"

GenerateFn = Callable[[str, str, float], str]
"""External capability: ``generate(model, prompt, temperature) -> text``."""


class OllamaClient:
    """Thin wrapper around ``POST /api/generate``."""

    def __init__(
        self,
        config: Optional[OllamaConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or OllamaConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @property
    def endpoint(self) -> str:
        return f"{self.config.host.rstrip('/')}/api/generate"

    def generate(self, model: str, prompt: str, temperature: float) -> str:
        payload = {
            "model": model or self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        LOGGER.debug("Requesting completion from %s with model %s", self.endpoint, payload["model"])
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.config.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise ExternalGeneratorError(f"request to {self.endpoint} failed: {exc}") from exc
        except ValueError as exc:
            raise ExternalGeneratorError(f"invalid JSON from {self.endpoint}") from exc
        if not isinstance(data, dict):
            raise ExternalGeneratorError("unexpected payload from Ollama")
        if data.get("error"):
            raise ExternalGeneratorError(str(data["error"]))
        text = data.get("response")
        if not isinstance(text, str):
            raise ExternalGeneratorError("Ollama payload has no 'response' text")
        return text.strip()


__all__ = ["GenerateFn", "OllamaClient", "USER_AGENT"]
