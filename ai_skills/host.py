"""Host service abstractions for the AI Skills extension.

The extension never owns its persistence or its model access. The launcher
host hands it two services:

- KeyValueStore: string keys to string values (structured values are JSON blobs)
- AIProvider: a single ``ask(prompt)`` call against a hosted model

Architecture:
    Registry / router code only talks to the protocols, so the same logic runs
    inside a host runtime, from the CLI, or in tests.

    SkillRegistry → KeyValueStore ──┬── MemoryStore     (tests, embedding hosts)
                                    └── JsonFileStore   (standalone CLI)

    SkillRouter   → AIProvider ─────┬── OpenAIProvider  (OpenAI-compatible APIs)
                                    └── OllamaProvider  (local Ollama server)
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Key-Value Storage
# =============================================================================

@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the host's local key-value storage."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string for ``key`` or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        ...

    def all_items(self) -> dict[str, str]:
        """Return a copy of every stored item."""
        ...


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def all_items(self) -> dict[str, str]:
        return dict(self._items)


class JsonFileStore:
    """Key-value store persisted as one flat JSON object on disk.

    Every write rewrites the whole file through a temporary file and an
    atomic rename, so readers never observe a half-written document.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Location of the JSON file. Parent directories are created on
                first write.
        """
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object, ignoring it")
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def all_items(self) -> dict[str, str]:
        return self._read()


# =============================================================================
# AI Provider Protocol (Abstract Interface)
# =============================================================================

# Sampling temperature per creativity level
CREATIVITY_TEMPERATURES: dict[str, float] = {
    "none": 0.0,
    "low": 0.4,
    "medium": 0.7,
    "high": 1.0,
    "maximum": 1.5,
}


def creativity_to_temperature(creativity: str) -> float:
    """Map a creativity level to a sampling temperature.

    Raises:
        ValueError: If the level is unknown
    """
    try:
        return CREATIVITY_TEMPERATURES[creativity]
    except KeyError:
        valid = ", ".join(CREATIVITY_TEMPERATURES)
        raise ValueError(f"Unknown creativity level '{creativity}'. Use one of: {valid}") from None


@runtime_checkable
class AIProvider(Protocol):
    """Protocol defining the host AI "ask" interface."""

    def ask(self, prompt: str, *, model: Optional[str] = None, creativity: str = "none") -> str:
        """Send a single prompt and return the model's text reply."""
        ...

    def provider_name(self) -> str:
        """Return identifier for this provider."""
        ...

    def is_available(self) -> bool:
        """Check if this provider is configured well enough to be called."""
        ...


class BaseAIProvider(ABC):
    """Base class for AI provider implementations."""

    def __init__(self, default_model: str, timeout: float = 30.0):
        """Initialize common provider state.

        Args:
            default_model: Model used when ``ask`` is called without one
            timeout: Request timeout in seconds
        """
        self.default_model = default_model
        self.timeout = timeout

    def ask(self, prompt: str, *, model: Optional[str] = None, creativity: str = "none") -> str:
        """Send ``prompt`` and return the stripped reply text."""
        temperature = creativity_to_temperature(creativity)
        model_id = model or self.default_model

        logger.debug(f"{self.provider_name()} ask: model={model_id}, temperature={temperature}")
        return self._complete(prompt, model_id, temperature).strip()

    @abstractmethod
    def _complete(self, prompt: str, model: str, temperature: float) -> str:
        """Run the completion call - must be implemented by subclasses."""
        pass

    @abstractmethod
    def provider_name(self) -> str:
        """Return provider identifier."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available."""
        pass


# =============================================================================
# OpenAI Provider Implementation
# =============================================================================

class OpenAIProvider(BaseAIProvider):
    """Provider using the OpenAI chat completions API.

    Any OpenAI-compatible endpoint (for example a Gemini or OpenRouter
    compatibility layer) works through ``base_url``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        default_model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 64,
        timeout: float = 30.0,
    ):
        super().__init__(default_model, timeout)
        self.api_key = api_key
        self.base_url = base_url
        self.max_tokens = max_tokens
        self._client = None

    @property
    def client(self):
        """Lazy-create the OpenAI SDK client."""
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    def provider_name(self) -> str:
        return "openai"

    def is_available(self) -> bool:
        return bool(self.api_key or self.base_url)

    def _complete(self, prompt: str, model: str, temperature: float) -> str:
        resp = self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=temperature,
        )
        return resp.choices[0].message.content or ""


# =============================================================================
# Ollama Provider Implementation
# =============================================================================

class OllamaProvider(BaseAIProvider):
    """Provider using a local Ollama server's generate endpoint."""

    def __init__(self, url: str, default_model: str, timeout: float = 30.0):
        super().__init__(default_model, timeout)
        self.url = url.rstrip("/")

    def provider_name(self) -> str:
        return "ollama"

    def is_available(self) -> bool:
        return bool(self.url)

    def _complete(self, prompt: str, model: str, temperature: float) -> str:
        resp = httpx.post(
            f"{self.url}/api/generate",
            json={
                "model": model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": temperature},
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json().get("response", "")


# =============================================================================
# Provider Factory
# =============================================================================

def create_ai_provider(settings=None) -> BaseAIProvider:
    """Factory function to create the configured AI provider.

    Args:
        settings: Settings instance (defaults to the global settings)

    Returns:
        Provider instance for ``settings.llm_provider``

    Raises:
        ValueError: If the provider name is unknown
    """
    if settings is None:
        from .config import settings

    provider = settings.llm_provider.lower()

    if provider == "openai":
        logger.info("Created OpenAIProvider")
        return OpenAIProvider(
            api_key=settings.openai_api_key,
            default_model=settings.openai_chat_model,
            base_url=settings.openai_base_url,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.request_timeout,
        )

    if provider == "ollama":
        logger.info("Created OllamaProvider")
        return OllamaProvider(
            url=settings.ollama_url,
            default_model=settings.ollama_model,
            timeout=settings.request_timeout,
        )

    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
