"""Process-wide provider selection from environment variables."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .providers import ImageProvider, GeminiProvider, OpenAIProvider


class ConfigurationError(Exception):
    """No usable provider credential is available."""


@dataclass(frozen=True)
class ProviderConfig:
    """The single active provider, chosen once at startup."""
    provider: str
    api_key: str
    model: Optional[str] = None

    def create_provider(self) -> ImageProvider:
        if self.provider == GeminiProvider.name:
            return GeminiProvider(self.api_key, self.model)
        return OpenAIProvider(self.api_key, self.model)


def load_provider_config(env: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """Pick the provider from credentials; Gemini wins when both keys are set."""
    env = os.environ if env is None else env

    gemini_key = env.get("GEMINI_API_KEY")
    if gemini_key:
        return ProviderConfig(
            provider=GeminiProvider.name,
            api_key=gemini_key,
            model=env.get("GEMINI_IMAGE_MODEL") or None,
        )

    openai_key = env.get("OPENAI_API_KEY")
    if openai_key:
        return ProviderConfig(
            provider=OpenAIProvider.name,
            api_key=openai_key,
            model=env.get("OPENAI_IMAGE_MODEL") or None,
        )

    raise ConfigurationError(
        "No image provider configured. Set GEMINI_API_KEY or OPENAI_API_KEY."
    )
