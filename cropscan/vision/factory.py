"""Select and construct the VisionClient for a configured provider name."""
from cropscan.config import Config
from cropscan import constants
from cropscan.constants import MSG_ERR_NO_KEY, MSG_ERR_UNKNOWN_PROVIDER
from cropscan.errors import ConfigurationError
from cropscan.vision.claude import ClaudeVisionClient
from cropscan.vision.client import VisionClient
from cropscan.vision.gemini import GeminiVisionClient
from cropscan.vision.openai import OpenAIChatVisionClient, OpenAIResponsesVisionClient


def _require(key: str | None, env_var: str) -> str:
    match key:
        case str() as k if k:
            return k
        case _:
            raise ConfigurationError(MSG_ERR_NO_KEY % env_var)


def build_vision_client(config: Config, provider: str) -> VisionClient:
    """Raises ConfigurationError when the provider's credential is missing."""
    match provider:
        case constants.PROVIDER_OPENAI_CHAT:
            key = _require(config.openai_api_key, "OPENAI_API_KEY")
            return OpenAIChatVisionClient(key, model=config.openai_model)
        case constants.PROVIDER_OPENAI_RESPONSES:
            key = _require(config.openai_api_key, "OPENAI_API_KEY")
            return OpenAIResponsesVisionClient(key, model=config.openai_model)
        case constants.PROVIDER_CLAUDE:
            key = _require(config.anthropic_api_key, "CLAUDE_API_KEY")
            return ClaudeVisionClient(key, model=config.claude_model)
        case constants.PROVIDER_GEMINI:
            key = _require(config.gemini_api_key, "GEMINI_API_KEY")
            return GeminiVisionClient(
                key, model=config.gemini_model, api_url=config.gemini_api_url
            )
        case _:
            raise ConfigurationError(MSG_ERR_UNKNOWN_PROVIDER % provider)
