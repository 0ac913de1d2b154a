"""OpenAI vision backends — chat-completions and responses APIs."""
import logging
import time
from abc import abstractmethod
from typing import Any, Optional

from openai import APIError, APIStatusError, AsyncOpenAI

from cropscan.constants import (
    AGRONOMIST_PERSONA,
    MSG_ERR_PROVIDER,
    MSG_PROVIDER_CALL,
    MSG_PROVIDER_FAILED,
    OPENAI_DEFAULT_PROMPT,
    OPENAI_MAX_TOKENS,
    OPENAI_VISION_MODEL,
    PROVIDER_OPENAI_CHAT,
    PROVIDER_OPENAI_RESPONSES,
)
from cropscan.errors import ProviderError
from cropscan.models import ImageSource
from cropscan.vision.client import VisionClient, image_reference, log_response, parse_body

logger = logging.getLogger(__name__)


class _OpenAIVisionClient(VisionClient):

    def __init__(self, api_key: str, model: str = OPENAI_VISION_MODEL) -> None:
        self._api_key = api_key
        self._model = model

    async def analyze(self, image: ImageSource, prompt: Optional[str] = None) -> Any:
        client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        logger.info(MSG_PROVIDER_CALL, self.name, self._model)
        started = time.monotonic()
        try:
            response = await self._create(
                client, image_reference(image), prompt or OPENAI_DEFAULT_PROMPT
            )
        except APIStatusError as exc:
            log_response(self.name, time.monotonic() - started, exc.status_code)
            return parse_body(exc.response.text)
        except APIError as exc:
            logger.error(MSG_PROVIDER_FAILED, self.name, exc)
            raise ProviderError(MSG_ERR_PROVIDER, str(exc)) from exc
        log_response(self.name, time.monotonic() - started, response.status_code)
        return parse_body(response.text)

    @abstractmethod
    async def _create(self, client: AsyncOpenAI, image_url: str, prompt: str) -> Any: ...


class OpenAIChatVisionClient(_OpenAIVisionClient):
    """chat.completions with an agronomist system persona."""

    name = PROVIDER_OPENAI_CHAT

    async def _create(self, client: AsyncOpenAI, image_url: str, prompt: str) -> Any:
        return await client.chat.completions.with_raw_response.create(
            model=self._model,
            max_tokens=OPENAI_MAX_TOKENS,
            messages=[
                {"role": "system", "content": AGRONOMIST_PERSONA},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
        )


class OpenAIResponsesVisionClient(_OpenAIVisionClient):
    """responses API — a single user message with input_text + input_image."""

    name = PROVIDER_OPENAI_RESPONSES

    async def _create(self, client: AsyncOpenAI, image_url: str, prompt: str) -> Any:
        return await client.responses.with_raw_response.create(
            model=self._model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_url},
                    ],
                }
            ],
        )
