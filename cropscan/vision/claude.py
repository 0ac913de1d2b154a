"""ClaudeVisionClient — Anthropic Claude vision backend."""
import logging
import time
from typing import Any, Optional

from anthropic import APIError, APIStatusError, AsyncAnthropic

from cropscan.constants import (
    CLAUDE_DEFAULT_PROMPT,
    CLAUDE_MAX_TOKENS,
    CLAUDE_VISION_MODEL,
    MSG_ERR_PROVIDER,
    MSG_PROVIDER_CALL,
    MSG_PROVIDER_FAILED,
    PROVIDER_CLAUDE,
)
from cropscan.errors import ProviderError
from cropscan.models import ImageSource
from cropscan.vision.client import VisionClient, log_response, parse_body, require_inline

logger = logging.getLogger(__name__)


class ClaudeVisionClient(VisionClient):
    name = PROVIDER_CLAUDE

    def __init__(self, api_key: str, model: str = CLAUDE_VISION_MODEL) -> None:
        self._api_key = api_key
        self._model = model

    async def analyze(self, image: ImageSource, prompt: Optional[str] = None) -> Any:
        inline = require_inline(image, self.name)
        client = AsyncAnthropic(api_key=self._api_key, max_retries=0)
        logger.info(MSG_PROVIDER_CALL, self.name, self._model)
        started = time.monotonic()
        try:
            response = await client.messages.with_raw_response.create(
                model=self._model,
                max_tokens=CLAUDE_MAX_TOKENS,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": inline.mime_type,
                                    "data": inline.to_base64(),
                                },
                            },
                            {"type": "text", "text": prompt or CLAUDE_DEFAULT_PROMPT},
                        ],
                    }
                ],
            )
        except APIStatusError as exc:
            log_response(self.name, time.monotonic() - started, exc.status_code)
            return parse_body(exc.response.text)
        except APIError as exc:
            logger.error(MSG_PROVIDER_FAILED, self.name, exc)
            raise ProviderError(MSG_ERR_PROVIDER, str(exc)) from exc
        log_response(self.name, time.monotonic() - started, response.status_code)
        return parse_body(response.text)
