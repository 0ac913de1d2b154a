"""GeminiVisionClient — Google Gemini generateContent backend over plain HTTP."""
import logging
import time
from typing import Any, Optional

import httpx

from cropscan.constants import (
    GEMINI_DEFAULT_PROMPT,
    GEMINI_NATIVE_URL,
    GEMINI_VISION_MODEL,
    MSG_ERR_PROVIDER,
    MSG_PROVIDER_CALL,
    MSG_PROVIDER_FAILED,
    PROVIDER_GEMINI,
    PROVIDER_TIMEOUT_SECONDS,
)
from cropscan.errors import ProviderError
from cropscan.models import ImageSource
from cropscan.vision.client import VisionClient, log_response, parse_body, require_inline

logger = logging.getLogger(__name__)


class GeminiVisionClient(VisionClient):
    """Native endpoint authenticates with ?key=; a custom api_url gets a Bearer header."""

    name = PROVIDER_GEMINI

    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_VISION_MODEL,
        api_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._api_url = api_url
        self._transport = transport

    def _endpoint(self) -> tuple[str, dict[str, str], Optional[dict[str, str]]]:
        match self._api_url:
            case str() as url if url:
                return url, {"Authorization": f"Bearer {self._api_key}"}, None
            case _:
                return GEMINI_NATIVE_URL.format(model=self._model), {}, {"key": self._api_key}

    def _redact(self, text: str) -> str:
        return text.replace(self._api_key, "***")

    async def analyze(self, image: ImageSource, prompt: Optional[str] = None) -> Any:
        inline = require_inline(image, self.name)
        url, headers, params = self._endpoint()
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt or GEMINI_DEFAULT_PROMPT},
                        {"inlineData": {"data": inline.to_base64(), "mimeType": inline.mime_type}},
                    ]
                }
            ]
        }
        logger.info(MSG_PROVIDER_CALL, self.name, self._model)
        started = time.monotonic()
        async with httpx.AsyncClient(
            transport=self._transport, timeout=PROVIDER_TIMEOUT_SECONDS
        ) as client:
            try:
                response = await client.post(url, json=body, headers=headers, params=params)
            except httpx.HTTPError as exc:
                details = self._redact(str(exc))
                logger.error(MSG_PROVIDER_FAILED, self.name, details)
                raise ProviderError(MSG_ERR_PROVIDER, details) from exc
        log_response(self.name, time.monotonic() - started, response.status_code)
        return parse_body(response.text)
