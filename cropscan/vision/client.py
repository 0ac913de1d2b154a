"""VisionClient — abstract base for image analysis backends."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from cropscan.constants import MSG_ERR_URL_UNSUPPORTED, MSG_PROVIDER_DONE
from cropscan.errors import ValidationError
from cropscan.models import ImageSource, ImageUrl, ValidatedImage

logger = logging.getLogger(__name__)


class VisionClient(ABC):
    name: str

    @abstractmethod
    async def analyze(self, image: ImageSource, prompt: Optional[str] = None) -> Any:
        """Send one request to the provider and return its decoded JSON body.

        Non-2xx bodies are returned like any other. Raises ProviderError only
        when the provider cannot be reached.
        """
        ...


# ── shared helpers ────────────────────────────────────────────────────────────


def parse_body(text: Optional[str]) -> Any:
    """Decode a provider body; anything that is not JSON becomes {}."""
    try:
        return json.loads(text or "")
    except (TypeError, ValueError):
        return {}


def image_reference(image: ImageSource) -> str:
    """Data URL for inline images, the URL itself otherwise."""
    match image:
        case ValidatedImage():
            return image.to_data_url()
        case ImageUrl(url=url):
            return url


def require_inline(image: ImageSource, provider: str) -> ValidatedImage:
    match image:
        case ValidatedImage():
            return image
        case _:
            raise ValidationError(MSG_ERR_URL_UNSUPPORTED % provider)


def log_response(provider: str, elapsed: float, status: int) -> None:
    logger.info(MSG_PROVIDER_DONE, provider, elapsed, status)
