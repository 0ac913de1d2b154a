"""AnalysisPipeline — intake → provider → normalization, one request at a time."""
import asyncio
import logging
from typing import Optional

from cropscan.config import Config
from cropscan.intake import intake_upload, intake_url
from cropscan.models import AnalysisResult, ImageSource, RawUpload
from cropscan.vision.factory import build_vision_client
from cropscan.vision.normalize import extract_analysis

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Stateless across requests; holds only the immutable Config."""

    def __init__(self, config: Config) -> None:
        self._config = config

    async def analyze_upload(
        self, upload: Optional[RawUpload], prompt: Optional[str] = None
    ) -> AnalysisResult:
        image = await asyncio.to_thread(intake_upload, upload, self._config.upload_dir)
        return await self._analyze(image, self._config.upload_provider, prompt)

    async def analyze_url(
        self, image_url: object, prompt: Optional[str] = None
    ) -> AnalysisResult:
        image = intake_url(image_url)
        return await self._analyze(image, self._config.url_provider, prompt)

    async def _analyze(
        self, image: ImageSource, provider: str, prompt: Optional[str]
    ) -> AnalysisResult:
        client = build_vision_client(self._config, provider)
        raw = await client.analyze(image, prompt)
        return AnalysisResult(analysis=extract_analysis(raw, provider), raw=raw)
