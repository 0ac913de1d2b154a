"""AnalysisPipeline: stage ordering, provider selection, fallback analysis."""
import io
import threading
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cropscan.constants import FALLBACK_ANALYSIS
from cropscan.errors import ConfigurationError, ProviderError, ValidationError
from cropscan.models import ImageUrl, RawUpload, ValidatedImage
from cropscan.pipeline import AnalysisPipeline


def make_upload(filename="leaf.png", content_type="image/png", data=b"0123456789"):
    return RawUpload(stream=io.BytesIO(data), content_type=content_type, filename=filename)


def fake_client(response) -> MagicMock:
    client = MagicMock()
    client.analyze = AsyncMock(return_value=response)
    return client


async def test_analyze_upload_normalizes_provider_response(make_config, tmp_path):
    pipeline = AnalysisPipeline(make_config(upload_dir=str(tmp_path)))
    raw = {"content": [{"text": "Healthy crop."}]}
    client = fake_client(raw)

    with patch("cropscan.pipeline.build_vision_client", return_value=client) as build:
        result = await pipeline.analyze_upload(make_upload())

    assert result.analysis == "Healthy crop."
    assert result.raw == raw
    assert build.call_args.args[1] == "claude"
    (image, prompt), _ = client.analyze.call_args
    assert image == ValidatedImage(data=b"0123456789", mime_type="image/png")
    assert prompt is None


async def test_analyze_upload_empty_response_uses_fallback(make_config, tmp_path):
    pipeline = AnalysisPipeline(make_config(upload_dir=str(tmp_path)))

    with patch("cropscan.pipeline.build_vision_client", return_value=fake_client({})):
        result = await pipeline.analyze_upload(make_upload())

    assert result.analysis == FALLBACK_ANALYSIS
    assert result.to_dict() == {"analysis": FALLBACK_ANALYSIS, "raw": {}}


async def test_analyze_upload_runs_intake_off_the_event_loop(make_config, tmp_path, monkeypatch):
    pipeline = AnalysisPipeline(make_config(upload_dir=str(tmp_path)))
    loop_thread = threading.get_ident()
    intake_threads = []

    def recording_intake(upload, upload_dir=None):
        intake_threads.append(threading.get_ident())
        return ValidatedImage(data=b"0123456789", mime_type="image/png")

    monkeypatch.setattr("cropscan.pipeline.intake_upload", recording_intake)

    with patch("cropscan.pipeline.build_vision_client", return_value=fake_client({})):
        await pipeline.analyze_upload(make_upload())

    assert len(intake_threads) == 1
    assert intake_threads[0] != loop_thread


async def test_analyze_upload_rejects_before_provider_is_built(make_config):
    pipeline = AnalysisPipeline(make_config())

    with patch("cropscan.pipeline.build_vision_client") as build:
        with pytest.raises(ValidationError):
            await pipeline.analyze_upload(
                make_upload(filename="leaf.exe", content_type="application/octet-stream")
            )

    build.assert_not_called()


async def test_analyze_upload_missing_key_makes_no_provider_call(make_config, tmp_path):
    pipeline = AnalysisPipeline(make_config(anthropic_api_key=None, upload_dir=str(tmp_path)))

    with patch("cropscan.vision.claude.AsyncAnthropic") as mock_cls:
        with pytest.raises(ConfigurationError, match="CLAUDE_API_KEY"):
            await pipeline.analyze_upload(make_upload())

    mock_cls.assert_not_called()
    assert list(tmp_path.iterdir()) == []


async def test_analyze_upload_provider_failure_leaves_no_temp_file(make_config, tmp_path):
    pipeline = AnalysisPipeline(make_config(upload_dir=str(tmp_path)))
    client = MagicMock()
    client.analyze = AsyncMock(side_effect=ProviderError("Provider request failed.", "timeout"))

    with patch("cropscan.pipeline.build_vision_client", return_value=client):
        with pytest.raises(ProviderError):
            await pipeline.analyze_upload(make_upload())

    assert list(tmp_path.iterdir()) == []


async def test_analyze_url_uses_url_provider(make_config):
    pipeline = AnalysisPipeline(make_config(url_provider="openai-responses"))
    raw = {"output_text": "Nitrogen deficiency."}
    client = fake_client(raw)

    with patch("cropscan.pipeline.build_vision_client", return_value=client) as build:
        result = await pipeline.analyze_url("https://example.com/leaf.jpg")

    assert build.call_args.args[1] == "openai-responses"
    assert client.analyze.call_args.args[0] == ImageUrl(url="https://example.com/leaf.jpg")
    assert result.analysis == "Nitrogen deficiency."


async def test_analyze_url_missing_url(make_config):
    pipeline = AnalysisPipeline(make_config())

    with patch("cropscan.pipeline.build_vision_client") as build:
        with pytest.raises(ValidationError, match="missing url"):
            await pipeline.analyze_url("")

    build.assert_not_called()


async def test_analyze_url_with_real_openai_client(make_config):
    """End to end through the chat client with the SDK stubbed out."""
    pipeline = AnalysisPipeline(make_config())
    sdk = MagicMock()
    response = MagicMock(status_code=200)
    response.text = '{"choices": [{"message": {"content": "Leaf rust."}}]}'
    sdk.chat.completions.with_raw_response.create = AsyncMock(return_value=response)

    with patch("cropscan.vision.openai.AsyncOpenAI", return_value=sdk):
        result = await pipeline.analyze_url("https://example.com/leaf.jpg")

    assert result.analysis == "Leaf rust."
