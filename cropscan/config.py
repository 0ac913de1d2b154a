from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from cropscan.constants import (
    CLAUDE_VISION_MODEL,
    GEMINI_VISION_MODEL,
    OPENAI_VISION_MODEL,
    PROVIDER_CLAUDE,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI_CHAT,
    PROVIDERS,
    URL_CAPABLE_PROVIDERS,
)


@dataclass(frozen=True)
class Config:
    log_level: str
    host: str
    port: int
    upload_provider: str
    url_provider: str
    openai_api_key: Optional[str]
    openai_model: str
    anthropic_api_key: Optional[str]
    claude_model: str
    gemini_api_key: Optional[str]
    gemini_api_url: Optional[str]
    gemini_model: str
    upload_dir: Optional[str] = None
    service_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        log_level = os.getenv("LOG_LEVEL", "INFO")
        host = os.getenv("HOST", "0.0.0.0")
        port = os.getenv("PORT", "8000")
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        anthropic_api_key = (
            os.getenv("CLAUDE_API_KEY") or os.getenv("ANTHROPIC_API_KEY") or None
        )
        gemini_api_key = os.getenv("GEMINI_API_KEY") or None
        gemini_api_url = os.getenv("GEMINI_API_URL") or None

        # Gemini wins only when a custom endpoint is fully configured.
        default_upload = (
            PROVIDER_GEMINI if gemini_api_key and gemini_api_url else PROVIDER_CLAUDE
        )
        upload_provider = os.getenv("UPLOAD_PROVIDER") or default_upload
        url_provider = os.getenv("URL_PROVIDER") or PROVIDER_OPENAI_CHAT

        return cls._validate(
            log_level=log_level,
            host=host,
            port=port,
            upload_provider=upload_provider.strip().lower(),
            url_provider=url_provider.strip().lower(),
            openai_api_key=openai_api_key,
            openai_model=os.getenv("OPENAI_MODEL") or OPENAI_VISION_MODEL,
            anthropic_api_key=anthropic_api_key,
            claude_model=os.getenv("CLAUDE_MODEL") or CLAUDE_VISION_MODEL,
            gemini_api_key=gemini_api_key,
            gemini_api_url=gemini_api_url,
            gemini_model=os.getenv("GEMINI_MODEL") or GEMINI_VISION_MODEL,
            upload_dir=os.getenv("UPLOAD_DIR") or None,
            service_api_key=os.getenv("SERVICE_API_KEY") or None,
        )

    @staticmethod
    def _validate(
        log_level: str,
        host: str,
        port: str,
        upload_provider: str,
        url_provider: str,
        openai_api_key: Optional[str],
        openai_model: str,
        anthropic_api_key: Optional[str],
        claude_model: str,
        gemini_api_key: Optional[str],
        gemini_api_url: Optional[str],
        gemini_model: str,
        upload_dir: Optional[str],
        service_api_key: Optional[str],
    ) -> "Config":
        match port.strip():
            case p if p.isdigit():
                port_number = int(p)
            case _:
                raise ValueError(f"PORT must be an integer, got {port!r}")

        if upload_provider not in PROVIDERS:
            raise ValueError(
                f"UPLOAD_PROVIDER must be one of {', '.join(PROVIDERS)}, got {upload_provider!r}"
            )

        if url_provider not in URL_CAPABLE_PROVIDERS:
            raise ValueError(
                f"URL_PROVIDER must be one of {', '.join(URL_CAPABLE_PROVIDERS)}, got {url_provider!r}"
            )

        return Config(
            log_level=log_level,
            host=host,
            port=port_number,
            upload_provider=upload_provider,
            url_provider=url_provider,
            openai_api_key=openai_api_key,
            openai_model=openai_model,
            anthropic_api_key=anthropic_api_key,
            claude_model=claude_model,
            gemini_api_key=gemini_api_key,
            gemini_api_url=gemini_api_url,
            gemini_model=gemini_model,
            upload_dir=upload_dir,
            service_api_key=service_api_key,
        )
