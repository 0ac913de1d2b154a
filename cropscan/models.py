"""Request-scoped value types passed between the pipeline stages."""
import base64
import binascii
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional, Union


@dataclass(frozen=True)
class RawUpload:
    stream: BinaryIO
    content_type: Optional[str]
    filename: Optional[str] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class ValidatedImage:
    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        return base64.standard_b64encode(self.data).decode()

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass(frozen=True)
class ImageUrl:
    url: str


ImageSource = Union[ValidatedImage, ImageUrl]


@dataclass(frozen=True)
class AnalysisResult:
    analysis: str
    raw: Any

    def to_dict(self) -> dict[str, Any]:
        return {"analysis": self.analysis, "raw": self.raw}


def decode_data_url(data_url: str) -> ValidatedImage:
    """Inverse of ValidatedImage.to_data_url. Raises ValueError on malformed input."""
    header, sep, payload = data_url.partition(",")
    match (header.startswith("data:"), header.endswith(";base64"), sep):
        case (True, True, ","):
            pass
        case _:
            raise ValueError("not a base64 data URL")
    mime_type = header[len("data:"):-len(";base64")]
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid base64 payload") from exc
    return ValidatedImage(data=data, mime_type=mime_type)
