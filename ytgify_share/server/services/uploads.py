"""
Multipart GIF upload parsing.

Accepts the field spellings sent by the browser extension (``title``),
Rails-style form builders (``gif[title]``), repeated tag fields
(``hashtag_names`` / ``hashtag_names[]``) and comma separated ``tags``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile

from ytgify_share.core.errors import UploadError, ValidationFailedError
from ytgify_share.core.gif_metadata import is_gif_signature
from ytgify_share.core.models.io.gifs import GifUploadForm
from ytgify_share.server.core.config import settings
from ytgify_share.server.services.hashtags import split_tags

GIF_CONTENT_TYPES = ("image/gif",)

# form field -> GifUploadForm field
FIELD_ALIASES = {
    "title": "title",
    "description": "description",
    "privacy": "privacy",
    "youtube_video_url": "youtube_video_url",
    "youtube_video_title": "youtube_video_title",
    "youtube_channel_name": "youtube_channel_name",
    "youtube_timestamp_start": "youtube_timestamp_start",
    "youtube_timestamp_end": "youtube_timestamp_end",
    "duration": "duration",
    "fps": "fps",
    "width": "resolution_width",
    "height": "resolution_height",
    "resolution_width": "resolution_width",
    "resolution_height": "resolution_height",
    "has_text_overlay": "has_text_overlay",
}

FORM_PREFIXES = ("gif", "remix")


@dataclass
class ParsedUpload:
    form: GifUploadForm
    file: Optional[UploadFile]
    composite_file: Optional[UploadFile]


def _candidates(name: str) -> List[str]:
    return [name] + [f"{prefix}[{name}]" for prefix in FORM_PREFIXES]


def _first(form: FormData, name: str) -> Any:
    for key in _candidates(name):
        value = form.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(form: FormData, name: str) -> Optional[str]:
    value = _first(form, name)
    return value if isinstance(value, str) else None


def _file(form: FormData, name: str) -> Optional[UploadFile]:
    value = _first(form, name)
    if isinstance(value, UploadFile) and value.filename:
        return value
    return None


def _tag_values(form: FormData) -> List[str]:
    names: List[str] = []
    for base in _candidates("hashtag_names"):
        for key in (base, f"{base}[]"):
            names.extend(v for v in form.getlist(key) if isinstance(v, str))
    expanded: List[str] = []
    for name in names:
        expanded.extend(split_tags(name))
    tags = _text(form, "tags")
    expanded.extend(split_tags(tags))
    return expanded


def _overlay(form: FormData) -> Optional[Dict[str, Any]]:
    raw = _text(form, "overlay") or _text(form, "text_overlay_data")
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ValidationFailedError("Invalid overlay data", details=[f"overlay: {e}"]) from e
    if not isinstance(data, dict):
        raise ValidationFailedError("Invalid overlay data", details=["overlay: must be a JSON object"])
    return data


def parse_upload_form(form: FormData) -> ParsedUpload:
    """
    Extract files and metadata from a multipart GIF upload.

    Raises:
        ValidationFailedError: Metadata fails validation or the overlay is not JSON
    """
    raw: Dict[str, Any] = {}
    for field_name, target in FIELD_ALIASES.items():
        value = _text(form, field_name)
        if value is not None and target not in raw:
            raw[target] = value
    raw["hashtag_names"] = _tag_values(form)
    overlay = _overlay(form)
    if overlay is not None:
        raw["text_overlay_data"] = overlay

    try:
        metadata = GifUploadForm.model_validate(raw)
    except ValidationError as e:
        details = [f"{'.'.join(str(p) for p in err['loc']) or 'gif'}: {err['msg']}" for err in e.errors()]
        raise ValidationFailedError("GIF creation failed", details=details) from e

    return ParsedUpload(form=metadata, file=_file(form, "file"), composite_file=_file(form, "composite_file"))


async def read_gif_file(upload: UploadFile, field: str = "file") -> bytes:
    """
    Read an uploaded file and check that it is a GIF within the size limit.

    Raises:
        UploadError: Wrong type, bad signature, empty or too large
    """
    max_bytes = settings.uploads.max_upload_bytes
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type and content_type not in GIF_CONTENT_TYPES:
        raise UploadError(f"{field} must be a GIF image (got {content_type})")

    data = await upload.read(max_bytes + 1)
    if not data:
        raise UploadError(f"{field} is empty")
    if len(data) > max_bytes:
        raise UploadError(f"{field} is too large (maximum is {max_bytes // (1024 * 1024)}MB)")
    if not is_gif_signature(data):
        raise UploadError(f"{field} is not a valid GIF file")
    return data
