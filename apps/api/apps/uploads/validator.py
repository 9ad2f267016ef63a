"""
Upload gate: size and MIME type checks before bytes reach storage.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from django.conf import settings

from apps.core.exceptions import PayloadTooLargeError, ValidationError

INVALID_TYPE_MESSAGE = 'Somente arquivos de imagem são permitidos (JPEG, PNG, GIF, WEBP)'


@dataclass(frozen=True)
class UploadConfig:
    max_file_size: int
    allowed_mime_types: Tuple[str, ...]


def get_upload_config(env: Optional[str] = None) -> UploadConfig:
    """Limits for `env` (default settings.APP_ENV); unknown envs use development."""
    env = env or settings.APP_ENV
    limits = settings.UPLOAD_LIMITS.get(env) or settings.UPLOAD_LIMITS['development']
    return UploadConfig(
        max_file_size=int(limits['max_file_size']),
        allowed_mime_types=tuple(limits['allowed_mime_types']),
    )


def _round_half_up(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_file_size(size: int) -> str:
    """Whole KB below 1024 KB, otherwise MB with one decimal ("2KB", "1.5MB")."""
    kb = Decimal(size) / 1024
    if kb < 1024:
        return f"{_round_half_up(kb, 0)}KB"
    return f"{_round_half_up(kb / 1024, 1)}MB"


def file_too_large_message(size: int, config: UploadConfig) -> str:
    return (
        f"Arquivo deve ter menos de {format_file_size(config.max_file_size)}. "
        f"Tamanho atual: {format_file_size(size)}"
    )


def is_mime_type_allowed(content_type: str, config: UploadConfig) -> bool:
    return content_type in config.allowed_mime_types


def validate_upload(size: int, content_type: str, config: Optional[UploadConfig] = None) -> None:
    """
    Reject files whose size is >= the configured maximum or whose declared
    MIME type is outside the allow-list.

    Raises:
        PayloadTooLargeError: size >= max_file_size
        ValidationError: MIME type not allowed
    """
    config = config or get_upload_config()

    if size >= config.max_file_size:
        raise PayloadTooLargeError(file_too_large_message(size, config))

    if not is_mime_type_allowed(content_type, config):
        raise ValidationError(INVALID_TYPE_MESSAGE)
