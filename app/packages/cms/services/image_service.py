"""图片服务：上传时的等比压缩/重编码，以及读取图片像素尺寸。"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.packages.cms.core.exceptions import ValidationError
from app.packages.cms.core.logger import get_logger

logger = get_logger("media")

# 仅这些格式支持重编码，其余图片（gif/svg）原样保存
OPTIMIZABLE_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}


class ImageService:
    DEFAULT_QUALITY = 80

    def can_optimize(self, mime_type: Optional[str]) -> bool:
        return (mime_type or "").lower() in OPTIMIZABLE_FORMATS

    def optimize(
        self,
        data: bytes,
        *,
        mime_type: str,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
        quality: Optional[int] = None,
    ) -> bytes:
        """按最大宽高等比缩放（只缩不放）并按原格式重新编码。"""
        fmt = OPTIMIZABLE_FORMATS.get((mime_type or "").lower())
        if fmt is None:
            raise ValidationError(f"不支持优化的图片类型: {mime_type}")
        quality = int(quality or self.DEFAULT_QUALITY)
        quality = min(max(quality, 1), 100)

        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ValidationError("图片解析失败，无法优化") from exc

        original_size = img.size
        if max_width or max_height:
            target = (int(max_width or img.width), int(max_height or img.height))
            if img.width > target[0] or img.height > target[1]:
                img.thumbnail(target, Image.LANCZOS)

        out = io.BytesIO()
        if fmt == "JPEG":
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            img.save(out, format="JPEG", quality=quality, optimize=True)
        elif fmt == "PNG":
            img.save(out, format="PNG", optimize=True)
        else:
            img.save(out, format="WEBP", quality=quality, method=6)

        result = out.getvalue()
        logger.debug(
            "Optimized image %sx%s -> %sx%s (%s -> %s bytes)",
            original_size[0], original_size[1], img.width, img.height, len(data), len(result),
        )
        return result

    def read_dimensions(self, path: Path) -> Optional[Tuple[int, int]]:
        """读取图片宽高；无法识别（例如 SVG）或像素数超出 Pillow 上限时返回 ``None``。"""
        try:
            with Image.open(path) as img:
                return img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
            return None
