"""
Cloudinary 图片上传与地址优化
"""
from __future__ import annotations

import base64
import os
import time
from dataclasses import dataclass

import requests
from cloudinary.utils import api_sign_request

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB
UPLOAD_TIMEOUT = 30


class UploadValidationError(ValueError):
    """文件类型/大小不合规，对应 400"""


class UploadError(RuntimeError):
    """图床请求失败，对应 500"""


@dataclass(frozen=True)
class CloudinaryConfig:
    cloud_name: str
    upload_preset: str
    folder: str
    api_key: str = ""
    api_secret: str = ""

    @property
    def signed(self) -> bool:
        return bool(self.api_key and self.api_secret)

    @property
    def upload_url(self) -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"


def load_cloudinary_config() -> CloudinaryConfig:
    cloud_name = (
        os.getenv("CLOUDINARY_CLOUD_NAME")
        or os.getenv("NEXT_PUBLIC_CLOUDINARY_CLOUD_NAME")
        or ""
    ).strip()
    if not cloud_name:
        raise UploadError("Missing Cloudinary configuration: CLOUDINARY_CLOUD_NAME")
    return CloudinaryConfig(
        cloud_name=cloud_name,
        upload_preset=(os.getenv("CLOUDINARY_UPLOAD_PRESET") or "upload").strip(),
        folder=(os.getenv("CLOUDINARY_FOLDER") or "gsccapital").strip(),
        api_key=(os.getenv("CLOUDINARY_API_KEY") or "").strip(),
        api_secret=(os.getenv("CLOUDINARY_API_SECRET") or "").strip(),
    )


def validate_image(content_type: str | None, size: int) -> None:
    if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise UploadValidationError("Invalid file type. Only images are allowed.")
    if size > MAX_IMAGE_SIZE:
        raise UploadValidationError("File size exceeds 5MB limit")


def to_data_uri(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{content_type};base64,{encoded}"


def build_upload_payload(data_uri: str, config: CloudinaryConfig) -> dict:
    params = {"upload_preset": config.upload_preset, "folder": config.folder}
    if config.signed:
        params["timestamp"] = str(int(time.time()))
        params["signature"] = api_sign_request(params, config.api_secret)
        params["api_key"] = config.api_key
    # 未配置密钥时走 unsigned preset 上传
    params["file"] = data_uri
    return params


def upload_image(content: bytes, content_type: str, config: CloudinaryConfig | None = None) -> str:
    """上传到 Cloudinary，返回 secure_url"""
    validate_image(content_type, len(content))
    config = config or load_cloudinary_config()
    payload = build_upload_payload(to_data_uri(content, content_type), config)
    try:
        resp = requests.post(config.upload_url, data=payload, timeout=UPLOAD_TIMEOUT)
        resp.raise_for_status()
        body = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise UploadError(f"Cloudinary upload failed: {e}") from e

    secure_url = body.get("secure_url") if isinstance(body, dict) else None
    if not secure_url:
        raise UploadError("Cloudinary response did not contain secure_url")
    return secure_url


# ===== 展示用地址优化 =====

def optimize_image_url(
    image_url: str | None,
    width: int | None = None,
    height: int | None = None,
    quality: str | int = "auto",
    fmt: str = "auto",
    crop: str | None = None,
    dpr: str | int = "auto",
) -> str:
    """
    在 Cloudinary 地址的 /upload/ 之后插入变换参数。
    非 Cloudinary 地址原样返回。
    """
    if not image_url:
        return ""
    if "res.cloudinary.com" not in image_url:
        return image_url

    parts = image_url.split("/upload/")
    if len(parts) != 2:
        return image_url

    transformations = [f"q_{quality}", f"f_{fmt}"]
    if width:
        transformations.append(f"w_{width}")
    if height:
        transformations.append(f"h_{height}")
    if crop:
        transformations.append(f"c_{crop}")
    elif width or height:
        transformations.append("c_fill")
    transformations.append(f"dpr_{dpr}")

    return f"{parts[0]}/upload/{','.join(transformations)}/{parts[1]}"


# 尺寸按 2 倍图准备
def optimize_company_image(image_url: str | None) -> str:
    return optimize_image_url(image_url, width=600, height=400, crop="fill")


def optimize_statistic_image(image_url: str | None) -> str:
    return optimize_image_url(image_url, width=96, height=96, crop="fill")


def optimize_service_image(image_url: str | None) -> str:
    return optimize_image_url(image_url, width=80, height=80, crop="fill")


def optimize_preview_image(image_url: str | None) -> str:
    return optimize_image_url(image_url, width=256, height=256, crop="fill")
