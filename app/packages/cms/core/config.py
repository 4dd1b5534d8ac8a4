"""CMS 配置：环境文件加载、目录与上传限制、账号与日志选项。"""

import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _project_root() -> Path:
    """向上查找包含 ``app`` 包的目录作为项目根目录。"""
    here = Path(__file__).resolve()
    return next((parent for parent in here.parents if (parent / "app").is_dir()), here.parent)


BASE_DIR = _project_root()

DEFAULT_ALLOWED_UPLOAD_TYPES = (
    # 图片
    "image/jpeg,image/png,image/gif,image/webp,image/svg+xml,"
    # 文档
    "application/pdf,application/msword,"
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
    "application/vnd.ms-excel,"
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet,"
    "application/vnd.ms-powerpoint,"
    "application/vnd.openxmlformats-officedocument.presentationml.presentation,"
    "text/plain,text/markdown,"
    # 视频
    "video/mp4,video/webm,video/ogg,"
    # 音频
    "audio/mpeg,audio/wav,audio/ogg,audio/webm"
)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_files() -> list[tuple[Path, bool]]:
    """按加载顺序列出 (环境文件, 是否覆盖已有变量)。

    ``ENV_FILE`` 指定时只加载该文件；否则先加载 ``.env``，再叠加
    ``.env.<ENVIRONMENT>``（DEBUG 打开且未指定 ENVIRONMENT 时视为 development）。
    """
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return [(BASE_DIR / explicit, True)]

    files = [(BASE_DIR / ".env", False)]
    environment = os.getenv("ENVIRONMENT")
    if environment is None and os.getenv("DEBUG", "").strip().lower() in _TRUTHY:
        environment = "development"
    if environment:
        name = environment if environment.startswith(".env") else f".env.{environment}"
        files.append((BASE_DIR / name, True))
    return files


for _path, _override in _env_files():
    if _path.exists():
        load_dotenv(_path, override=_override, encoding="utf-8")


class Settings(BaseSettings):
    """
    封装应用运行所需的所有配置项，每个字段都可以通过环境变量重写。
    内容数据目录、媒体库目录、上传限制与两个内置账号均在此集中声明。
    """

    project_name: str = Field(default="CMS Admin API", alias="PROJECT_NAME")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    debug: bool = Field(default=False, alias="DEBUG")

    data_dir: str = Field(default="data", alias="DATA_DIR")
    media_dir: str = Field(default="public/media", alias="MEDIA_DIR")
    trash_dirname: str = Field(default=".trash", alias="TRASH_DIRNAME")

    max_upload_size_mb: int = Field(default=10, alias="MAX_UPLOAD_SIZE_MB")
    allowed_upload_types_raw: str = Field(default=DEFAULT_ALLOWED_UPLOAD_TYPES, alias="ALLOWED_UPLOAD_TYPES")

    jwt_secret_key: str = Field(default="changeme", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # 内置账号：密码既可以是明文，也可以是 bcrypt 哈希（以 $2 开头）
    admin_email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL")
    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")
    content_manager_email: str = Field(default="editor@example.com", alias="CONTENT_MANAGER_EMAIL")
    content_manager_password: str = Field(default="editor123", alias="CONTENT_MANAGER_PASSWORD")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="log", alias="LOG_DIR")
    log_file_name: str = Field(default="app.log", alias="LOG_FILE_NAME")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_rotate_when: str = Field(default="midnight", alias="LOG_ROTATE_WHEN")
    log_backup_count: int = Field(default=14, alias="LOG_BACKUP_COUNT")
    log_channel_levels_raw: str = Field(default="", alias="LOG_CHANNEL_LEVELS")
    app_port: int = Field(default=8000, alias="APP_PORT")
    timezone: str = Field(default="UTC", alias="TIMEZONE")

    model_config = SettingsConfigDict(extra='ignore')

    def _resolve_path(self, raw: str) -> Path:
        path = Path(raw)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path

    @property
    def data_directory(self) -> Path:
        """返回内容/配置记录所在的数据根目录。"""
        return self._resolve_path(self.data_dir)

    @property
    def media_directory(self) -> Path:
        """返回媒体库根目录。"""
        return self._resolve_path(self.media_dir)

    @property
    def max_upload_bytes(self) -> int:
        return max(self.max_upload_size_mb, 0) * 1024 * 1024

    @property
    def allowed_upload_types(self) -> list[str]:
        raw = (self.allowed_upload_types_raw or "").strip()
        return [item.strip() for item in raw.split(",") if item.strip()]

    @property
    def log_directory(self) -> Path:
        """日志目录；相对路径基于项目根目录解析。"""
        return self._resolve_path(self.log_dir)

    @property
    def log_file_path(self) -> Path:
        """滚动日志的主文件路径。"""
        return self.log_directory / self.log_file_name

    @property
    def log_channel_levels(self) -> dict[str, str]:
        """解析 `store=DEBUG,media=WARNING` 形式的通道级别配置。"""
        levels: dict[str, str] = {}
        for item in (self.log_channel_levels_raw or "").split(","):
            channel, sep, level = item.partition("=")
            if sep and channel.strip() and level.strip():
                levels[channel.strip()] = level.strip().upper()
        return levels

    @property
    def timezone_info(self) -> ZoneInfo:
        """返回当前配置对应的时区信息，无法解析时回退到 UTC。"""
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            return ZoneInfo("UTC")


@lru_cache
def get_settings() -> Settings:
    """进程内共享的配置实例；测试通过环境变量在首次调用前注入。"""
    return Settings()
