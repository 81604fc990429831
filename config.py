import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# 加载 .env 文件（本地调试用，线上直接走环境变量）
load_dotenv()

logger = logging.getLogger(__name__)

# ================= 默认配置 =================
DEFAULT_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0
DEFAULT_PROXY_BASE_URL = "http://127.0.0.1:5000"
# ===========================================


@dataclass(frozen=True)
class Settings:
    """服务运行配置，启动时解析一次，之后显式传递"""

    google_api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL_NAME
    gemini_api_base_url: str = DEFAULT_GEMINI_API_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls(
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL_NAME),
            gemini_api_base_url=os.getenv("GEMINI_API_BASE_URL", DEFAULT_GEMINI_API_BASE_URL),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS)),
            host=os.getenv("SERVICE_HOST", "0.0.0.0"),
            port=int(os.getenv("SERVICE_PORT", 5000)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=os.getenv("DEBUG", "False").lower() == "true",
        )
        if not settings.google_api_key:
            logger.warning("GOOGLE_API_KEY 未配置，只有携带 apiKey 的请求才能调用模型")
        return settings


def get_proxy_base_url() -> str:
    """客户端默认请求的代理地址"""
    return os.getenv("PROXY_BASE_URL", DEFAULT_PROXY_BASE_URL)
