from typing import Optional


class LifeDestinyError(Exception):
    """所有业务异常的基类"""


class ConfigurationError(LifeDestinyError):
    """没有可用的 API Key 等运维配置问题"""


class UpstreamError(LifeDestinyError):
    """调用 Gemini 失败"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProxyRequestError(LifeDestinyError):
    """/api/chat 返回了非 2xx 状态"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"请求失败: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class ResponseFormatError(LifeDestinyError):
    """模型返回的内容无法解析成预期的结构"""
