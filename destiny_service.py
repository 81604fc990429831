"""
人生K线分析客户端

把排好的八字整理成提示词，发给 /api/chat 代理，再把模型回复里的 JSON
解析成 LifeDestinyResult。大运序列本身交给模型推算，这里只负责告诉它方向。
"""
import json
import logging
from typing import Any, Dict, Optional

import requests

from config import DEFAULT_REQUEST_TIMEOUT_SECONDS, get_proxy_base_url
from errors import ProxyRequestError, ResponseFormatError
from prompts import (
    BAZI_SYSTEM_INSTRUCTION,
    DIRECTION_BACKWARD,
    DIRECTION_FORWARD,
    EXAMPLE_BACKWARD,
    EXAMPLE_FORWARD,
    GENDER_LABELS,
    POLARITY_LABELS,
    USER_PROMPT_TEMPLATE,
)
from schemas import Gender, LifeDestinyResult, UserInput

logger = logging.getLogger(__name__)

YANG = "YANG"
YIN = "YIN"

YANG_STEMS = ["甲", "丙", "戊", "庚", "壬"]
YIN_STEMS = ["乙", "丁", "己", "辛", "癸"]

CHAT_ENDPOINT = "/api/chat"
PARSE_ERROR_MESSAGE = "AI 返回的数据格式无法解析，请重试。"


def get_stem_polarity(pillar: Optional[str]) -> str:
    """年柱天干的阴阳；空值或无法识别时按阳处理"""
    if not pillar or not pillar.strip():
        return YANG
    first_char = pillar.strip()[0]
    if first_char in YANG_STEMS:
        return YANG
    if first_char in YIN_STEMS:
        return YIN
    return YANG


def is_forward(gender: Gender, polarity: str) -> bool:
    # 阳男阴女顺行，阴男阳女逆行
    if gender == Gender.MALE:
        return polarity == YANG
    return polarity == YIN


def _age_ranges(start_age: int, first_da_yun: str) -> str:
    lines = []
    if start_age > 1:
        lines.append(f'   - Age 1 到 {start_age - 1}: daYun = "童限"')
    lines.append(f"   - Age {start_age} 到 {start_age + 9}: daYun = [第1步大运: {first_da_yun}]")
    lines.append(f"   - Age {start_age + 10} 到 {start_age + 19}: daYun = [第2步大运]")
    lines.append(f"   - Age {start_age + 20} 到 {start_age + 29}: daYun = [第3步大运]")
    return "\n".join(lines)


def build_user_prompt(user_input: UserInput) -> str:
    polarity = get_stem_polarity(user_input.year_pillar)
    forward = is_forward(user_input.gender, polarity)
    direction = DIRECTION_FORWARD if forward else DIRECTION_BACKWARD

    return USER_PROMPT_TEMPLATE.format(
        gender=GENDER_LABELS[user_input.gender.value],
        name=user_input.name or "未提供",
        birth_year=user_input.birth_year,
        year_pillar=user_input.year_pillar,
        polarity=POLARITY_LABELS[polarity],
        month_pillar=user_input.month_pillar,
        day_pillar=user_input.day_pillar,
        hour_pillar=user_input.hour_pillar,
        start_age=user_input.start_age,
        first_da_yun=user_input.first_da_yun,
        direction=direction,
        direction_example=EXAMPLE_FORWARD if forward else EXAMPLE_BACKWARD,
        age_ranges=_age_ranges(user_input.start_age or 1, user_input.first_da_yun),
    )


def request_analysis(
    prompt: str,
    system_instruction: str = BAZI_SYSTEM_INSTRUCTION,
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> str:
    """POST 到代理，返回模型的原始文本"""
    base_url = base_url or get_proxy_base_url()
    http = session or requests
    payload = {
        "prompt": prompt,
        "systemInstruction": system_instruction,
        "apiKey": api_key,
        "modelName": model_name,
    }

    response = http.post(f"{base_url.rstrip('/')}{CHAT_ENDPOINT}", json=payload, timeout=timeout)
    if not response.ok:
        logger.error(f"Proxy request failed: {response.status_code} - {response.text}")
        raise ProxyRequestError(response.status_code, response.text)

    content = response.json().get("result")
    if not content:
        logger.error("Proxy returned an empty result")
        raise ResponseFormatError("模型未返回任何内容。")
    return content


def _reject_constant(name: str) -> Any:
    # NaN / Infinity 不是标准 JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def extract_json(content: str) -> Dict[str, Any]:
    """取第一个 { 到最后一个 } 之间的内容解析；模型有时会包一层 ```json```"""
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end < start:
        logger.error(f"No JSON object found in response: {content[:200]}")
        raise ResponseFormatError(PARSE_ERROR_MESSAGE)

    try:
        return json.loads(content[start:end + 1], parse_constant=_reject_constant)
    except ValueError as e:
        logger.error(f"JSON Parse Error: {e}; content: {content[:200]}")
        raise ResponseFormatError(PARSE_ERROR_MESSAGE) from e


def generate_life_analysis(
    user_input: UserInput,
    base_url: Optional[str] = None,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> LifeDestinyResult:
    try:
        content = request_analysis(
            build_user_prompt(user_input),
            api_key=user_input.api_key,
            model_name=user_input.model_name,
            base_url=base_url,
            timeout=timeout,
            session=session,
        )
        data = extract_json(content)
        return LifeDestinyResult.from_model_payload(data)
    except Exception as e:
        logger.error(f"API Error: {e}")
        raise
