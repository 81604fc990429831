import logging
from typing import Optional

import requests

from config import DEFAULT_GEMINI_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS
from errors import UpstreamError

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def _error_message(response: requests.Response) -> Optional[str]:
    # Google 的错误体: {"error": {"code": 400, "message": "...", "status": "..."}}
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message")
    return None


def generate_content(
    prompt: str,
    api_key: str,
    model_name: str,
    system_instruction: Optional[str] = None,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    base_url: str = DEFAULT_GEMINI_API_BASE_URL,
) -> str:
    """调用 Gemini generateContent，返回第一个候选结果的原始文本"""
    url = f"{base_url.rstrip('/')}/models/{model_name}:generateContent"
    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }

    payload = {
        "contents": [
            {"role": "user", "parts": [{"text": prompt}]}
        ],
        "generationConfig": {"responseMimeType": JSON_MIME_TYPE},
    }
    if system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Gemini API Error: {e}")
        raise UpstreamError(str(e)) from e

    if not response.ok:
        message = _error_message(response) or f"{response.status_code} {response.reason}"
        logger.error(f"Gemini API Error ({response.status_code}): {message}")
        raise UpstreamError(message, status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"Gemini API returned non-JSON body: {response.text[:200]}")
        raise UpstreamError("Gemini response is not valid JSON") from e

    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback", {})
        logger.error(f"Gemini returned no candidates: {feedback}")
        raise UpstreamError(f"No candidates returned (blockReason: {feedback.get('blockReason', 'unknown')})")

    parts = candidates[0].get("content", {}).get("parts", [])
    text = "".join(part.get("text", "") for part in parts)
    if not text:
        logger.error(f"Gemini candidate has no text, finishReason={candidates[0].get('finishReason')}")
        raise UpstreamError("Empty response from model")
    return text
