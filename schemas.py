import math
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from errors import ResponseFormatError

DEFAULT_TEXT = "无"
DEFAULT_SUMMARY = "无摘要"
DEFAULT_SCORE = 5

ANALYSIS_DOMAINS = ("summary", "industry", "wealth", "marriage", "health", "family")


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class UserInput(BaseModel):
    """前端排好的八字与大运参数，构造后不可修改"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    gender: Gender
    name: Optional[str] = Field(None, description="姓名，可不填")
    birth_year: int = Field(..., description="出生年份（阳历）")
    year_pillar: str = Field(..., description="年柱，例如 甲子")
    month_pillar: str
    day_pillar: str
    hour_pillar: str
    start_age: int = Field(..., description="起运年龄（虚岁）")
    first_da_yun: str = Field(..., description="第一步大运干支")
    api_key: Optional[str] = None
    model_name: Optional[str] = None


class Analysis(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    bazi: List[str] = Field(default_factory=list)
    summary: str = DEFAULT_SUMMARY
    summary_score: int = DEFAULT_SCORE
    industry: str = DEFAULT_TEXT
    industry_score: int = DEFAULT_SCORE
    wealth: str = DEFAULT_TEXT
    wealth_score: int = DEFAULT_SCORE
    marriage: str = DEFAULT_TEXT
    marriage_score: int = DEFAULT_SCORE
    health: str = DEFAULT_TEXT
    health_score: int = DEFAULT_SCORE
    family: str = DEFAULT_TEXT
    family_score: int = DEFAULT_SCORE

    @model_validator(mode="before")
    @classmethod
    def drop_unusable_fields(cls, data: Any) -> Any:
        # 模型输出不稳定：缺失、空值或类型不对的字段一律丢弃，走默认值
        if not isinstance(data, dict):
            return {}
        cleaned: Dict[str, Any] = {}
        bazi = data.get("bazi")
        if isinstance(bazi, list) and bazi:
            cleaned["bazi"] = [str(item) for item in bazi]
        for domain in ANALYSIS_DOMAINS:
            text = data.get(domain)
            if isinstance(text, str) and text:
                cleaned[domain] = text
            score = data.get(f"{domain}Score", data.get(f"{domain}_score"))
            # bool 是 int 的子类，要单独排除；inf 来自 1e400 这类超大数字
            if isinstance(score, (int, float)) and not isinstance(score, bool) and math.isfinite(score):
                rounded = int(round(score))
                if rounded:
                    cleaned[f"{domain}_score"] = rounded
        return cleaned


class LifeDestinyResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chart_data: List[Any]
    analysis: Analysis

    @classmethod
    def from_model_payload(cls, data: Any) -> "LifeDestinyResult":
        """把模型返回的 JSON 对象整理成结果；chartPoints 是唯一的硬性要求"""
        chart_points = data.get("chartPoints") if isinstance(data, dict) else None
        if not isinstance(chart_points, list):
            raise ResponseFormatError("模型返回的数据格式不正确（缺失 chartPoints）。")
        return cls(chart_data=chart_points, analysis=Analysis.model_validate(data))
