from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import Any, Dict, List, Optional


DEFAULT_DIFFICULTY = "Medium"
DEFAULT_COUNTRY = "International"
DEFAULT_LANGUAGE = "English"


class GenerationRequest(BaseModel):
    subject: Optional[str] = None
    book: Optional[str] = None
    chapter: Optional[str] = None
    difficulty: str = DEFAULT_DIFFICULTY
    country: str = DEFAULT_COUNTRY
    language: str = DEFAULT_LANGUAGE

    @field_validator("subject", "book", "chapter", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("difficulty", "country", "language", mode="before")
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @property
    def has_topic(self) -> bool:
        return bool(self.subject or self.book or self.chapter)


class MCQRecord(BaseModel):
    question: str = ""
    options: List[str] = Field(default_factory=list)
    answer: str = ""
    explanation: str = ""


class TokenUsageReport(BaseModel):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    raw_usage: Optional[Dict[str, Any]] = None
    note: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data = self.model_dump(include={"prompt_tokens", "completion_tokens", "total_tokens"})
        if self.raw_usage is not None:
            data["raw_usage"] = self.raw_usage
        if self.note is not None:
            data["note"] = self.note
        return data


class GenerationResult(BaseModel):
    records: List[MCQRecord]
    token_usage: Optional[TokenUsageReport] = None
