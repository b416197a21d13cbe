"""Service configuration loaded from environment variables."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, PrivateAttr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROVIDER_DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "groq": "llama-3.3-70b-versatile",
}


class VariantConfig(BaseModel):
    """Per-deployment knobs for the single /generate handler."""

    record_count: Literal[5, 10] = 10
    max_output_tokens: int = Field(3000, gt=0)
    credential_source: Literal["header", "shared"] = "shared"
    enforce_caller_auth: bool = False
    report_usage: bool = False
    prompt_style: Literal["detailed", "strict"] = "detailed"
    temperature: float = 0.2
    preview_chars: int = 1000


VARIANTS: Dict[str, VariantConfig] = {
    "shared": VariantConfig(),
    "usage": VariantConfig(
        record_count=5,
        max_output_tokens=1500,
        credential_source="header",
        report_usage=True,
        prompt_style="strict",
        temperature=0.0,
        preview_chars=800,
    ),
    "authenticated": VariantConfig(
        record_count=5,
        max_output_tokens=1500,
        credential_source="header",
        enforce_caller_auth=True,
        report_usage=True,
        prompt_style="strict",
        temperature=0.0,
        preview_chars=800,
    ),
}


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    ``mcq_variant`` picks a preset from ``VARIANTS``; ``record_count``,
    ``max_tokens``, ``credential_source`` and ``enforce_caller_auth`` override
    single fields of that preset.
    """

    model_config = SettingsConfigDict(env_ignore_empty=True, extra="ignore")

    mcq_variant: Literal["shared", "usage", "authenticated"] = "shared"
    llm_provider: Literal["openai", "groq"] = "openai"
    model: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None

    # Variant overrides
    record_count: Optional[int] = None
    max_tokens: Optional[int] = None
    credential_source: Optional[str] = None
    enforce_caller_auth: Optional[bool] = None

    caller_tokens: str = ""
    request_timeout: float = Field(60.0, gt=0)
    cors_origins: str = "*"
    log_level: str = "INFO"
    port: int = 5000

    _variant: VariantConfig = PrivateAttr()

    @model_validator(mode="after")
    def _resolve_variant(self) -> "Settings":
        overrides = {
            "record_count": self.record_count,
            "max_output_tokens": self.max_tokens,
            "credential_source": self.credential_source,
            "enforce_caller_auth": self.enforce_caller_auth,
        }
        preset = VARIANTS[self.mcq_variant].model_dump()
        preset.update({key: value for key, value in overrides.items() if value is not None})
        self._variant = VariantConfig.model_validate(preset)
        return self

    @property
    def variant(self) -> VariantConfig:
        return self._variant

    @property
    def provider(self) -> str:
        return self.llm_provider

    @property
    def model_name(self) -> str:
        return self.model or PROVIDER_DEFAULT_MODELS[self.llm_provider]

    @property
    def api_key(self) -> Optional[str]:
        if self.llm_provider == "groq":
            return self.groq_api_key
        return self.openai_api_key

    @property
    def allowed_caller_tokens(self) -> List[str]:
        return _split_csv(self.caller_tokens)

    @property
    def allowed_origins(self) -> List[str]:
        return _split_csv(self.cors_origins) or ["*"]
