import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from mcq_generator.clients import CompletionClient, build_client
from mcq_generator.config import Settings
from mcq_generator.exceptions import AuthenticationError, InputValidationError, OutputShapeError
from mcq_generator.models import GenerationRequest, GenerationResult
from mcq_generator.parsing import extract_json_array, normalize_records
from mcq_generator.prompts import build_prompts
from mcq_generator.tokens import build_token_report


logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings, Optional[str]], CompletionClient]


class MCQService:
    def __init__(self, settings: Settings, client_factory: ClientFactory = build_client):
        self.settings = settings
        self.variant = settings.variant
        self.client_factory = client_factory

    def authenticate_caller(self, authorization: Optional[str]) -> None:
        if not self.variant.enforce_caller_auth:
            return
        if not authorization:
            raise AuthenticationError("User token missing")
        parts = authorization.split(" ")
        if len(parts) < 2 or not parts[1]:
            raise AuthenticationError("Invalid user token format")
        allowed = self.settings.allowed_caller_tokens
        if allowed and parts[1] not in allowed:
            raise AuthenticationError("Invalid user token")

    def resolve_credential(self, provider_token: Optional[str]) -> Optional[str]:
        if self.variant.credential_source != "header":
            return None
        if not provider_token:
            raise InputValidationError("Missing OpenAI API token in header 'openai-token'.")
        return provider_token

    def parse_request(self, payload: Any) -> GenerationRequest:
        if payload is None:
            payload = {}
        if isinstance(payload, GenerationRequest):
            return payload
        if not isinstance(payload, dict):
            raise InputValidationError("Request body must be a JSON object.")
        try:
            return GenerationRequest.model_validate(payload)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise InputValidationError(f"Invalid field '{location}': {first['msg']}") from e

    async def generate(self, payload: Any, authorization: Optional[str] = None,
                       provider_token: Optional[str] = None) -> GenerationResult:
        """
        Generate exactly ``record_count`` MCQs for one request.

        Validation runs before the provider is contacted; any failure after
        that is all-or-nothing.
        """
        self.authenticate_caller(authorization)
        credential = self.resolve_credential(provider_token)
        request = self.parse_request(payload)
        if not request.has_topic:
            raise InputValidationError("Provide at least 'subject' or 'book' or 'chapter'.")

        count = self.variant.record_count
        system_prompt, user_prompt = build_prompts(request, self.variant)

        client = self.client_factory(self.settings, credential)
        completion = await client.complete(
            model=self.settings.model_name,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=self.variant.temperature,
            max_output_tokens=self.variant.max_output_tokens,
        )
        text = completion.text

        token_usage = None
        if self.variant.report_usage:
            token_usage = build_token_report(
                completion.response, f"{system_prompt}\n{user_prompt}", text, self.settings.model_name
            )

        parsed = extract_json_array(text)
        if parsed is None or len(parsed) != count:
            parsed_length = len(parsed) if parsed is not None else 0
            logger.warning("Model output rejected: expected %d items, parsed %d", count, parsed_length)
            raise OutputShapeError(
                f"Failed to parse model output into the expected JSON array of {count} items.",
                preview=text[:self.variant.preview_chars],
                parsed_length=parsed_length,
                token_usage=token_usage.as_dict() if token_usage else None,
            )

        return GenerationResult(records=normalize_records(parsed), token_usage=token_usage)
