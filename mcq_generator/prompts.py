from typing import Tuple

from mcq_generator.config import VariantConfig
from mcq_generator.models import GenerationRequest


def _detailed_system_prompt(count: int) -> str:
    return f"""
You are an expert MCQ generator AI. You MUST follow these rules strictly:
1) Output EXACTLY a JSON array with exactly {count} objects.
2) Each object must have keys: "question", "options", "answer", "explanation". Keys MUST remain in English.
3) "options" must be an array of 4 strings prefixed as "A) ", "B) ", "C) ", "D) ".
4) "answer" must be a single capital letter: "A", "B", "C", or "D".
5) Never include any text outside the JSON array. Do not include additional commentary.
6) All questions, options, and explanations MUST be written in the language specified by the user prompt.
7) Prefer content from the provided Book/Chapter if supplied by the user.
"""


def _detailed_user_prompt(request: GenerationRequest, count: int) -> str:
    return f"""
Generate {count} high-quality exam-grade MCQs following the exact JSON format specified by the system.
Subject: {request.subject or "Not provided"}
Book: {request.book or "Not provided"}
Chapter: {request.chapter or "Not provided"}
Difficulty: {request.difficulty}
Country: {request.country}
Language: {request.language}
Focus on conceptual understanding, avoid trivial factual recall.
Output all questions, options, and explanations in the requested language: {request.language}.
"""


def _strict_system_prompt(count: int) -> str:
    return f"""
Your ONLY output must be EXACTLY a valid JSON array of {count} objects.
Each object must contain:
{{
  "question": string,
  "options": ["A) ...","B) ...","C) ...","D) ..."],
  "answer": "A"|"B"|"C"|"D",
  "explanation": string
}}
Keys stay in English; all question, option and explanation text must be in the language requested by the user.
NO extra text, NO comments, NO description. ONLY JSON array.
"""


def _strict_user_prompt(request: GenerationRequest, count: int) -> str:
    return f"""
Generate EXACTLY {count} MCQs in {request.language}.
Subject: {request.subject or ""}
Book: {request.book or ""}
Chapter: {request.chapter or ""}
Difficulty: {request.difficulty}
Country: {request.country}

RULES:
→ Output ONLY a JSON array of {count} objects.
→ No explanation outside JSON.
"""


def build_prompts(request: GenerationRequest, variant: VariantConfig) -> Tuple[str, str]:
    """Return the (system, user) prompt pair for one generation request."""
    count = variant.record_count
    if variant.prompt_style == "strict":
        system_prompt = _strict_system_prompt(count)
        user_prompt = _strict_user_prompt(request, count)
    else:
        system_prompt = _detailed_system_prompt(count)
        user_prompt = _detailed_user_prompt(request, count)
    return system_prompt.strip(), user_prompt.strip()
