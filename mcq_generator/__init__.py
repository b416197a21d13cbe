"""MCQ Generator API: LLM-backed multiple choice question generation."""

__version__ = "1.0.0"
