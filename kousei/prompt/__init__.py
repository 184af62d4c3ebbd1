"""Prompt templates for LLM-assisted validation."""

from .render_prompt import PROMPTS_DIR, render_prompts, render_template

__all__ = ["PROMPTS_DIR", "render_prompts", "render_template"]
