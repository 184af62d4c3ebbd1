"""Render prompt templates in kousei/prompt/promptFiles using pystache.

Templates pull in shared partials (the validator judgment rules and the
expected output formats). Partials may be wrapped in a code fence so they
render nicely as standalone markdown; the fence is stripped before use.

Usage:
    python -m kousei.prompt.render_prompt [template_filename] [context.json]
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pystache

PROMPTS_DIR = Path(__file__).parent / "promptFiles"

_DEFAULT_PARTIALS = ["validator_judgment_rules"]

# Map of template to required partials
TEMPLATE_PARTIALS: dict[str, list[str]] = {
    "system_validator.md": ["validator_judgment_rules"],
    "candidate_validator.md": ["validator_judgment_rules", "candidate_output_format"],
    "batch_validator.md": ["validator_judgment_rules", "batch_output_format"],
}


def _read_prompt(name: str) -> str:
    p = PROMPTS_DIR / name
    if not p.exists():
        raise FileNotFoundError(f"Prompt file not found: {p}")
    return p.read_text(encoding="utf-8")


def _strip_code_fences(s: str) -> str:
    """Strip a single leading and trailing code-fence line if present."""
    lines = s.splitlines()
    if not lines:
        return s
    if lines[0].lstrip().startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].lstrip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _load_partials(template_names: list[str]) -> dict[str, str]:
    names: list[str] = []
    for template_name in template_names:
        for partial_name in TEMPLATE_PARTIALS.get(template_name, _DEFAULT_PARTIALS):
            if partial_name not in names:
                names.append(partial_name)
    return {name: _strip_code_fences(_read_prompt(f"{name}.md")) for name in names}


def render_template(template_name: str, context: dict | None = None) -> str:
    """Render one template with its partials and ``context``."""

    template = _read_prompt(template_name)
    renderer = pystache.Renderer(partials=_load_partials([template_name]))
    return renderer.render(template, context or {}).strip()


def render_prompts(
    system_template: str = "system_validator.md",
    user_template: str = "candidate_validator.md",
    context: dict | None = None,
) -> tuple[str, str]:
    """Render a system and user prompt pair from two separate templates.

    Returns:
        (system_prompt, user_prompt)
    """

    renderer = pystache.Renderer(partials=_load_partials([system_template, user_template]))
    rendered_system = renderer.render(_read_prompt(system_template), context or {})
    rendered_user = renderer.render(_read_prompt(user_template), context or {})
    return rendered_system.strip(), rendered_user.strip()


def _load_context(path: str) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


if __name__ == "__main__":
    tpl = sys.argv[1] if len(sys.argv) > 1 else "system_validator.md"
    ctx = None
    if len(sys.argv) > 2:
        ctx = _load_context(sys.argv[2])
    print(render_template(tpl, ctx))
