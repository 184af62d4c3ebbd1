"""Lint rule engine: rules, runner, dialogue masking and configuration data."""

from __future__ import annotations

from kousei.nlp.tokenizer import TokenizerClient

from .base_rule import LintRule
from .correction_modes import CORRECTION_MODES, CorrectionModeId, get_correction_mode
from .dialogue_mask import DialogueMask, is_in_dialogue, mask_dialogue
from .guidelines import GUIDELINES, GuidelineId, get_guideline
from .presets import (
    LINT_DEFAULT_CONFIGS,
    LINT_PRESETS,
    RULE_GUIDELINE_MAP,
    apply_preset,
    apply_rule_configs,
    load_rule_configs,
)
from .rule_runner import RuleRunner
from .rules import builtin_rules


def create_default_runner(tokenizer: TokenizerClient | None = None) -> RuleRunner:
    """Runner with every built-in rule and the default guideline map."""

    return RuleRunner(tokenizer, rules=builtin_rules(), guideline_map=RULE_GUIDELINE_MAP)


__all__ = [
    "CORRECTION_MODES",
    "CorrectionModeId",
    "DialogueMask",
    "GUIDELINES",
    "GuidelineId",
    "LINT_DEFAULT_CONFIGS",
    "LINT_PRESETS",
    "LintRule",
    "RULE_GUIDELINE_MAP",
    "RuleRunner",
    "apply_preset",
    "apply_rule_configs",
    "builtin_rules",
    "create_default_runner",
    "get_correction_mode",
    "get_guideline",
    "is_in_dialogue",
    "load_rule_configs",
    "mask_dialogue",
]
