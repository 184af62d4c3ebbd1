"""Rule defaults, one-shot presets and the rule → guideline attribution map.

Persisted user settings are a JSON object keyed by rule id, for example::

    {"sentence-length": {"enabled": false},
     "conjugation-errors": {"severity": "error", "skipDialogue": true}}

:func:`load_rule_configs` reads such a file and :func:`apply_rule_configs`
feeds it into a runner through ``set_config``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kousei.models import LintRuleConfig, Severity

from .correction_modes import CorrectionModeId
from .guidelines import GuidelineId

if TYPE_CHECKING:
    from .rule_runner import RuleRunner

LOGGER = logging.getLogger(__name__)


def _config(
    severity: Severity,
    *,
    enabled: bool = True,
    skip_dialogue: bool = False,
    skip_llm_validation: bool = False,
    **options: Any,
) -> LintRuleConfig:
    return LintRuleConfig(
        enabled=enabled,
        severity=severity,
        skip_dialogue=skip_dialogue,
        skip_llm_validation=skip_llm_validation,
        options=options,
    )


LINT_DEFAULT_CONFIGS: dict[str, LintRuleConfig] = {
    "redundant-expression": _config(
        Severity.WARNING, skip_dialogue=True, skip_llm_validation=True
    ),
    "conjugation-errors": _config(Severity.WARNING, skip_dialogue=True),
    "dialogue-punctuation": _config(Severity.WARNING, skip_llm_validation=True),
    "sentence-length": _config(Severity.INFO, skip_dialogue=True, max_length=100),
    "notation-consistency": _config(Severity.WARNING, skip_dialogue=True),
    "counter-word-mismatch": _config(Severity.WARNING),
    "word-repetition": _config(
        Severity.INFO, skip_dialogue=True, window_size=5, threshold=3
    ),
}


class LintPreset(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name_ja: str
    configs: dict[str, LintRuleConfig]


def _derive(overrides: Mapping[str, Mapping[str, Any]]) -> dict[str, LintRuleConfig]:
    return {
        rule_id: config.merge(overrides.get(rule_id))
        for rule_id, config in LINT_DEFAULT_CONFIGS.items()
    }


LINT_PRESETS: dict[str, LintPreset] = {
    "relaxed": LintPreset(
        name_ja="寛容モード",
        configs=_derive(
            {
                "redundant-expression": {"severity": "info"},
                "sentence-length": {"enabled": False},
                "notation-consistency": {"enabled": False, "severity": "info"},
                "counter-word-mismatch": {"enabled": False, "severity": "info"},
                "word-repetition": {"enabled": False},
            }
        ),
    ),
    "standard": LintPreset(name_ja="標準モード", configs=dict(LINT_DEFAULT_CONFIGS)),
    "strict": LintPreset(
        name_ja="厳格モード",
        configs=_derive(
            {
                "redundant-expression": {"severity": "error"},
                "conjugation-errors": {"severity": "error", "skipDialogue": False},
                "dialogue-punctuation": {"severity": "error"},
                "sentence-length": {"severity": "warning", "skipDialogue": False},
                "notation-consistency": {"severity": "error", "skipDialogue": False},
                "counter-word-mismatch": {"severity": "error"},
                "word-repetition": {"severity": "warning", "skipDialogue": False},
            }
        ),
    ),
    "novel": LintPreset(
        name_ja="小説モード",
        configs=_derive({"dialogue-punctuation": {"severity": "warning"}}),
    ),
    "official": LintPreset(
        name_ja="公用文モード",
        configs=_derive(
            {
                "conjugation-errors": {"severity": "error"},
                "dialogue-punctuation": {"enabled": False},
                "notation-consistency": {"severity": "error"},
                "counter-word-mismatch": {"severity": "error"},
                "sentence-length": {"severity": "warning"},
            }
        ),
    ),
}

_PRESET_FOR_MODE = {
    CorrectionModeId.NOVEL: "novel",
    CorrectionModeId.OFFICIAL: "official",
    CorrectionModeId.BLOG: "standard",
    CorrectionModeId.ACADEMIC: "strict",
    CorrectionModeId.SNS: "relaxed",
}


def get_preset(name: str) -> LintPreset:
    try:
        return LINT_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Expected one of: {', '.join(LINT_PRESETS)}"
        ) from None


def get_preset_for_mode(mode: str | CorrectionModeId) -> LintPreset:
    return LINT_PRESETS[_PRESET_FOR_MODE[CorrectionModeId(mode)]]


# Rules absent from this map do not depend on any guideline and always run.
RULE_GUIDELINE_MAP: dict[str, frozenset[str]] = {
    "notation-consistency": frozenset(
        {
            GuidelineId.OKURIGANA_1973.value,
            GuidelineId.GAIRAI_1991.value,
            GuidelineId.KOYO_BUN_2022.value,
            GuidelineId.KISHA_HANDBOOK_14.value,
            GuidelineId.JTF_STYLE_3.value,
        }
    ),
    "counter-word-mismatch": frozenset(
        {GuidelineId.KOYO_BUN_2022.value, GuidelineId.KISHA_HANDBOOK_14.value}
    ),
    "conjugation-errors": frozenset(
        {
            GuidelineId.KOYO_BUN_2022.value,
            GuidelineId.KISHA_HANDBOOK_14.value,
            GuidelineId.JTF_STYLE_3.value,
            GuidelineId.EDITORS_RULEBOOK.value,
            GuidelineId.NOVEL_MANUSCRIPT.value,
        }
    ),
    "redundant-expression": frozenset(
        {
            GuidelineId.KISHA_HANDBOOK_14.value,
            GuidelineId.JTCA_STYLE_3.value,
            GuidelineId.EDITORS_RULEBOOK.value,
            GuidelineId.NOVEL_MANUSCRIPT.value,
            GuidelineId.KOYO_BUN_2022.value,
        }
    ),
    "dialogue-punctuation": frozenset(
        {
            GuidelineId.JIS_X_4051.value,
            GuidelineId.NOVEL_MANUSCRIPT.value,
            GuidelineId.EDITORS_RULEBOOK.value,
        }
    ),
    "sentence-length": frozenset(
        {GuidelineId.KOYO_BUN_2022.value, GuidelineId.JTCA_STYLE_3.value}
    ),
}


class PersistedRuleConfig(BaseModel):
    """Partial rule config as stored by the host application."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    enabled: bool | None = None
    severity: Severity | None = None
    skip_dialogue: bool | None = Field(default=None, alias="skipDialogue")
    skip_llm_validation: bool | None = Field(default=None, alias="skipLlmValidation")
    options: dict[str, Any] | None = None


def parse_rule_configs(raw: object) -> dict[str, dict[str, Any]]:
    """Validate a persisted mapping and return the partial configs it sets.

    Raises:
        ValueError: ``raw`` is not an object or an entry is malformed.
    """

    if not isinstance(raw, dict):
        raise ValueError("Rule configuration must be a JSON object keyed by rule id")
    result: dict[str, dict[str, Any]] = {}
    for rule_id, entry in raw.items():
        try:
            parsed = PersistedRuleConfig.model_validate(entry)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration for rule '{rule_id}': {exc}") from exc
        result[str(rule_id)] = parsed.model_dump(exclude_unset=True, exclude_none=True)
    return result


def load_rule_configs(path: str | Path) -> dict[str, dict[str, Any]]:
    text = Path(path).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Rule configuration file {path} is not valid JSON: {exc}") from exc
    return parse_rule_configs(raw)


def apply_rule_configs(
    runner: "RuleRunner",
    configs: Mapping[str, Mapping[str, Any] | LintRuleConfig],
) -> None:
    for rule_id, partial in configs.items():
        runner.set_config(rule_id, partial)
    LOGGER.debug("Applied configuration for %d rule(s)", len(configs))


def apply_preset(runner: "RuleRunner", name: str) -> None:
    apply_rule_configs(runner, get_preset(name).configs)
