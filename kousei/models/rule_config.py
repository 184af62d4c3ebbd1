"""Per-rule runtime configuration."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .enums import Severity


class LintRuleConfig(BaseModel):
    """Configuration of a single rule.

    Persisted settings use camelCase keys (``skipDialogue``); both spellings
    are accepted on input.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    enabled: bool = True
    severity: Severity = Severity.WARNING
    skip_dialogue: bool = Field(default=False, alias="skipDialogue")
    skip_llm_validation: bool = Field(default=False, alias="skipLlmValidation")
    options: dict[str, Any] = Field(default_factory=dict)

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def merge(self, partial: "LintRuleConfig | Mapping[str, Any] | None") -> "LintRuleConfig":
        """Return a new config with ``partial`` applied on top of this one.

        Only the fields present in ``partial`` are changed. ``options`` are
        merged key by key.
        """

        if partial is None:
            return self
        if isinstance(partial, LintRuleConfig):
            update = {name: getattr(partial, name) for name in partial.model_fields_set}
        else:
            update = {_FIELD_BY_ALIAS.get(key, key): value for key, value in partial.items()}

        merged = self.model_dump()
        for name, value in update.items():
            if name == "options":
                merged["options"] = {**merged["options"], **dict(value or {})}
            else:
                merged[name] = value
        return LintRuleConfig.model_validate(merged)


_FIELD_BY_ALIAS = {
    info.alias: name
    for name, info in LintRuleConfig.model_fields.items()
    if info.alias is not None
}
