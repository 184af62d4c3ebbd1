"""Rule registry and orchestration of lint passes.

The runner owns the registered rules, their configuration, the rule →
guideline attribution map and the active guideline list. A pass selects the
rules that are enabled and eligible, runs the text-only rules, obtains tokens
(given by the caller or requested from the injected tokenizer) for the
morphological rules, then drops dialogue-internal issues for rules configured
with ``skip_dialogue``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from kousei.models import (
    LintIssue,
    LintRuleConfig,
    Paragraph,
    ParagraphIssues,
    Token,
)
from kousei.nlp.tokenizer import TokenizerClient

from .base_rule import LintRule
from .correction_modes import CorrectionMode, CorrectionModeId, get_correction_mode
from .dialogue_mask import scan_dialogue
from .guidelines import GUIDELINES, GuidelineId, is_known_guideline

LOGGER = logging.getLogger(__name__)

ConfigMap = Mapping[str, LintRuleConfig]


class RuleRunner:
    """Registry plus pass orchestration for lint rules."""

    def __init__(
        self,
        tokenizer: TokenizerClient | None = None,
        *,
        rules: Iterable[LintRule] = (),
        guideline_map: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._tokenizer = tokenizer
        self._rules: dict[str, LintRule] = {}
        self._configs: dict[str, LintRuleConfig] = {}
        # Partials stored for rules that have not registered yet
        self._pending: dict[str, list[LintRuleConfig | Mapping[str, Any]]] = {}
        self._guideline_map: dict[str, frozenset[str]] = {}
        self._active_guidelines: list[str] | None = None
        for rule in rules:
            self.register_rule(rule)
        if guideline_map is not None:
            self.set_guideline_map(guideline_map)

    # Registry -------------------------------------------------------------

    def register_rule(self, rule: LintRule) -> None:
        """Register ``rule``, replacing any rule with the same id.

        The rule's default config is installed only when no config has been
        stored for that id yet. Partials set before registration are
        replayed on top of the default config.
        """

        if rule.id in self._rules:
            LOGGER.debug("Replacing registered rule %s", rule.id)
        self._rules[rule.id] = rule
        pending = self._pending.pop(rule.id, None)
        if pending is None:
            self._configs.setdefault(rule.id, rule.default_config)
            return
        config = rule.default_config
        for partial in pending:
            config = config.merge(partial)
        self._configs[rule.id] = config

    def registered_rules(self) -> list[LintRule]:
        return list(self._rules.values())

    def get_rule(self, rule_id: str) -> LintRule | None:
        return self._rules.get(rule_id)

    def set_config(
        self,
        rule_id: str,
        partial: LintRuleConfig | Mapping[str, Any],
    ) -> LintRuleConfig:
        """Merge ``partial`` into the stored config of ``rule_id``.

        Unknown rule ids are accepted; the config applies once the rule
        registers.
        """

        rule = self._rules.get(rule_id)
        current = self._configs.get(rule_id)
        if current is None:
            current = rule.default_config if rule is not None else LintRuleConfig()
        merged = current.merge(partial)
        if rule is None:
            self._pending.setdefault(rule_id, []).append(partial)
        self._configs[rule_id] = merged
        return merged

    def get_config(self, rule_id: str) -> LintRuleConfig:
        try:
            return self._configs[rule_id]
        except KeyError:
            raise KeyError(f"No configuration stored for rule '{rule_id}'") from None

    def set_guideline_map(self, mapping: Mapping[str, Iterable[str]]) -> None:
        cleaned: dict[str, frozenset[str]] = {}
        for rule_id, guideline_ids in mapping.items():
            known: set[str] = set()
            for guideline_id in guideline_ids:
                value = (
                    guideline_id.value
                    if isinstance(guideline_id, GuidelineId)
                    else str(guideline_id)
                )
                if is_known_guideline(value):
                    known.add(value)
                else:
                    LOGGER.warning(
                        "Ignoring unknown guideline '%s' mapped to rule %s",
                        value,
                        rule_id,
                    )
            if known:
                cleaned[rule_id] = frozenset(known)
        self._guideline_map = cleaned

    def set_active_guidelines(self, guideline_ids: Iterable[str] | None) -> None:
        """Restrict guideline-dependent rules to ``guideline_ids`` (ordered).

        ``None`` removes the restriction.
        """

        self._active_guidelines = _normalise_active(guideline_ids)

    @property
    def active_guidelines(self) -> list[str] | None:
        return None if self._active_guidelines is None else list(self._active_guidelines)

    def is_eligible(self, rule_id: str, active: Sequence[str] | None = None) -> bool:
        """True if the rule may run under the active guideline list."""

        return self._is_eligible(rule_id, self._active_guidelines if active is None else active)

    def _is_eligible(self, rule_id: str, active: Sequence[str] | None) -> bool:
        if active is None:
            return True
        mapped = self._guideline_map.get(rule_id)
        if not mapped:
            return True
        return any(guideline_id in mapped for guideline_id in active)

    def enabled_rules(self) -> list[LintRule]:
        return self._select_rules(self._configs, self._active_guidelines)

    def has_morphological_rules(self) -> bool:
        return any(rule.is_morphological for rule in self.enabled_rules())

    def llm_skip_rule_ids(self) -> frozenset[str]:
        """Ids of rules whose issues bypass LLM validation."""

        return frozenset(
            rule_id for rule_id, config in self._configs.items() if config.skip_llm_validation
        )

    # Passes ---------------------------------------------------------------

    def lint(self, text: str, tokens: Sequence[Token] | None = None) -> list[LintIssue]:
        """Run every enabled, eligible rule over one text."""

        return self._lint_text(text, tokens, self._configs, self._active_guidelines)

    def lint_with_guidelines(
        self,
        text: str,
        tokens: Sequence[Token] | None = None,
        active_guidelines: Iterable[str] | None = None,
        mode: str | CorrectionModeId | None = None,
    ) -> list[LintIssue]:
        """Run one pass under a temporary guideline list and correction mode.

        When ``active_guidelines`` is None the mode's default guidelines are
        used, or the stored list when no mode is given. Stored configuration
        is left untouched.
        """

        active, configs = self._pass_settings(active_guidelines, mode)
        return self._lint_text(text, tokens, configs, active)

    def lint_document(
        self,
        paragraphs: Sequence[Paragraph | str],
        tokens_by_paragraph: Mapping[int, Sequence[Token]] | None = None,
        *,
        mode: str | CorrectionModeId | None = None,
        active_guidelines: Iterable[str] | None = None,
    ) -> list[ParagraphIssues]:
        """Lint every paragraph and run document-level rules once.

        Plain strings are indexed by position. The result holds one entry per
        paragraph, ordered by paragraph index.
        """

        items = _as_paragraphs(paragraphs)
        if mode is None and active_guidelines is None:
            active, configs = self._active_guidelines, self._configs
        else:
            active, configs = self._pass_settings(active_guidelines, mode)

        texts = {paragraph.index: paragraph.text for paragraph in items}
        collected: dict[int, list[LintIssue]] = {paragraph.index: [] for paragraph in items}
        for paragraph in items:
            tokens = None
            if tokens_by_paragraph is not None:
                tokens = tokens_by_paragraph.get(paragraph.index)
            collected[paragraph.index].extend(
                self._lint_text(paragraph.text, tokens, configs, active)
            )

        for rule in self._select_rules(configs, active):
            if not rule.is_document_rule:
                continue
            config = configs[rule.id]
            for result in self._guarded(rule, rule.lint_document, items, config):
                text = texts.get(result.paragraph_index)
                if text is None:
                    LOGGER.warning(
                        "Rule %s reported issues for unknown paragraph %d",
                        rule.id,
                        result.paragraph_index,
                    )
                    continue
                collected[result.paragraph_index].extend(
                    self._filter_dialogue(text, result.issues, configs)
                )

        return [
            ParagraphIssues(
                paragraph_index=index,
                issues=sorted(collected[index], key=LintIssue.sort_key),
            )
            for index in sorted(collected)
        ]

    def run(
        self,
        rule_id: str,
        text: str,
        tokens: Sequence[Token] | None = None,
    ) -> list[LintIssue]:
        """Run a single registered rule, honouring its enabled state."""

        rule = self._rules.get(rule_id)
        if rule is None:
            raise KeyError(f"Rule '{rule_id}' is not registered")
        config = self._configs[rule_id]
        if not config.enabled or not text.strip():
            return []
        if rule.is_morphological:
            if tokens is None:
                tokens = self._tokenize(text)
            if tokens is None:
                return []
            issues = self._guarded(rule, rule.lint_with_tokens, text, tokens, config)
        else:
            issues = self._guarded(rule, rule.lint, text, config)
        return sorted(
            self._filter_dialogue(text, issues, self._configs), key=LintIssue.sort_key
        )

    # Internals ------------------------------------------------------------

    def _select_rules(
        self, configs: ConfigMap, active: Sequence[str] | None
    ) -> list[LintRule]:
        selected = []
        for rule_id, rule in self._rules.items():
            config = configs.get(rule_id)
            if config is None or not config.enabled:
                continue
            if not self._is_eligible(rule_id, active):
                continue
            selected.append(rule)
        return selected

    def _pass_settings(
        self,
        active_guidelines: Iterable[str] | None,
        mode: str | CorrectionModeId | None,
    ) -> tuple[list[str] | None, dict[str, LintRuleConfig]]:
        mode_def = get_correction_mode(mode) if mode is not None else None
        if active_guidelines is not None:
            active = _normalise_active(active_guidelines)
        elif mode_def is not None:
            active = [guideline.value for guideline in mode_def.default_guidelines]
        else:
            active = self._active_guidelines
        return active, self._effective_configs(active, mode_def)

    def _effective_configs(
        self,
        active: Sequence[str] | None,
        mode: CorrectionMode | None,
    ) -> dict[str, LintRuleConfig]:
        """Stored config, then the first active guideline's severity, then the mode override."""

        guidelines = [
            GUIDELINES[GuidelineId(guideline_id)]
            for guideline_id in (active or [])
            if is_known_guideline(guideline_id)
        ]
        effective: dict[str, LintRuleConfig] = {}
        for rule_id, config in self._configs.items():
            for guideline in guidelines:
                severity = guideline.rule_severities.get(rule_id)
                if severity is not None:
                    config = config.merge({"severity": severity})
                    break
            if mode is not None and rule_id in mode.rule_overrides:
                config = config.merge(mode.rule_overrides[rule_id])
            effective[rule_id] = config
        return effective

    def _lint_text(
        self,
        text: str,
        tokens: Sequence[Token] | None,
        configs: ConfigMap,
        active: Sequence[str] | None,
    ) -> list[LintIssue]:
        if not text or not text.strip():
            return []

        rules = [rule for rule in self._select_rules(configs, active) if not rule.is_document_rule]
        issues: list[LintIssue] = []
        for rule in rules:
            if not rule.is_morphological:
                issues.extend(self._guarded(rule, rule.lint, text, configs[rule.id]))

        morphological = [rule for rule in rules if rule.is_morphological]
        if morphological:
            if tokens is None:
                tokens = self._tokenize(text)
            if tokens is not None:
                for rule in morphological:
                    issues.extend(
                        self._guarded(
                            rule, rule.lint_with_tokens, text, tokens, configs[rule.id]
                        )
                    )

        issues = self._filter_dialogue(text, issues, configs)
        issues.sort(key=LintIssue.sort_key)
        return issues

    def _tokenize(self, text: str) -> list[Token] | None:
        if self._tokenizer is None:
            LOGGER.debug("No tokenizer configured; morphological rules skipped")
            return None
        try:
            return list(self._tokenizer.tokenize(text))
        except Exception as exc:  # noqa: BLE001 - any tokenizer failure degrades the pass
            LOGGER.warning(
                "Tokenizer failed; skipping morphological rules for this pass: %s", exc
            )
            return None

    def _filter_dialogue(
        self, text: str, issues: Iterable[LintIssue], configs: ConfigMap
    ) -> list[LintIssue]:
        issues = list(issues)
        if not any(_skips_dialogue(configs, issue.rule_id) for issue in issues):
            return issues
        mask = scan_dialogue(text)
        return [
            issue
            for issue in issues
            if not (
                _skips_dialogue(configs, issue.rule_id)
                and mask.contains(issue.from_, issue.to)
            )
        ]

    @staticmethod
    def _guarded(rule: LintRule, method: Callable[..., Any], *args: Any) -> list[Any]:
        try:
            return list(method(*args))
        except Exception:  # noqa: BLE001 - one broken rule must not fail the pass
            LOGGER.exception("Rule %s raised; its results are dropped", rule.id)
            return []


def _skips_dialogue(configs: ConfigMap, rule_id: str) -> bool:
    config = configs.get(rule_id)
    return config is not None and config.skip_dialogue


def _normalise_active(guideline_ids: Iterable[str] | None) -> list[str] | None:
    if guideline_ids is None:
        return None
    result: list[str] = []
    for guideline_id in guideline_ids:
        value = guideline_id.value if isinstance(guideline_id, GuidelineId) else str(guideline_id)
        if value not in result:
            result.append(value)
    return result


def _as_paragraphs(paragraphs: Sequence[Paragraph | str]) -> list[Paragraph]:
    items: list[Paragraph] = []
    for position, paragraph in enumerate(paragraphs):
        if isinstance(paragraph, Paragraph):
            items.append(paragraph)
        else:
            items.append(Paragraph(index=position, text=str(paragraph)))
    return items
