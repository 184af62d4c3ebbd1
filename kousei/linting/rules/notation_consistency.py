from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from kousei.models import LintIssue, LintRuleConfig, Paragraph, ParagraphIssues, RuleLevel

from ..base_rule import LintRule, replace_fix
from ..data.notation_variants import (
    CATEGORY_REFERENCES,
    VARIANT_CATEGORY_LABELS,
    VARIANT_GROUPS,
    VariantGroup,
)
from ..dialogue_mask import mask_dialogue
from ..presets import LINT_DEFAULT_CONFIGS
from ..text_utils import find_all

# (paragraph index, start, end)
Location = tuple[int, int, int]


def majority_variant(counts: dict[str, int], canonical: Sequence[str]) -> str:
    """Most frequent variant; ties go to the earlier canonical form."""

    best = canonical[0]
    best_count = 0
    for variant in canonical:
        count = counts.get(variant, 0)
        if count > best_count:
            best, best_count = variant, count
    return best


class NotationConsistencyRule(LintRule):
    """Flag minority spellings when a document mixes variants of one word.

    Longer variants claim their characters first, so 受付け is not also
    counted as 受付.
    """

    id = "notation-consistency"
    name = "Notation consistency"
    name_ja = "表記ゆれの検出"
    description = "Detect inconsistent notation variants across the document"
    description_ja = "文書内の表記ゆれを検出"
    level = RuleLevel.L1
    document_level = True
    default_config = LINT_DEFAULT_CONFIGS["notation-consistency"]

    def __init__(self, groups: Sequence[VariantGroup] = VARIANT_GROUPS) -> None:
        self._groups = tuple(groups)

    def lint_document(
        self,
        paragraphs: Sequence[Paragraph],
        config: LintRuleConfig,
    ) -> list[ParagraphIssues]:
        if not paragraphs:
            return []
        texts = {paragraph.index: paragraph.text for paragraph in paragraphs}
        scan_texts = {
            index: (mask_dialogue(text) if config.skip_dialogue else text)
            for index, text in texts.items()
        }

        by_paragraph: dict[int, list[LintIssue]] = defaultdict(list)
        for group in self._groups:
            locations = self._locate(group, scan_texts)
            if len(locations) < 2:
                continue
            counts = {variant: len(found) for variant, found in locations.items()}
            majority = majority_variant(counts, group.variants)
            reference = CATEGORY_REFERENCES[group.category]
            label = VARIANT_CATEGORY_LABELS[group.category]
            for variant, found in locations.items():
                if variant == majority:
                    continue
                for paragraph_index, start, end in found:
                    by_paragraph[paragraph_index].append(
                        self._create_issue(
                            texts[paragraph_index],
                            start,
                            end,
                            config,
                            message=(
                                f'Inconsistent notation: "{variant}" vs "{majority}" '
                                f"({group.category.value})"
                            ),
                            message_ja=(
                                f"{reference.standard}に基づき、{label}「{variant}」と"
                                f"「{majority}」の表記が混在しています。"
                                f"「{majority}」への統一を推奨します"
                            ),
                            reference=reference,
                            fix=replace_fix(majority),
                        )
                    )

        return [
            ParagraphIssues(paragraph_index=index, issues=issues)
            for index, issues in sorted(by_paragraph.items())
        ]

    @staticmethod
    def _locate(group: VariantGroup, scan_texts: dict[int, str]) -> dict[str, list[Location]]:
        longest_first = sorted(group.variants, key=len, reverse=True)
        found: dict[str, list[Location]] = {}
        for index, text in scan_texts.items():
            claimed = [False] * len(text)
            for variant in longest_first:
                for start in find_all(text, variant):
                    end = start + len(variant)
                    if any(claimed[start:end]):
                        continue
                    for offset in range(start, end):
                        claimed[offset] = True
                    found.setdefault(variant, []).append((index, start, end))
        return found
