"""Command line entry point: lint a UTF-8 text file.

Each line of the file is one paragraph. Issues are printed per paragraph as
text or JSON; the exit status is 1 when any ``error`` issue is reported.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from kousei.linting import (
    LINT_PRESETS,
    RuleRunner,
    apply_rule_configs,
    create_default_runner,
    get_correction_mode,
    load_rule_configs,
)
from kousei.linting.correction_modes import CorrectionModeId
from kousei.linting.presets import get_preset, get_preset_for_mode
from kousei.models import ParagraphIssues, Severity
from kousei.nlp import FugashiTokenizer, TokenizerClient

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kousei",
        description="Lint Japanese prose for style, grammar and notation issues.",
    )
    parser.add_argument("file", type=Path, help="UTF-8 text file; one paragraph per line")
    parser.add_argument(
        "--mode",
        choices=CorrectionModeId.all_values(),
        help="Correction mode (selects default guidelines, overrides and preset)",
    )
    parser.add_argument(
        "--guideline",
        action="append",
        dest="guidelines",
        metavar="ID",
        help="Active guideline id, in priority order (repeatable)",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(LINT_PRESETS),
        help="Rule preset (default: the mode's preset when --mode is given)",
    )
    parser.add_argument(
        "--rule-config",
        type=Path,
        help="JSON file of per-rule settings applied after the preset",
    )
    parser.add_argument(
        "--tokenizer",
        choices=["fugashi", "none"],
        default="fugashi",
        help="Morphological analyser for token-aware rules (default: fugashi)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Confirm issues with the configured LLM providers",
    )
    parser.add_argument(
        "--provider",
        help="Primary LLM provider (overrides LLM_PRIMARY env var)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--dotenv", type=Path, help="Path to a .env file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser


def configure_runner(args: argparse.Namespace, tokenizer: TokenizerClient | None) -> RuleRunner:
    """Build a runner with the preset, persisted config and guidelines applied."""

    runner = create_default_runner(tokenizer)
    if args.preset:
        apply_rule_configs(runner, get_preset(args.preset).configs)
    elif args.mode:
        apply_rule_configs(runner, get_preset_for_mode(args.mode).configs)
    if args.rule_config is not None:
        apply_rule_configs(runner, load_rule_configs(args.rule_config))
    if args.guidelines:
        runner.set_active_guidelines(args.guidelines)
    return runner


def validate_results(
    results: list[ParagraphIssues],
    paragraphs: Sequence[str],
    runner: RuleRunner,
    args: argparse.Namespace,
) -> list[ParagraphIssues]:
    # Imported lazily so plain linting never needs the LLM SDKs
    from kousei.llm.provider_registry import create_provider_chain
    from kousei.llm.service import LLMService, logging_reporter
    from kousei.prompt import render_template
    from kousei.validation import CandidateValidator, ValidationContext

    providers = create_provider_chain(
        system_prompt=render_template("system_validator.md"),
        dotenv_path=args.dotenv,
        primary=args.provider,
        skip_unconfigured=True,
    )
    service = LLMService(providers, reporter=logging_reporter)
    validator = CandidateValidator(service, dotenv_path=args.dotenv)

    if args.guidelines:
        guidelines = list(args.guidelines)
    elif args.mode:
        guidelines = [g.value for g in get_correction_mode(args.mode).default_guidelines]
    else:
        guidelines = runner.active_guidelines or []
    skip_ids = runner.llm_skip_rule_ids()

    validated: list[ParagraphIssues] = []
    for result in results:
        if not result.issues:
            validated.append(result)
            continue
        context = ValidationContext(
            mode=args.mode,
            active_guidelines=guidelines,
            text=paragraphs[result.paragraph_index],
            skip_rule_ids=skip_ids,
        )
        validated.append(
            ParagraphIssues(
                paragraph_index=result.paragraph_index,
                issues=validator.validate_candidates(result.issues, context),
            )
        )
    return validated


def format_text(path: Path, results: Sequence[ParagraphIssues]) -> str:
    lines: list[str] = []
    for result in results:
        for issue in result.issues:
            line = (
                f"{path}:{result.paragraph_index + 1}:{issue.from_ + 1}: "
                f"{issue.severity.value} [{issue.rule_id}] {issue.message_ja}"
            )
            if issue.fix is not None:
                line += f" (→ {issue.fix.replacement})"
            if issue.validation_status is not None:
                line += f" <{issue.validation_status.value}>"
            lines.append(line)
    return "\n".join(lines)


def format_json(results: Sequence[ParagraphIssues]) -> str:
    payload = [
        result.model_dump(mode="json", by_alias=True, exclude_none=True)
        for result in results
        if result.issues
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.dotenv is not None:
        load_dotenv(dotenv_path=args.dotenv)
    else:
        load_dotenv()

    try:
        text = args.file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    tokenizer = FugashiTokenizer() if args.tokenizer == "fugashi" else None
    try:
        runner = configure_runner(args, tokenizer)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    paragraphs = text.splitlines()
    results = runner.lint_document(
        paragraphs,
        mode=args.mode,
        active_guidelines=args.guidelines,
    )
    if args.validate:
        results = validate_results(results, paragraphs, runner, args)

    output = format_json(results) if args.format == "json" else format_text(args.file, results)
    if output:
        print(output)

    has_errors = any(
        issue.severity is Severity.ERROR for result in results for issue in result.issues
    )
    return 1 if has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
