import pytest

from domain.schemas import (
    ConfidenceBand,
    DomainClassificationResult,
    DomainType,
    LintIssue,
    LintMetadata,
    LintResult,
    LintRuleType,
    PreferenceTier,
    TemplateSelectionCriteria,
    TemplateType,
)
from domain.selection import TemplateSelector, analyze_prompt, apply_legacy_rules, determine_complexity
from domain.selection.criteria import resolve_prompt
from domain.selection.selector import lint_based_templates, lint_refinements
from domain.tables.selection import SelectionTables, TemplatePreference


def _lint(*issue_types: LintRuleType, input_length: int | None = None) -> LintResult:
    metadata = LintMetadata(input_length=input_length) if input_length is not None else None
    return LintResult(issues=[LintIssue(type=t) for t in issue_types], metadata=metadata)


def _domain(domain: DomainType, confidence: int) -> DomainClassificationResult:
    return DomainClassificationResult(domain=domain, confidence=confidence)


def test_determine_complexity(selection_tables) -> None:
    limits = selection_tables.complexity
    assert determine_complexity("write a poem", 0, limits) == "simple"
    assert determine_complexity("write a poem", 2, limits) == "medium"
    assert determine_complexity("", 0, limits) == "simple"
    assert determine_complexity(" ".join(["word"] * 21), 0, limits) == "complex"
    assert determine_complexity("short", 4, limits) == "complex"


def test_resolve_prompt_placeholder() -> None:
    assert resolve_prompt(_lint(), "explicit prompt", "placeholder") == "explicit prompt"
    assert resolve_prompt(_lint(input_length=12), None, "placeholder") == "placeholder"
    assert resolve_prompt(_lint(input_length=0), None, "placeholder") == ""
    assert resolve_prompt(_lint(), None, "placeholder") == ""


def test_analyze_prompt_flags(selection_tables) -> None:
    criteria = analyze_prompt(
        _lint(LintRuleType.MISSING_IO_SPECIFICATION),
        "First build the parser, then maybe test it",
        selection_tables,
    )

    assert criteria.complexity == "medium"
    assert criteria.has_sequential_keywords
    assert criteria.has_task_structure
    assert criteria.needs_io_specification
    assert criteria.has_vague_wording


def test_vague_wording_issue_sets_flag_without_keywords(selection_tables) -> None:
    criteria = analyze_prompt(_lint(LintRuleType.VAGUE_WORDING), "tell me about dogs", selection_tables)
    assert criteria.has_vague_wording


def test_legacy_rules_keep_priority_order() -> None:
    criteria = TemplateSelectionCriteria(
        issues=(LintIssue(type=LintRuleType.MISSING_LANGUAGE),),
        complexity="simple",
        has_task_structure=True,
    )
    assert apply_legacy_rules(criteria) == [TemplateType.MINIMAL, TemplateType.TASK_IO]


def test_legacy_rules_never_empty_and_capped() -> None:
    assert apply_legacy_rules(TemplateSelectionCriteria(complexity="medium")) == [TemplateType.MINIMAL]

    complex_criteria = TemplateSelectionCriteria(
        issues=tuple(
            LintIssue(type=t)
            for t in (
                LintRuleType.MISSING_LANGUAGE,
                LintRuleType.MISSING_IO_SPECIFICATION,
                LintRuleType.MISSING_TASK_VERB,
                LintRuleType.UNCLEAR_SCOPE,
            )
        ),
        complexity="complex",
        has_sequential_keywords=True,
        has_vague_wording=True,
    )
    assert apply_legacy_rules(complex_criteria) == [
        TemplateType.SEQUENTIAL,
        TemplateType.BULLET,
        TemplateType.TASK_IO,
    ]
    assert apply_legacy_rules(complex_criteria, max_templates=1) == [TemplateType.SEQUENTIAL]


@pytest.mark.parametrize(
    ("confidence", "band"),
    [
        (100, ConfidenceBand.HIGH),
        (90, ConfidenceBand.HIGH),
        (89, ConfidenceBand.MODERATE),
        (70, ConfidenceBand.MODERATE),
        (69, ConfidenceBand.LOW),
        (0, ConfidenceBand.LOW),
    ],
)
def test_band_boundaries(selector, confidence, band) -> None:
    assert selector.band_for(confidence) is band


def test_high_confidence_code_without_prompt(selector) -> None:
    templates = selector.select_templates(
        _lint(LintRuleType.MISSING_LANGUAGE, LintRuleType.MISSING_IO_SPECIFICATION),
        _domain(DomainType.CODE, 95),
    )
    assert templates == [TemplateType.TASK_IO, TemplateType.SEQUENTIAL]


def test_high_confidence_adds_only_secondary_lint_templates(selector) -> None:
    templates = selector.select_templates(_lint(), _domain(DomainType.WRITING, 95), "write something about dogs")
    assert templates == [TemplateType.MINIMAL, TemplateType.BULLET]


def test_moderate_confidence_blends_domain_and_rules(selector) -> None:
    templates = selector.select_templates(
        _lint(),
        _domain(DomainType.WRITING, 75),
        "write blog post about productivity then publish",
    )
    assert templates == [TemplateType.MINIMAL, TemplateType.TASK_IO, TemplateType.SEQUENTIAL]


def test_low_confidence_uses_rules(selector) -> None:
    templates = selector.select_templates(
        _lint(LintRuleType.VAGUE_WORDING, LintRuleType.UNCLEAR_SCOPE),
        _domain(DomainType.ANALYSIS, 40),
    )
    assert templates == [TemplateType.BULLET]

    plain = selector.select_templates(
        _lint(),
        _domain(DomainType.WRITING, 40),
        "please tell me stories about dragons and castles",
    )
    assert plain == [TemplateType.MINIMAL]


@pytest.mark.parametrize(
    ("issues", "prompt"),
    [
        ((), "implement binary search"),
        ((LintRuleType.MISSING_LANGUAGE,), "create unit tests"),
        ((LintRuleType.VAGUE_WORDING, LintRuleType.UNCLEAR_SCOPE), "compare different approaches"),
        ((LintRuleType.MISSING_IO_SPECIFICATION,), "build a pipeline step by step"),
    ],
)
@pytest.mark.parametrize("confidence", [0, 35, 69])
def test_low_band_matches_rule_selection(selector, selection_tables, issues, prompt, confidence) -> None:
    lint = _lint(*issues)
    expected = apply_legacy_rules(analyze_prompt(lint, prompt, selection_tables))
    for domain in DomainType:
        assert selector.select_templates(lint, _domain(domain, confidence), prompt) == expected


@pytest.mark.parametrize("confidence", [10, 75, 95])
@pytest.mark.parametrize("domain", list(DomainType))
def test_selection_is_non_empty_unique_and_capped(selector, domain, confidence) -> None:
    lint = _lint(
        LintRuleType.MISSING_IO_SPECIFICATION,
        LintRuleType.VAGUE_WORDING,
        LintRuleType.MISSING_TASK_VERB,
        LintRuleType.UNCLEAR_SCOPE,
    )
    templates = selector.select_templates(lint, _domain(domain, confidence), "first do something, then the next step")

    assert 1 <= len(templates) <= 3
    assert len(set(templates)) == len(templates)


@pytest.mark.parametrize("domain", list(DomainType))
def test_high_band_stays_within_domain_preferences(selector, domain) -> None:
    lint = _lint(LintRuleType.MISSING_IO_SPECIFICATION, LintRuleType.VAGUE_WORDING)
    allowed = set(selector.preferences(domain, PreferenceTier.HIGH)) | set(
        selector.preferences(domain, PreferenceTier.SECONDARY)
    )

    templates = selector.select_templates(lint, _domain(domain, 92), "first parse the file then maybe clean it")

    assert set(templates) <= allowed


def test_high_band_refinements_respect_narrow_preferences(selection_tables) -> None:
    # code: high and secondary together only allow TASK_IO and SEQUENTIAL
    narrowed = {
        PreferenceTier.HIGH: [TemplateType.TASK_IO, TemplateType.SEQUENTIAL],
        PreferenceTier.SECONDARY: [TemplateType.TASK_IO],
    }
    preferences = [
        TemplatePreference(domain=p.domain, tier=p.tier, templates=narrowed[p.tier])
        if p.domain is DomainType.CODE and p.tier in narrowed
        else p
        for p in selection_tables.preferences
    ]
    tables = SelectionTables.model_validate({**selection_tables.model_dump(), "preferences": preferences})
    selector = TemplateSelector(tables)

    templates = selector.select_templates(
        _lint(LintRuleType.VAGUE_WORDING), _domain(DomainType.CODE, 95), "maybe tidy this"
    )

    assert templates == [TemplateType.TASK_IO, TemplateType.SEQUENTIAL]
    assert TemplateType.BULLET not in templates


def test_moderate_band_keeps_unconditional_refinements(selection_tables) -> None:
    preferences = [
        TemplatePreference(domain=p.domain, tier=p.tier, templates=[TemplateType.TASK_IO])
        if p.domain is DomainType.CODE and p.tier is PreferenceTier.MODERATE
        else p
        for p in selection_tables.preferences
    ]
    tables = SelectionTables.model_validate({**selection_tables.model_dump(), "preferences": preferences})

    templates = TemplateSelector(tables).select_templates(
        _lint(LintRuleType.VAGUE_WORDING), _domain(DomainType.CODE, 75), "maybe tidy this"
    )

    assert TemplateType.BULLET in templates


def test_lint_based_templates_extend_refinements_with_minimal(selection_tables) -> None:
    simple = analyze_prompt(_lint(LintRuleType.VAGUE_WORDING), "maybe tidy this", selection_tables)
    complex_ = analyze_prompt(
        _lint(LintRuleType.MISSING_IO_SPECIFICATION, LintRuleType.VAGUE_WORDING),
        "first parse the file then maybe clean it",
        selection_tables,
    )

    assert lint_refinements(simple) == [TemplateType.BULLET]
    assert lint_based_templates(simple) == [TemplateType.BULLET, TemplateType.MINIMAL]
    assert lint_based_templates(complex_) == lint_refinements(complex_)
