"""Evidence Task checks: What, How, Cohesion and Clarity."""

import re

from rubric import patterns
from rubric.scoring.engine import assemble_response, grade, make_check
from rubric.standards import load_standard, rule
from rubric.text import (
    coerce_field,
    concept_set,
    count_sentences,
    extract_key_terms,
    strip_standard_prefix,
    term_in_text,
)

CONCEPT_CONFLICTS = (
    ("centrally-administered", "shared",
     "'centrally-administered' vs 'shared' are different password management approaches"),
    ("individual", "shared", "'individual' vs 'shared' are opposite concepts"),
    ("anonymization", "identified", "'anonymization' vs 'identified' are opposite concepts"),
)


def _collection_directive(text: str) -> bool:
    return bool(
        patterns.COLLECTION_VERBS.search(text)
        or patterns.STRUCTURE_MARKER.search(text)
        or patterns.ONE_OR_MORE_OF.search(text)
    )


# ---------- What ----------


def eval_single_focus(what: str) -> dict:
    points = 15
    violations = []
    if count_sentences(what) > 1:
        points -= 3
        violations.append("Multiple sentences reduce single-focus clarity.")
    if patterns.HEAVY_CHAIN.search(what):
        points -= 2
        violations.append("Chained conjunctions reduce single-focus clarity.")
    if patterns.BROAD_SCOPE.search(what):
        points -= 6
        violations.append("Scope is too broad for a single task (e.g., 'all applications').")
    return make_check("what.single_focus", "Single focus", points, 15, grade(points, 14, 11), violations)


def eval_outcome_phrasing(what: str) -> dict:
    has_prefix = patterns.STANDARD_PREFIX.search(what) is not None
    points = 25
    violations = []
    if not patterns.WHAT_OUTCOME_LIKE.search(what):
        points -= 5
        violations.append(
            "Phrase should be outcome-focused (state/result). Example: 'Access reviews are completed and approved.'"
        )
    if patterns.ENSURE_WORD.search(what):
        points -= 5
        violations.append("Avoid 'ensure'—rewrite as a measurable outcome.")
    if not has_prefix and patterns.WHAT_DIRECTIVE_START.search(what):
        points -= 5
        violations.append("Avoid directives in 'What'. Use a result/state (outcome) wording.")
    if patterns.ACRONYMS_NEED_EXPANSION.search(what):
        points -= 5
        violations.append("Undefined acronym used. Spell out first mention (e.g., 'Disaster Recovery (DR)').")
    if not has_prefix:
        points -= 4
        violations.append(
            "Start 'What' with 'Provide evidence to show …' or 'Provide evidence that …' per the standard."
        )
    return make_check(
        "what.outcome_phrasing", "Outcome based phrasing", points, 25, grade(points, 23, 18), violations
    )


def eval_concise(what: str, soft_chars: int = 160, hard_chars: int = 220) -> dict:
    length = len(what.strip())
    points = 15
    violations = []
    if length > hard_chars:
        points -= 4
        violations.append("Too long—aim for ~1-2 short lines.")
    elif length > soft_chars:
        points -= 2
        violations.append("Could be tighter—remove filler words.")
    return make_check("what.concise", "Concise", points, 15, grade(points, 14, 11), violations)


def eval_no_artifact_leakage(what: str) -> dict:
    """Artifacts demanded in What belong in How. The standard prefix itself doesn't count."""
    body = strip_standard_prefix(what)
    label = "Artifact leakage (none)"
    if _collection_directive(body) and patterns.ARTIFACT_NOUNS.search(body):
        return make_check(
            "what.no_artifact_leakage", label, 10, 15, "WARN",
            ["Move artifacts to 'How to Collect'. 'What' should only state the outcome."],
        )
    return make_check("what.no_artifact_leakage", label, 15, 15, "PASS")


def eval_role_aware_scope(what: str) -> dict:
    label = "Role-aware scope (no cross-department mixing)"
    if patterns.CROSS_DEPT.search(what):
        points = 11
        return make_check(
            "what.role_aware_scope", label, points, 15, grade(points, 14, 12),
            ["Avoid cross-department scope in 'What'. Keep a single role/ownership context."],
        )
    return make_check("what.role_aware_scope", label, 15, 15, "PASS")


def eval_tech_agnostic_what(what: str) -> dict:
    vendor = patterns.ET_VENDOR_NAMES.search(what)
    if vendor:
        return make_check(
            "what.tech_agnostic", "Technology-agnostic", 12, 15, "WARN",
            [f'Names a vendor/tool ("{vendor.group(0)}"). Use technology-agnostic phrasing.'],
        )
    return make_check("what.tech_agnostic", "Technology-agnostic", 15, 15, "PASS")


# ---------- How ----------


def _verifiability_gap(how: str) -> str | None:
    """Why the listed artifacts can't be pinned to a point in time, or None."""
    has_timeframe = patterns.RELATIVE_TIME.search(how) is not None
    has_date = patterns.EXPLICIT_DATE.search(how) is not None
    reason = None
    if patterns.TIME_SENSITIVE_ARTIFACTS.search(how) and not has_timeframe and not has_date:
        reason = (
            "time-sensitive artifacts (logs, reports, tickets, records, exports) need timeframes "
            "(e.g., 'last 30 days', 'for the audit period') or explicit dates"
        )
    if (
        patterns.POINT_IN_TIME_ARTIFACTS.search(how)
        and not patterns.CURRENCY_INDICATORS.search(how)
        and not has_date
        and not has_timeframe
    ):
        reason = (
            "point-in-time artifacts (screenshots, diagrams, configs) need currency indicators "
            "(e.g., 'current settings', 'existing architecture', 'running configuration') or explicit dates"
        )
    return reason


def eval_tangible_artifacts(how: str) -> dict:
    points = 50
    violations = []
    if not patterns.ARTIFACT_NOUNS.search(how):
        points -= 20
        violations.append("(-20) List tangible artifacts (diagram, export, log, ticket, record, screenshot, etc.).")
    if not _collection_directive(how):
        points -= 10
        violations.append("(-10) Use collection verbs (attach, provide, maintain, export, link).")
    gap = _verifiability_gap(how)
    if gap:
        points -= 6
        violations.append(f"(-6) Add verifiability: {gap}.")
    return make_check("how.tangible_artifacts", "Tangible Artifacts", points, 50, grade(points, 45, 35), violations)


def eval_role_neutral(how: str) -> dict:
    label = "Role-neutral wording"
    if not patterns.ROLE_DIRECTED.search(how):
        return make_check("how.role_neutral", label, 10, 10, "PASS")
    if patterns.ROLE_ASSIGNMENT.search(how):
        return make_check(
            "how.role_neutral", label, 0, 10, "FAIL",
            [
                "CRITICAL: Contains role-specific language. Remove all role references "
                "(e.g., 'Security team must'). Focus on artifacts, not who provides them."
            ],
        )
    return make_check(
        "how.role_neutral", label, 3, 10, "WARN",
        [
            "Contains role references. Use role-neutral wording "
            "(e.g., 'approval records' instead of 'approved by Security Manager')."
        ],
    )


def eval_structure_bonus(how: str) -> dict:
    if patterns.STRUCTURE_MARKER.search(how):
        return make_check("how.structure_bonus", "Structure (bonus)", 5, 5, "PASS", bonus=True)
    return make_check("how.structure_bonus", "Structure (bonus)", 0, 5, "N/A", bonus=True)


def eval_tech_agnostic_how(how: str) -> dict:
    vendor = patterns.ET_VENDOR_NAMES.search(how)
    if vendor:
        return make_check(
            "how.tech_agnostic", "Technology-agnostic", 12, 15, "WARN",
            [f'Names a vendor/tool ("{vendor.group(0)}"). Use technology-agnostic collection methods.'],
        )
    return make_check("how.tech_agnostic", "Technology-agnostic", 15, 15, "PASS")


def eval_framework_agnostic(how: str) -> dict:
    label = "Keep it framework-agnostic"
    if patterns.FRAMEWORK_TIEIN.search(how):
        return make_check(
            "how.framework_agnostic", label, 3, 5, "WARN",
            ["Keep it framework-agnostic—remove clause names/numbers from 'How'."],
        )
    return make_check("how.framework_agnostic", label, 5, 5, "PASS")


def eval_no_impl_steps(how: str) -> dict:
    label = "No implementation steps (belongs in control guidance)"
    if patterns.IMPLEMENTATION_VERBS.search(how):
        return make_check(
            "how.no_impl_steps", label, 2, 5, "WARN",
            ["Avoid implementation steps in 'How'. Put steps in control guidance instead."],
        )
    return make_check("how.no_impl_steps", label, 5, 5, "PASS")


# ---------- Cohesion ----------


def _has_time_reference(text: str) -> bool:
    return bool(patterns.RELATIVE_TIME.search(text) or patterns.EXPLICIT_DATE.search(text))


def times_look_compatible(what: str, how: str) -> bool:
    a = patterns.COMPARABLE_TIME.search(what)
    b = patterns.COMPARABLE_TIME.search(how)
    return not a or not b or a.group(0).lower() == b.group(0).lower()


def _concepts(text: str) -> set[str]:
    found = patterns.OWNERSHIP_CONCEPTS.findall(text) + patterns.IDENTITY_CONCEPTS.findall(text)
    return {re.sub(r"[\s-]+", "-", c.lower()) for c in found}


def eval_what_how_alignment(what: str, how: str) -> dict:
    points = 50
    violations = []

    if _has_time_reference(what) and _has_time_reference(how) and not times_look_compatible(what, how):
        points -= 6
        violations.append("Timeframe in 'What' and 'How' do not match.")

    terms = extract_key_terms(what)
    if terms:
        how_lower = how.lower()
        how_concepts = concept_set(how)
        unmatched = [t for t in terms if not term_in_text(t, how_lower, how_concepts)]
        ratio = (len(terms) - len(unmatched)) / len(terms)
        missing = ", ".join(unmatched[:2])
        if ratio == 0:
            points -= 25
            violations.append(
                f"Severe mismatch: 'How' doesn't reference any key concepts from 'What'. "
                f"Expected references to: {missing}."
            )
        elif ratio < 0.5:
            points -= 15
            violations.append(
                f"Weak alignment: 'How' only partially references 'What' concepts. "
                f"Consider adding context for: {missing}."
            )

    what_concepts = _concepts(what)
    how_concepts_found = _concepts(how)
    for a, b, explanation in CONCEPT_CONFLICTS:
        if any(a in c for c in what_concepts) and any(b in c for c in how_concepts_found):
            points -= 20
            violations.append(f"Conceptual conflict: {explanation}.")
            break

    return make_check(
        "coh.what_how_alignment", "What ↔ How alignment (artifacts support the outcome)",
        points, 50, grade(points, 45, 30), violations,
    )


def eval_owner_system_time(how: str) -> dict:
    points = 50
    violations = []
    if not patterns.SYSTEM_REFERENCE.search(how):
        points -= 3
        violations.append(
            "Consider referencing the system/application/tool where applicable "
            "(e.g., 'password management system', 'firewall logs')."
        )
    if not (_has_time_reference(how) or patterns.CURRENCY_INDICATORS.search(how)):
        points -= 4
        violations.append(
            "Add timeframe, currency indicator, or date for verifiability "
            "(e.g., 'last 30 days', 'current settings', 'dated 2025-03-01')."
        )
    if not patterns.APPROVAL_ARTIFACT.search(how):
        points -= 1
        violations.append(
            "Optional: Consider including approval/sign-off artifacts if relevant "
            "(e.g., 'approval records', 'signed attestation')."
        )
    return make_check(
        "coh.owner_system_time_overlap", "System/Time/Approval consistency",
        points, 50, grade(points, 46, 40), violations,
    )


# ---------- Clarity ----------


def eval_plain_language(text: str) -> dict:
    points = 35
    violations = []
    vague = patterns.VAGUE_WORDS.search(text)
    if vague:
        points -= 4
        violations.append(f'Replace vague term "{vague.group(0)}" with measurable criteria.')
    slang = patterns.SLANG_WORDS.search(text)
    if slang:
        points -= 2
        violations.append(f'Use "applications" instead of slang "{slang.group(0)}".')
    if patterns.ACRONYMS_NEED_EXPANSION.search(text):
        points -= 2
        violations.append('Spell out first mention (e.g., "Disaster Recovery (DR)").')
    return make_check(
        "clarity.plain_language", "Plain language & no vague terms", points, 35, grade(points, 33, 26), violations
    )


def eval_no_jargon(text: str) -> dict:
    jargon = patterns.ET_JARGON.search(text)
    if jargon:
        return make_check(
            "clarity.no_jargon", "No unnecessary jargon", 27, 30, "WARN",
            [f'Replace jargon "{jargon.group(0)}" with plain wording.'],
        )
    return make_check("clarity.no_jargon", "No unnecessary jargon", 30, 30, "PASS")


def eval_grammar_style(text: str) -> dict:
    if patterns.LONG_SENTENCE.search(text):
        return make_check(
            "clarity.grammar_style", "Grammar / readability", 32, 35, "WARN",
            ["Split long sentence(s) to improve readability."],
        )
    return make_check("clarity.grammar_style", "Grammar / readability", 35, 35, "PASS")


# ---------- Proposed rewrite ----------


def outcome_noun(what: str) -> str:
    lc = what.lower()
    if re.search(r"\baccess review", lc):
        return "access reviews"
    if re.search(r"\b(disaster recovery|dr)\b", lc):
        return "disaster recovery (DR) tests"
    if re.search(r"\bchange management", lc):
        return "change requests"
    if re.search(r"\brisk treatment plan", lc):
        return "risk treatment plans"
    if re.search(r"\bnetwork security", lc):
        return "network security"
    return "the stated outcome"


def propose_rewrite(what: str) -> dict:
    """Template What/How pair for the outcome the What seems to be about."""
    noun = outcome_noun(what)
    if noun == "access reviews":
        how = (
            "Maintain the following: a) Access review report (last 30 days); "
            "b) Approval records for the reviews."
        )
    elif noun.startswith("disaster recovery"):
        how = (
            "Maintain the following: a) DR test report; b) DR test approvals by management; "
            "c) Any follow-up actions/tracking."
        )
    elif noun == "change requests":
        how = (
            "Maintain the following: a) Record of all change requests for the audit period; "
            "b) Approval records for each change."
        )
    else:
        how = (
            "Maintain the following: a) Relevant report or export (last 30 days, or include a dated document); "
            "b) Approval/attestation for the outcome."
        )
    return {
        "what": f"Provide evidence to show that {noun} are documented and approved.",
        "how": how,
    }


# ---------- Scorer ----------


def score_et(item: dict, standard: dict | None = None) -> dict:
    """Score one Evidence Task ({what_to_collect, how_to_collect}) and return the ScoreResponse."""
    standard = standard or load_standard("et")
    what = coerce_field(item.get("what_to_collect"))
    how = coerce_field(item.get("how_to_collect"))
    both = f"{what}\n\n{how}"

    checks = {
        "what": [
            eval_single_focus(what),
            eval_outcome_phrasing(what),
            eval_concise(
                what,
                rule(standard, "what", "concise_soft_chars", 160),
                rule(standard, "what", "concise_hard_chars", 220),
            ),
            eval_no_artifact_leakage(what),
            eval_role_aware_scope(what),
            eval_tech_agnostic_what(what),
        ],
        "how": [
            eval_tangible_artifacts(how),
            eval_role_neutral(how),
            eval_structure_bonus(how),
            eval_tech_agnostic_how(how),
            eval_framework_agnostic(how),
            eval_no_impl_steps(how),
        ],
        "cohesion": [
            eval_what_how_alignment(what, how),
            eval_owner_system_time(how),
        ],
        "clarity": [
            eval_plain_language(both),
            eval_no_jargon(both),
            eval_grammar_style(both),
        ],
    }
    response = assemble_response(standard, checks)
    response["proposed"] = propose_rewrite(what)
    return response
