"""Control checks: ID, Name, Description and Guidance quality."""

import re

from rubric import patterns
from rubric.scoring.engine import assemble_response, grade, make_check
from rubric.standards import load_standard, rule
from rubric.text import coerce_field, extract_steps, looks_structured, word_count
from rubric.utils import round_half_up

# ---------- ID quality ----------


def eval_id_structured(control_id: str) -> dict:
    structured = "." in control_id
    violations = [] if structured else ["Use structured format with separator (e.g., GDPR.1.1 or NIST.AC.1)"]
    points = 20 if structured else 12
    return make_check(
        "id.structured", "Structured format (prefix.section.number)", points, 20,
        "PASS" if points == 20 else "WARN", violations,
    )


def eval_id_length(control_id: str, max_length: int = 24) -> dict:
    length = len(control_id)
    violations = []
    if length == 0:
        points = 0
        violations.append("ID cannot be empty")
    elif length > max_length:
        points = 8
        violations.append(f"ID too long ({length} chars). Keep under {max_length} characters.")
    else:
        points = 15
    return make_check("id.length", "Appropriate length", points, 15, grade(points, 15, 10), violations)


def eval_id_uniqueness(control_id: str) -> dict:
    """Only checks the ID is present; real uniqueness needs the control catalogue."""
    if control_id.strip():
        return make_check(
            "id.uniqueness", "Uniqueness (assumed within framework)", 15, 15, "PASS",
            notes="Uniqueness validation requires database check",
        )
    return make_check("id.uniqueness", "Uniqueness (assumed within framework)", 0, 15, "FAIL", notes="ID is empty")


# ---------- Name quality ----------


def eval_name_concise(name: str, max_words: int = 12) -> dict:
    words = word_count(name)
    violations = []
    if words == 0:
        points = 0
        violations.append("Name cannot be empty")
    elif words > max_words:
        points = 15
        violations.append(f"Too verbose ({words} words). Keep under {max_words} words.")
    else:
        points = 25
    return make_check(
        "name.concise", f"Concise (≤{max_words} words)", points, 25, grade(points, 25, 15), violations
    )


def eval_name_action_oriented(name: str) -> dict:
    points = 25
    violations = []
    if not patterns.ACTION_WORDS.search(name):
        points -= 8
        violations.append(
            "Use action-oriented or specific language (e.g., 'Protection of...', 'Access Review Process')"
        )
    if patterns.VAGUE_NAME_WORDS.search(name):
        points -= 5
        violations.append("Avoid vague terms. Be specific about what the control addresses.")
    return make_check(
        "name.action_oriented", "Action-oriented or specific language", points, 25,
        grade(points, 25, 18), violations,
    )


def eval_name_purpose_clarity(name: str) -> dict:
    points = 25
    violations = []
    if word_count(name) < 2:
        points -= 10
        violations.append("Name too short. Add context about the control's purpose.")
    if patterns.GENERIC_NAME.match(name.strip()):
        points -= 10
        violations.append("Name too generic. Specify what aspect is being controlled.")
    return make_check("name.purpose_clarity", "Purpose clarity", points, 25, grade(points, 25, 18), violations)


def eval_name_role_neutral(name: str) -> dict:
    if patterns.ROLE_SPECIFIC.search(name):
        return make_check(
            "name.role_neutral", "Role-neutral", 15, 25, "WARN",
            ["Avoid role-specific references in the name to ensure applicability across organizational structures"],
        )
    return make_check("name.role_neutral", "Role-neutral", 25, 25, "PASS")


# ---------- Description quality ----------


def eval_desc_present_tense(desc: str) -> dict:
    points = 25
    violations = []
    if not patterns.PRESENT_TENSE.search(desc):
        points -= 10
        violations.append(
            "Use present tense to convey the requirement is always applicable (e.g., 'is configured', 'are reviewed')"
        )
    if patterns.FUTURE_TENSE.search(desc):
        points -= 8
        violations.append("Avoid future tense ('will be'). Use present tense ('is').")
    return make_check("desc.present_tense", "Present tense", points, 25, grade(points, 25, 15), violations)


def eval_desc_passive_voice(desc: str) -> dict:
    points = 25
    violations = []
    if not patterns.PASSIVE_VOICE.search(desc):
        points -= 8
        violations.append("Prefer passive voice for role-neutrality (e.g., 'Data is encrypted' not 'IT encrypts data')")
    if patterns.DIRECTIVE_VERBS.search(desc) or patterns.ROLE_SPECIFIC.search(desc):
        points -= 10
        violations.append("Avoid active voice directives. State the condition/outcome, not who performs it.")
    return make_check(
        "desc.passive_voice", "Passive voice (role-neutral)", points, 25, grade(points, 25, 15), violations
    )


def eval_desc_no_modal_verbs(desc: str) -> dict:
    label = "No modal verbs (should/must/shall/ensure)"
    if patterns.MODAL_VERBS.search(desc):
        return make_check(
            "desc.no_modal_verbs", label, 0, 25, "FAIL",
            ["Remove modal verbs (should/could/may/must/ensure). State the requirement definitively in present tense."],
        )
    return make_check("desc.no_modal_verbs", label, 25, 25, "PASS")


def eval_desc_single_objective(desc: str) -> dict:
    """Counts distinct outcomes ("is/are ...ed"), not sentences."""
    outcomes = patterns.OUTCOME_STATEMENT.findall(desc)
    points = 20
    violations = []
    if len(outcomes) > 2:
        points -= 10
        violations.append(
            f"Multiple outcomes detected ({len(outcomes)} different states/results). Focus on one outcome per control."
        )
    if len(patterns.AND_WORD.findall(desc)) >= 3:
        points -= 5
        violations.append("Too many 'and' conjunctions. Consider if this is actually multiple controls.")
    if patterns.OR_WORD.search(desc):
        points -= 5
        violations.append("'Or' clauses suggest ambiguity. Choose one clear objective.")
    return make_check("desc.single_objective", "Single objective", points, 20, grade(points, 20, 12), violations)


def eval_desc_no_steps(desc: str) -> dict:
    if patterns.INLINE_LIST_STEP.search(desc) or patterns.IMPLEMENTATION_LEAD_IN.search(desc):
        return make_check(
            "desc.no_steps", "No implementation steps", 0, 25, "FAIL",
            [
                "Description contains implementation steps. Move steps to Guidance section. "
                "Description should only state the outcome/requirement."
            ],
        )
    return make_check("desc.no_steps", "No implementation steps", 25, 25, "PASS")


def eval_desc_word_count(desc: str, min_words: int = 15, max_words: int = 45) -> dict:
    words = word_count(desc)
    points = 20
    violations = []
    if words < min_words:
        points -= 10
        violations.append(f"Too brief ({words} words). Add clarity. Aim for {min_words}-{max_words} words.")
    elif words > max_words:
        points -= 8
        violations.append(f"Too verbose ({words} words). Be concise. Aim for {min_words}-{max_words} words.")
    status = "PASS" if not violations else grade(points, 20, 12)
    return make_check("desc.word_count", f"Word count ({min_words}-{max_words})", points, 20, status, violations)


def _is_expanded(acronym: str, text: str) -> bool:
    """Expanded either as "DPO (Data Protection Officer)" or "Data Protection Officer (DPO)"."""
    a = re.escape(acronym)
    return bool(re.search(rf"\b{a}\b\s*\([^)]+\)", text) or re.search(rf"\([^)]*\b{a}\b[^)]*\)", text))


def eval_desc_standalone_clarity(desc: str) -> dict:
    points = 20
    violations = []
    if patterns.VAGUE_QUALIFIERS.search(desc):
        points -= 8
        violations.append("Avoid vague qualifiers (appropriate/adequate). Be specific about requirements.")
    unexpanded = [a for a in patterns.ACRONYM.findall(desc) if not _is_expanded(a, desc)]
    if unexpanded:
        points -= 5
        violations.append(f'Expand acronym on first use: "{unexpanded[0]}" → "Full Term ({unexpanded[0]})"')
    return make_check(
        "desc.standalone_clarity", "Standalone clarity", points, 20, grade(points, 20, 12), violations
    )


# ---------- Guidance quality ----------


def eval_guid_preamble(guidance: str, min_words: int = 15) -> dict:
    label = "Preamble (what + why)"
    lines = [line for line in guidance.split("\n") if line.strip()]
    if not lines:
        return make_check(
            "guid.preamble", label, 0, 30, "FAIL",
            ["Add guidance with a preamble explaining objective and rationale"],
            notes="Guidance is empty",
        )

    first_line = lines[0].strip()
    if patterns.PREAMBLE_LIST_START.match(first_line) or patterns.PREAMBLE_DIRECTIVE_START.match(first_line):
        return make_check(
            "guid.preamble", label, 0, 30, "FAIL",
            [
                "No preamble found. Begin with 2-3 sentences explaining what this control achieves "
                "and why it matters before listing steps."
            ],
        )

    split = patterns.PREAMBLE_SPLIT.match(guidance)
    preamble = split.group(1).strip() if split else guidance[:400]
    preamble_words = word_count(preamble)

    points = 30
    violations = []
    if preamble_words < min_words:
        points -= 12
        violations.append(
            f"Preamble too brief ({preamble_words} words). Provide at least 2-3 sentences "
            f"({min_words}+ words) explaining the control's purpose."
        )
    if not patterns.PREAMBLE_OBJECTIVE.search(preamble):
        points -= 10
        violations.append("Preamble must state the objective (what this control achieves)")
    if not patterns.PREAMBLE_RATIONALE.search(preamble):
        points -= 8
        violations.append("Preamble must explain rationale (why this control matters)")
    return make_check("guid.preamble", label, points, 30, grade(points, 30, 20), violations)


def eval_guid_structured_steps(guidance: str, steps_min: int = 2, steps_max: int = 8) -> dict:
    step_count = len(extract_steps(guidance))
    points = 30
    violations = []
    if not looks_structured(guidance):
        points -= 15
        violations.append("Format steps as a numbered or bulleted list (e.g., 1. Step one; 2. Step two)")
    if step_count < steps_min:
        points -= 10
        violations.append(f"Too few steps ({step_count}). Provide {steps_min}-{steps_max} actionable steps.")
    elif step_count > steps_max:
        points -= 8
        violations.append(f"Too many steps ({step_count}). Consolidate to {steps_min}-{steps_max} key steps.")
    return make_check(
        "guid.structured_steps", f"Structured steps ({steps_min}-{steps_max})", points, 30,
        grade(points, 30, 18), violations,
    )


def _starts_with_action(step: str) -> bool:
    words = patterns.STEP_PREFIX.sub("", step, count=1).strip().split()
    first = words[0] if words else ""
    return (
        re.match(r"[A-Z]", first) is not None
        and not patterns.STEP_NON_ACTION_WORD.match(first)
        and len(first) >= 3
    )


def eval_guid_actionable(guidance: str) -> dict:
    """
    With two or more steps, score the share that open with a capitalised verb.
    Otherwise fall back to counting action verbs anywhere in the text.
    """
    label = "Steps are actionable"
    steps = extract_steps(guidance)
    violations = []

    if len(steps) >= 2:
        actionable = sum(1 for s in steps if _starts_with_action(s))
        points = round_half_up(20 * actionable / len(steps))
        if actionable < len(steps):
            violations.append(
                f"{len(steps) - actionable} step(s) don't start with action verbs. "
                "Begin with: implement, configure, review, monitor, etc."
            )
        return make_check("guid.actionable", label, points, 20, grade(points, 20, 14), violations)

    verb_count = len(patterns.GUIDANCE_ACTION_VERBS.findall(guidance))
    if verb_count == 0:
        points = 0
        violations.append("No action verbs found. Use actionable language (implement, configure, review, monitor, etc.)")
    elif verb_count < 2:
        points = 10
        violations.append("Too few actionable instructions. Provide at least 2-3 action-oriented steps.")
    else:
        points = 20
    return make_check("guid.actionable", label, points, 20, grade(points, 20, 14), violations)


def eval_guid_present_active(guidance: str) -> dict:
    points = 20
    violations = []
    if not patterns.GUIDANCE_IMPERATIVES.search(guidance):
        points -= 10
        violations.append("Use present tense action verbs (e.g., 'Configure...', 'Review...', 'Monitor...')")
    if patterns.GUIDANCE_PAST_TENSE.search(guidance):
        points -= 8
        violations.append("Avoid past tense (e.g., 'configured'). Use present tense imperatives (e.g., 'Configure')")
    if patterns.GUIDANCE_PASSIVE.search(guidance):
        points -= 7
        violations.append("Use active voice for steps (e.g., 'Review access logs' not 'Access logs are reviewed')")
    return make_check(
        "guid.present_active", "Present tense + active voice", points, 20, grade(points, 20, 12), violations
    )


def eval_guid_tech_agnostic(guidance: str) -> dict:
    found = [m.group(0) for m in patterns.CONTROL_VENDOR_NAMES.finditer(guidance)]
    if not found:
        return make_check("guid.tech_agnostic", "Technology-agnostic", 20, 20, "PASS")
    vendor_list = ", ".join(dict.fromkeys(v.lower() for v in found))
    return make_check(
        "guid.tech_agnostic", "Technology-agnostic", 10, 20, "WARN",
        [
            f'Remove vendor/tool names (found {len(found)}: "{vendor_list}"). '
            'Use generic terms (e.g., "identity management system" not "Okta")'
        ],
    )


def eval_guid_role_neutral(guidance: str) -> dict:
    if patterns.ROLE_SPECIFIC.search(guidance):
        return make_check(
            "guid.role_neutral", "Role-neutral", 10, 20, "WARN",
            [
                "Avoid role-specific references (e.g., 'security team'). "
                "Keep guidance applicable across organizational structures."
            ],
        )
    return make_check("guid.role_neutral", "Role-neutral", 20, 20, "PASS")


def eval_guid_no_jargon(guidance: str) -> dict:
    jargon = patterns.CONTROL_JARGON.search(guidance)
    if jargon:
        return make_check(
            "guid.no_jargon", "Plain language (no jargon)", 12, 20, "WARN",
            [f'Replace jargon "{jargon.group(0)}" with plain language'],
        )
    return make_check("guid.no_jargon", "Plain language (no jargon)", 20, 20, "PASS")


# ---------- Scorer ----------


def score_control(item: dict, standard: dict | None = None) -> dict:
    """
    Score one Control record ({id, name, description, guidance}) and return
    the ScoreResponse. Missing fields score as empty text; never raises on
    field content.
    """
    standard = standard or load_standard("control")
    control_id = coerce_field(item.get("id")).strip()
    name = coerce_field(item.get("name")).strip()
    desc = coerce_field(item.get("description")).strip()
    guidance = coerce_field(item.get("guidance")).strip()

    checks = {
        "id_quality": [
            eval_id_structured(control_id),
            eval_id_length(control_id, rule(standard, "id", "max_length", 24)),
            eval_id_uniqueness(control_id),
        ],
        "name_quality": [
            eval_name_concise(name, rule(standard, "name", "concise_max_words", 12)),
            eval_name_action_oriented(name),
            eval_name_purpose_clarity(name),
            eval_name_role_neutral(name),
        ],
        "description_quality": [
            eval_desc_present_tense(desc),
            eval_desc_passive_voice(desc),
            eval_desc_no_modal_verbs(desc),
            eval_desc_single_objective(desc),
            eval_desc_no_steps(desc),
            eval_desc_word_count(
                desc,
                rule(standard, "description", "min_words", 15),
                rule(standard, "description", "max_words", 45),
            ),
            eval_desc_standalone_clarity(desc),
        ],
        "guidance_quality": [
            eval_guid_preamble(guidance, rule(standard, "guidance", "preamble_min_words", 15)),
            eval_guid_structured_steps(
                guidance,
                rule(standard, "guidance", "steps_min", 2),
                rule(standard, "guidance", "steps_max", 8),
            ),
            eval_guid_actionable(guidance),
            eval_guid_present_active(guidance),
            eval_guid_tech_agnostic(guidance),
            eval_guid_role_neutral(guidance),
            eval_guid_no_jargon(guidance),
        ],
    }
    return assemble_response(standard, checks)
