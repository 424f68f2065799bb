"""Control checks: individual rules and full score_control responses."""

import pytest

from rubric.scoring import controls
from rubric.scoring.controls import score_control
from rubric.standards import load_standard

WELL_FORMED_CONTROL = {
    "id": "GDPR.1.1",
    "name": "Access Review Process",
    "description": (
        "User access to production systems is reviewed quarterly against approved role definitions, "
        "and access that is no longer required is removed promptly."
    ),
    "guidance": (
        "The purpose of this control is to confirm that access stays limited to current business need. "
        "Regular review is important because stale permissions increase exposure.\n"
        "1. Export the current user access list for each production system.\n"
        "2. Compare each account against documented role definitions.\n"
        "3. Revoke access that is no longer required.\n"
        "4. Record review outcomes and retain them for audit."
    ),
}


def _check(response: dict, check_id: str) -> dict:
    for dim in response["dimensions"].values():
        for check in dim["checks"]:
            if check["id"] == check_id:
                return check
    raise AssertionError(f"check {check_id} not in response")


def test_empty_control_fails_and_is_gated():
    """Empty id/name/description/guidance → fail, gated by the empty-ID check."""
    response = score_control({})
    assert response["verdict"] == "fail"
    assert response["total"]["gated_fail"] is True

    uniqueness = _check(response, "id.uniqueness")
    assert uniqueness["points"] == 0
    assert uniqueness["status"] == "FAIL"

    assert _check(response, "guid.preamble")["status"] == "FAIL"
    assert _check(response, "name.concise")["points"] == 0


def test_well_formed_control_passes():
    """A control that satisfies every rule scores 100 and passes."""
    response = score_control(WELL_FORMED_CONTROL)
    assert response["verdict"] == "pass"
    assert response["total"]["score"] == 100
    assert response["total"]["gated_fail"] is False
    assert response["messages"] == []
    assert response["suggestions"] == []
    assert all(d["score"] == 100 for d in response["dimensions"].values())


def test_response_shape():
    """Response carries version, formula, weights and the four control dimensions in order."""
    response = score_control(WELL_FORMED_CONTROL)
    assert response["version"] == "v1"
    assert response["total"]["max"] == 100
    assert response["total"]["formula"] == "TOTAL = 0.15*ID + 0.15*NAME + 0.30*DESC + 0.40*GUIDANCE"
    assert list(response["dimensions"]) == [
        "id_quality",
        "name_quality",
        "description_quality",
        "guidance_quality",
    ]
    assert "proposed" not in response


def test_directive_first_line_means_no_preamble():
    """Guidance that opens with a directive has no preamble → 0 points, FAIL."""
    guidance = "Configure the firewall.\n1. Enable logging.\n2. Review alerts weekly."
    check = controls.eval_guid_preamble(guidance)
    assert check["points"] == 0
    assert check["status"] == "FAIL"
    assert "No preamble found" in check["violations"][0]


def test_list_first_line_means_no_preamble():
    """Guidance that opens straight into a list has no preamble."""
    check = controls.eval_guid_preamble("1. Enable logging.\n2. Review alerts weekly.")
    assert check["points"] == 0
    assert check["status"] == "FAIL"


def test_vendor_name_in_guidance_warns():
    """A vendor name in guidance → WARN naming the vendor."""
    check = controls.eval_guid_tech_agnostic("Configure Okta for SSO.")
    assert check["status"] == "WARN"
    assert check["points"] == 10
    assert "okta" in check["violations"][0]


def test_unstructured_id_warns():
    """IDs without a separator lose points but are not a failure."""
    check = controls.eval_id_structured("AC1")
    assert check["points"] == 12
    assert check["status"] == "WARN"


def test_long_id_fails_length():
    """IDs past the maximum length score 8/15."""
    check = controls.eval_id_length("X" * 30)
    assert check["points"] == 8
    assert check["status"] == "FAIL"
    assert check["violations"] == ["ID too long (30 chars). Keep under 24 characters."]


def test_verbose_name_warns():
    """13-word name exceeds the 12-word limit."""
    name = "Review of user access rights across every production system owned by the company"
    check = controls.eval_name_concise(name)
    assert check["points"] == 15
    assert check["status"] == "WARN"


def test_modal_verb_in_description_fails():
    """should/must/ensure in a description zeroes the modal-verb check."""
    check = controls.eval_desc_no_modal_verbs("Access must be reviewed every quarter.")
    assert check["points"] == 0
    assert check["status"] == "FAIL"


def test_empty_description_is_too_brief():
    """Empty description → 0 words, too brief."""
    check = controls.eval_desc_word_count("")
    assert check["points"] == 10
    assert check["violations"][0].startswith("Too brief (0 words)")


def test_unexpanded_acronym_flagged():
    """Acronyms need expanding on first use, in either order."""
    bare = controls.eval_desc_standalone_clarity("Personal data requests are handled by the DPO.")
    assert bare["status"] == "WARN"
    assert "DPO" in bare["violations"][0]

    expanded = controls.eval_desc_standalone_clarity(
        "Personal data requests are handled by the Data Protection Officer (DPO)."
    )
    assert expanded["status"] == "PASS"


def test_steps_in_description_fail():
    """Inline list steps belong in guidance, not description."""
    check = controls.eval_desc_no_steps("Access is controlled. 1. Review accounts 2. Remove leavers")
    assert check["points"] == 0
    assert check["status"] == "FAIL"


def test_actionable_scores_share_of_action_steps():
    """Half the steps open with an action verb → 10/20."""
    check = controls.eval_guid_actionable("1. the logs are checked daily\n2. Review alerts weekly")
    assert check["points"] == 10
    assert check["status"] == "FAIL"
    assert check["violations"][0].startswith("1 step(s) don't start with action verbs")


def test_role_specific_name_warns():
    """Team names in a control name → WARN."""
    check = controls.eval_name_role_neutral("Security Team Access Review")
    assert check["status"] == "WARN"
    assert check["points"] == 15


def test_non_string_fields_are_coerced():
    """Numbers and None are scored as text, never raise."""
    response = score_control({"id": 101, "name": None, "description": 3.5, "guidance": ""})
    assert response["verdict"] in ("pass", "partial", "fail")
    assert _check(response, "id.length")["points"] == 15


def test_standard_rules_are_injected_per_call():
    """Rule values come from the standard passed in, not process state."""
    standard = load_standard("control")
    standard["rules"]["id"]["max_length"] = 5

    strict = score_control({"id": "GDPR.1.1"}, standard)
    default = score_control({"id": "GDPR.1.1"})
    assert _check(strict, "id.length")["points"] == 8
    assert _check(default, "id.length")["points"] == 15


@pytest.mark.parametrize("field", ["id", "name", "description", "guidance"])
def test_whitespace_only_field_matches_missing(field):
    """Whitespace-only fields score the same as missing ones."""
    assert score_control({field: "   \n  "}) == score_control({})


def test_name_action_oriented():
    """Missing action wording and vague nouns each cost points."""
    good = controls.eval_name_action_oriented("Access Review Process")
    assert good["points"] == 25
    assert good["status"] == "PASS"

    no_action = controls.eval_name_action_oriented("Password Rules")
    assert no_action["points"] == 17
    assert no_action["status"] == "FAIL"

    vague = controls.eval_name_action_oriented("Monitoring of Various Items")
    assert vague["points"] == 20
    assert vague["status"] == "WARN"
    assert vague["violations"] == ["Avoid vague terms. Be specific about what the control addresses."]


def test_name_purpose_clarity():
    assert controls.eval_name_purpose_clarity("Data Encryption Standard")["points"] == 25

    short = controls.eval_name_purpose_clarity("Encryption")
    assert short["points"] == 15
    assert short["status"] == "FAIL"

    generic = controls.eval_name_purpose_clarity("Security")
    assert generic["points"] == 5
    assert generic["status"] == "FAIL"
    assert len(generic["violations"]) == 2


def test_desc_present_tense():
    """Missing present tense and future tense are separate deductions."""
    good = controls.eval_desc_present_tense("Access is reviewed quarterly.")
    assert good["points"] == 25
    assert good["status"] == "PASS"

    future = controls.eval_desc_present_tense("Access is reviewed and will be logged.")
    assert future["points"] == 17
    assert future["status"] == "WARN"
    assert future["violations"] == ["Avoid future tense ('will be'). Use present tense ('is')."]

    no_present = controls.eval_desc_present_tense("Access reviewed quarterly.")
    assert no_present["points"] == 15
    assert no_present["status"] == "WARN"

    both = controls.eval_desc_present_tense("Access will be reviewed.")
    assert both["points"] == 7
    assert both["status"] == "FAIL"


def test_desc_passive_voice():
    good = controls.eval_desc_passive_voice("Access is reviewed quarterly.")
    assert good["points"] == 25
    assert good["status"] == "PASS"

    directive = controls.eval_desc_passive_voice("Configure access reviews quarterly.")
    assert directive["points"] == 7
    assert directive["status"] == "FAIL"
    assert len(directive["violations"]) == 2

    by_role = controls.eval_desc_passive_voice("Access is reviewed by the security team.")
    assert by_role["points"] == 15
    assert by_role["status"] == "WARN"
    assert by_role["violations"][0].startswith("Avoid active voice directives")


def test_desc_single_objective():
    """Three outcomes, three 'and's or any 'or' each pull the score down."""
    good = controls.eval_desc_single_objective("Access is reviewed quarterly.")
    assert good["points"] == 20
    assert good["status"] == "PASS"

    outcomes = controls.eval_desc_single_objective("Data is encrypted, logs are retained and keys are rotated.")
    assert outcomes["points"] == 10
    assert outcomes["status"] == "FAIL"
    assert outcomes["violations"][0].startswith("Multiple outcomes detected (3 different states/results)")

    ands = controls.eval_desc_single_objective("Access and logs and keys and secrets are reviewed.")
    assert ands["points"] == 15
    assert ands["status"] == "WARN"

    either = controls.eval_desc_single_objective("Access is revoked or suspended.")
    assert either["points"] == 15
    assert either["status"] == "WARN"
    assert either["violations"] == ["'Or' clauses suggest ambiguity. Choose one clear objective."]


def test_guid_structured_steps():
    good = controls.eval_guid_structured_steps(
        "1. Export the access list\n2. Review each account\n3. Remove stale accounts"
    )
    assert good["points"] == 30
    assert good["status"] == "PASS"

    prose = controls.eval_guid_structured_steps("Review access quarterly and remove stale accounts.")
    assert prose["points"] == 5
    assert prose["status"] == "FAIL"

    too_few = controls.eval_guid_structured_steps("Access is reviewed as follows.\n1. Export the access list")
    assert too_few["points"] == 20
    assert too_few["status"] == "WARN"
    assert too_few["violations"] == ["Too few steps (1). Provide 2-8 actionable steps."]

    too_many = controls.eval_guid_structured_steps("\n".join(f"{i}. Review control area {i}" for i in range(1, 10)))
    assert too_many["points"] == 22
    assert too_many["status"] == "WARN"
    assert too_many["violations"] == ["Too many steps (9). Consolidate to 2-8 key steps."]


def test_actionable_counts_verbs_without_steps():
    """Fewer than two steps → score by action verbs found anywhere."""
    two_verbs = controls.eval_guid_actionable("Review access and monitor logs.")
    assert two_verbs["points"] == 20
    assert two_verbs["status"] == "PASS"

    one_step = controls.eval_guid_actionable("1. Review access quarterly")
    assert one_step["points"] == 10
    assert one_step["status"] == "FAIL"
    assert one_step["violations"][0].startswith("Too few actionable instructions")

    none = controls.eval_guid_actionable("Access is checked.")
    assert none["points"] == 0
    assert none["status"] == "FAIL"


def test_guid_present_active():
    good = controls.eval_guid_present_active("Review access monthly.")
    assert good["points"] == 20
    assert good["status"] == "PASS"

    past = controls.eval_guid_present_active("Review access. Firewall rules were configured.")
    assert past["points"] == 12
    assert past["status"] == "WARN"

    past_passive = controls.eval_guid_present_active("Review access. Logs are reviewed weekly.")
    assert past_passive["points"] == 5
    assert past_passive["status"] == "FAIL"
    assert len(past_passive["violations"]) == 2

    no_imperative = controls.eval_guid_present_active("Access logs are checked.")
    assert no_imperative["points"] == 10
    assert no_imperative["status"] == "FAIL"


def test_guid_role_neutral():
    team = controls.eval_guid_role_neutral("Review access with the IT team.")
    assert team["points"] == 10
    assert team["status"] == "WARN"

    assert controls.eval_guid_role_neutral("Review access quarterly.")["status"] == "PASS"


def test_guid_jargon_warns():
    check = controls.eval_guid_no_jargon("Leverage the access logs to review accounts.")
    assert check["points"] == 12
    assert check["status"] == "WARN"
    assert check["violations"] == ['Replace jargon "Leverage" with plain language']

    assert controls.eval_guid_no_jargon("Review the access logs.")["points"] == 20
