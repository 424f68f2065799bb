"""Compiled patterns for the Control and Evidence Task rules.

Patterns are case-insensitive unless the name says otherwise. Check functions
only ever call .search/.findall on these, so they are safe to share.
"""

import re

_CI = re.IGNORECASE

# Lists and steps
LIST_MARKER = r"(?:[-*•]|\d+[.)]|[a-z][.)])"
STRUCTURE_MARKER = re.compile(r"(^|\n)\s*" + LIST_MARKER + r"\s+", re.MULTILINE)
STEP_LINE = re.compile(r"^\s*" + LIST_MARKER + r"\s+(.+)")
STEP_PREFIX = re.compile(r"^\s*" + LIST_MARKER + r"\s*")
INLINE_NUMBERED_STEP = re.compile(r"(\d+[.)])\s*([^;]+)")
SENTENCE_SPLIT = re.compile(r"[.!?]\s+")

# ---------- Controls ----------

MODAL_VERBS = re.compile(r"\b(should|could|may|might|must|shall|ensure|ensures|ensured)\b", _CI)
CONTROL_VENDOR_NAMES = re.compile(
    r"\b(aws|azure|gcp|google\s+cloud|okta|servicenow|cisco|palo\s*alto|fortinet|splunk|datadog"
    r"|salesforce|snowflake|crowdstrike|microsoft|oracle|ibm|sap)\b",
    _CI,
)
CONTROL_JARGON = re.compile(r"\b(utilize|leverage|synergy|holistic|best[-\s]?of[-\s]?breed|operationalize)\b", _CI)
ROLE_SPECIFIC = re.compile(
    r"\b(it|security|engineering|devops|audit|privacy|hr|legal|finance)\s+(team|dept|department|administrator|manager)\b",
    _CI,
)
DIRECTIVE_VERBS = re.compile(
    r"^\s*(configure|install|deploy|enable|set\s*up|create|develop|implement|establish|define)\b", _CI
)
PRESENT_TENSE = re.compile(
    r"\b(is|are|has|have|exists?|remains?|includes?|contains?|provides?|ensures?|maintains?|supports?"
    r"|performs?|conducts?)\b",
    _CI,
)
FUTURE_TENSE = re.compile(r"\b(will|shall|going to)\b", _CI)
PASSIVE_VOICE = re.compile(r"\b(is|are|be|being|been)\s+[a-z]+ed\b", _CI)
OUTCOME_STATEMENT = re.compile(r"\b(is|are)\s+[a-z]+ed\b", _CI)
AND_WORD = re.compile(r"\band\b", _CI)
OR_WORD = re.compile(r"\bor\b", _CI)
ACTION_WORDS = re.compile(
    r"\b(protection|detection|monitoring|review|assessment|management|implementation|configuration"
    r"|establishment|maintenance|planning|testing|auditing|tracking|reporting|training|enforcement"
    r"|validation|verification|analysis)\b",
    _CI,
)
VAGUE_NAME_WORDS = re.compile(r"\b(things|stuff|items|matters|issues)\b", _CI)
GENERIC_NAME = re.compile(r"^(security|compliance|controls?|management|system)$", _CI)

# Case-sensitive: a marker followed by a capitalised word reads as an inline step.
INLINE_LIST_STEP = re.compile(LIST_MARKER + r"\s+[A-Z]")
IMPLEMENTATION_LEAD_IN = re.compile(r"\b(to achieve|implement|steps|following|procedure|process):", _CI)
VAGUE_QUALIFIERS = re.compile(r"\b(appropriate|adequate|reasonable|sufficient|proper|effective)\b", _CI)
# Case-sensitive
ACRONYM = re.compile(r"\b([A-Z]{2,})\b")

PREAMBLE_SPLIT = re.compile(r"^([\s\S]+?)(?=\n\s*" + LIST_MARKER + r"\s+)")
PREAMBLE_LIST_START = re.compile(r"^" + LIST_MARKER + r"\s+")
PREAMBLE_DIRECTIVE_START = re.compile(
    r"^(deploy|implement|configure|monitor|review|establish|create|maintain|enable)\b", _CI
)
PREAMBLE_OBJECTIVE = re.compile(
    r"\b(objective|purpose|goal|aims?\s+to|intended\s+to|designed\s+to"
    r"|to\s+(?:ensure|establish|support|define|create|maintain|implement)"
    r"|(?:should|must|will)\s+(?:establish|define|create|ensure|support|maintain|implement))\b",
    _CI,
)
PREAMBLE_RATIONALE = re.compile(
    r"\b(rationale|because|important|critical|necessary|essential"
    r"|to\s+(?:support|enable|help|allow|protect|prevent|ensure|maintain|promote)"
    r"|(?:promotes?|enables?|supports?|ensures?|maintains?|helps?|allows?|prevents?|protects?)\b)",
    _CI,
)

STEP_NON_ACTION_WORD = re.compile(r"^(the|a|an|should|must|will|shall|may|can|could|would)$", _CI)
GUIDANCE_ACTION_VERBS = re.compile(
    r"\b(implement|configure|review|monitor|document|define|establish|maintain|enable|create|develop"
    r"|conduct|perform|verify|validate|assess|identify|ensure|designate|appoint|deploy|install|update"
    r"|track|report|communicate|publish|record|escalate|investigate|remediate|disable)\b",
    _CI,
)
GUIDANCE_IMPERATIVES = re.compile(
    r"\b(implement|configure|review|monitor|document|define|establish|maintain|enable|create|develop"
    r"|conduct|perform|verify|validate|assess|identify|designate|appoint)\b",
    _CI,
)
GUIDANCE_PAST_TENSE = re.compile(
    r"\b(configured|reviewed|implemented|established|created|developed|maintained|enabled|conducted|performed)\b",
    _CI,
)
GUIDANCE_PASSIVE = re.compile(
    r"\b(is|are|be)\s+(?:configured|reviewed|implemented|established|maintained|enabled|conducted|performed)\b",
    _CI,
)

# ---------- Evidence Tasks ----------

STANDARD_PREFIX = re.compile(r"^\s*provide evidence (?:to show|that)\b", _CI)
STANDARD_PREFIX_STRIP = re.compile(r"^\s*provide evidence (?:to show|that)\s+", _CI)
ARTIFACT_NOUNS = re.compile(
    r"\b(diagrams?|reports?|exports?|screenshots?|logs?|tickets?|records?|registers?|configs?"
    r"|attestations?|approvals?|sign[-\s]?offs?|evidence)\b",
    _CI,
)
WHAT_OUTCOME_LIKE = re.compile(
    r"\b(has\s+been|is\s+configured|are\s+documented|results\s+are\s+recorded|is\s+performed"
    r"|is\s+maintained|is\s+in\s+place|are\s+completed|are\s+approved)\b",
    _CI,
)
ENSURE_WORD = re.compile(r"\bensure(s|d)?\b", _CI)
WHAT_DIRECTIVE_START = re.compile(
    r"^\s*(provide|maintain|attach|review|configure|monitor|create|produce|document|conduct|perform|ensure)\b",
    _CI,
)
VAGUE_WORDS = re.compile(r"\b(appropriate|adequate|reasonable|sufficient|as\s+necessary|as\s+needed)\b", _CI)
SLANG_WORDS = re.compile(r"\b(apps)\b", _CI)
# Case-sensitive
ACRONYMS_NEED_EXPANSION = re.compile(r"\b(DR|CAB)\b")
ET_JARGON = re.compile(r"\b(utilize|leverage|synergy|holistic|best[-\s]?of[-\s]?breed)\b", _CI)
ET_VENDOR_NAMES = re.compile(
    r"\b(aws|azure|gcp|google\s+cloud|okta|servicenow|cisco|palo\s*alto|paloalto|fortinet|checkpoint"
    r"|splunk|datadog|salesforce|snowflake|crowdstrike)\b",
    _CI,
)
RELATIVE_TIME = re.compile(
    r"\b(last|past)\s+\d+\s+(?:day|days|week|weeks|month|months|quarter|quarters|year|years)\b", _CI
)
EXPLICIT_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2}|\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|timestamp(ed)?|dated)\b", _CI)
COMPARABLE_TIME = re.compile(r"\b(last\s+\d+\s+\w+|\d{4}-\d{2}-\d{2})\b", _CI)
FRAMEWORK_TIEIN = re.compile(r"\b(iso\s*27001|soc\s*2|nist|pci\s*dss|hipaa|gdpr|annex|clause|article\s+\d+)\b", _CI)
CROSS_DEPT = re.compile(r"\b(hr|human\s+resources|finance|marketing|sales|legal|procurement)\b", _CI)
COLLECTION_VERBS = re.compile(
    r"\b(provide|attach|include|maintain|retain|export|query|capture|collect|upload|submit|link|store)\b", _CI
)
ONE_OR_MORE_OF = re.compile(r"\bone or more of\b", _CI)
BROAD_SCOPE = re.compile(
    r"\b(all\s+(apps|applications|systems|users|departments|teams)|organization[-\s]?wide|enterprise[-\s]?wide)\b",
    _CI,
)
HEAVY_CHAIN = re.compile(r"[,;]\s*and\b|\band\b.+\band\b", _CI)
TIME_SENSITIVE_ARTIFACTS = re.compile(r"\b(logs?|tickets?|records?|registers?|reports?|exports?)\b", _CI)
POINT_IN_TIME_ARTIFACTS = re.compile(r"\b(screenshots?|diagrams?|configs?|configurations?|attestations?)\b", _CI)
CURRENCY_INDICATORS = re.compile(r"\b(current|existing|active|running|in[-\s]?place|production|live)\b", _CI)

ROLE_DIRECTED = re.compile(
    r"\b(security|it|engineering|devops|audit|privacy|compliance|hr|legal|finance|admin|manager|director"
    r"|officer|analyst|specialist|coordinator)\s+(team|dept|department|staff|personnel|manager|director|officer)\b",
    _CI,
)
ROLE_ASSIGNMENT = re.compile(r"\b(must|shall|should|will|responsible for|assigned to|performed by)\b", _CI)
IMPLEMENTATION_VERBS = re.compile(r"\b(configure|install|deploy|enable|set\s*up|hardening|patch|code|develop)\b", _CI)

APPROVAL_ARTIFACT = re.compile(
    r"\b(approval|sign[-\s]?off|attestation|authorization)(?:\s+(?:records?|documentation|evidence|report))?\b", _CI
)
SYSTEM_REFERENCE = re.compile(r"\b(system|application|service|platform|tool|solution)\b", _CI)

OWNERSHIP_CONCEPTS = re.compile(
    r"\b(centrally[-\s]administered|decentralized|shared|individual|personal|organizational|departmental)\b", _CI
)
IDENTITY_CONCEPTS = re.compile(r"\b(anonymization|anonymized|de[-\s]identified|identified|named)\b", _CI)

# Subject capped at 120 characters.
KEY_TERM_SUBJECT = re.compile(r"\b([A-Za-z][\w\s-]{0,120}?)\s+(?:are|is|has\s+been|have\s+been|were|was)\b", _CI)
KEY_TERM_HYPHENATED = re.compile(r"\b([a-z]+(?:-[a-z]+){1,3})\b", _CI)
KEY_TERM_TECH_PHRASE = re.compile(
    r"\b([a-z]+\s+(?:password|credential|access|review|test|recovery|management|control|security|configuration)s?)\b",
    _CI,
)

# Thirty or more words with no sentence break between them.
LONG_SENTENCE = re.compile(r"\b(\w+\b[\s,;:]){30,}")
