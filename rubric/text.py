"""Text helpers shared by the Control and Evidence Task checks."""

import re

from nltk.stem import PorterStemmer

from rubric import patterns

_stemmer = PorterStemmer()

STOP_WORDS = frozenset(
    "a an and are as at be been by for from has have in is it of on or that the to was were with "
    "all any each every their these this those".split()
)

# Words that count as the same concept when comparing What and How.
SYNONYM_GROUPS = (
    ("review", "audit", "assessment", "evaluation", "inspection"),
    ("approval", "approve", "signoff", "authorization", "authorisation", "attestation"),
    ("password", "credential", "secret", "passphrase"),
    ("access", "permission", "entitlement", "privilege"),
    ("backup", "recovery", "restore", "restoration"),
    ("test", "exercise", "drill", "simulation"),
    ("log", "record", "trail", "register"),
    ("change", "modification"),
    ("vulnerability", "weakness", "finding"),
    ("incident", "event", "breach"),
)


def _build_synonym_index() -> dict:
    index = {}
    for group in SYNONYM_GROUPS:
        canonical = _stemmer.stem(group[0])
        for word in group:
            index[_stemmer.stem(word)] = canonical
    return index


_SYNONYMS = _build_synonym_index()


def coerce_field(value) -> str:
    """Missing/None -> "", anything else -> str(value)."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def word_count(text: str) -> int:
    return len(text.split())


def dedupe(items) -> list:
    """Drop empties and repeats, keep first-seen order."""
    return list(dict.fromkeys(i for i in items if i))


def looks_structured(text: str) -> bool:
    return patterns.STRUCTURE_MARKER.search(text) is not None


def extract_steps(text: str) -> list[str]:
    """
    Steps are lines that start with a list marker. When there are none,
    fall back to inline "1. ... 2. ..." segments up to the next semicolon.
    """
    steps = [line.strip() for line in text.split("\n") if patterns.STEP_LINE.match(line)]
    if steps:
        return steps
    for m in patterns.INLINE_NUMBERED_STEP.finditer(text):
        step_text = m.group(2).strip()
        if len(step_text) > 5:
            steps.append(step_text)
    return steps


def count_sentences(text: str) -> int:
    return len([s for s in patterns.SENTENCE_SPLIT.split(text) if s])


def strip_standard_prefix(text: str) -> str:
    return patterns.STANDARD_PREFIX_STRIP.sub("", text, count=1)


def extract_key_terms(what: str) -> list[str]:
    """Pull the outcome subject, hyphenated compounds and tech phrases out of a What statement."""
    cleaned = strip_standard_prefix(what)
    terms = []

    subject = patterns.KEY_TERM_SUBJECT.search(cleaned)
    if subject:
        s = subject.group(1).strip()
        if len(s) > 5:
            terms.append(s.lower())

    terms.extend(h.lower() for h in patterns.KEY_TERM_HYPHENATED.findall(cleaned))
    terms.extend(p.lower() for p in patterns.KEY_TERM_TECH_PHRASE.findall(cleaned))

    return [t for t in dedupe(terms) if len(t) > 5]


def concept(token: str) -> str:
    """Stem a token and fold it onto its synonym group."""
    stem = _stemmer.stem(token.lower())
    return _SYNONYMS.get(stem, stem)


def concept_set(text: str) -> set[str]:
    tokens = re.findall(r"[a-z0-9]+", (text or "").lower())
    return {concept(t) for t in tokens if t not in STOP_WORDS}


def term_in_text(term: str, text_lower: str, text_concepts: set[str]) -> bool:
    """
    Literal match first (term, singular, plural), then a concept match where
    every content word of the term has a stemmed/synonym counterpart in the text.
    """
    singular = term[:-1] if term.endswith("s") else term
    plural = term if term.endswith("s") else term + "s"
    if term in text_lower or singular in text_lower or plural in text_lower:
        return True
    term_concepts = concept_set(term)
    return bool(term_concepts) and term_concepts <= text_concepts
