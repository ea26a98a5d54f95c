"""
Subject and language normalisation.

Students, the publisher's index page and the static dataset all spell
subjects differently ("maths", "Mathematics", "S.S", "History", ...). The
rules here fold those spellings into a small set of canonical subject groups
and derive the slugs and ids used as catalog keys.
"""

import re
import unicodedata

MATH = "Math"
SCIENCE = "Science"
SOCIAL_SCIENCE = "Social Science"

# Ordered: first matching rule wins. Social Science sits before Science so
# "Social Science" and "Political Science" land in the right group.
SUBJECT_GROUP_RULES: list[tuple[str, list[re.Pattern]]] = [
    (MATH, [re.compile(p, re.IGNORECASE) for p in (r"math", r"ganit", r"riyazi")]),
    (
        SOCIAL_SCIENCE,
        [
            re.compile(p, re.IGNORECASE)
            for p in (
                r"social",
                r"history",
                r"geography",
                r"political",
                r"\bcivics?\b",
                r"\beconomics?\b",
                r"^s\.?\s*s\.?$",
            )
        ],
    ),
    (SCIENCE, [re.compile(p, re.IGNORECASE) for p in (r"\bscience\b", r"vigyan")]),
]

LANGUAGE_CODE_LOOKUP = {
    "e": "English",
    "h": "Hindi",
    "u": "Urdu",
    "s": "Sanskrit",
}

_LANGUAGE_VOCABULARY = [
    ("Hindi", re.compile(r"hindi|bhag|bharati|bhugol|bhartiya|kavita|manav|sanchayan")),
    ("Urdu", re.compile(r"urdu|adab|khayaban|riyazi|jarah")),
    ("Sanskrit", re.compile(r"sanskrit|shaswati|bhaswati|vedic")),
]

# Free-form subject choices typed into the summary form
SUBJECT_SYNONYMS = {
    "math": MATH,
    "maths": MATH,
    "mathematics": MATH,
    "science": SCIENCE,
    "social science": SOCIAL_SCIENCE,
    "social studies": SOCIAL_SCIENCE,
    "s.s": SOCIAL_SCIENCE,
    "s.s.": SOCIAL_SCIENCE,
    "ss": SOCIAL_SCIENCE,
    "social": SOCIAL_SCIENCE,
    "history": SOCIAL_SCIENCE,
    "geography": SOCIAL_SCIENCE,
}


def title_case(value: str) -> str:
    """Capitalize every whitespace separated word."""
    return " ".join(word[0].upper() + word[1:].lower() for word in value.split())


def slugify(value: str) -> str:
    """
    Lowercase ASCII slug with hyphens.

    Example:
        slugify("Social Science")  # 'social-science'
        slugify("???")             # 'n-a'
    """
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode()
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_value.lower()).strip("-")
    return slug or "n-a"


def resolve_subject_group(subject_name: str) -> str:
    """
    Map a subject name to its canonical group.

    Unmatched names are title-cased and become their own group.

    Example:
        resolve_subject_group("mathematics ")  # 'Math'
        resolve_subject_group("History")       # 'Social Science'
        resolve_subject_group("english")       # 'English'
    """
    normalized = subject_name.strip().lower()
    for group, patterns in SUBJECT_GROUP_RULES:
        if any(pattern.search(normalized) for pattern in patterns):
            return group
    return title_case(subject_name)


def normalize_subject_choice(subject: str | None) -> str | None:
    """Map a user's subject choice to a canonical group, or None if unknown."""
    if not subject or not subject.strip():
        return None
    return SUBJECT_SYNONYMS.get(subject.strip().lower())


def detect_language(code: str, subject: str, title: str) -> str:
    """
    Work out a book's language while building catalog records.

    The publisher's codes carry the language in their second character
    (e.g. "jemh1" is English, "jhmh1" Hindi). Failing that, well known
    Hindi/Urdu/Sanskrit words in the subject or title decide. English is
    the default.
    """
    second_char = code[1:2].lower()
    if second_char in LANGUAGE_CODE_LOOKUP:
        return LANGUAGE_CODE_LOOKUP[second_char]

    combined = f"{subject} {title}".lower()
    for language, pattern in _LANGUAGE_VOCABULARY:
        if pattern.search(combined):
            return language
    return "English"


def build_book_doc_id(class_name: str, subject_key: str, language_key: str, code: str) -> str:
    """
    Build the live catalog id for a book.

    Example:
        build_book_doc_id("10", "mathematics", "english", "jemh1")
        # 'class-10_mathematics_english_jemh1'
    """
    return f"class-{class_name.zfill(2)}_{subject_key}_{language_key}_{code.lower()}"
