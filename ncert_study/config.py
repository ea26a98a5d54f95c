"""
Configuration settings for the NCERT Study Library.

This file centralizes all configuration so you can easily adjust parameters.
Most values can be overridden with environment variables, which is how the
server and the batch scripts are tuned in deployment.
"""

import os
from pathlib import Path

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Base directory (where this project lives)
BASE_DIR = Path(__file__).parent.parent

# Data storage directory
DATA_DIR = Path(os.getenv("NCERT_DATA_DIR", BASE_DIR / "data"))

# On-disk PDF cache. One file per source URL: <12-hex-hash>-<filename>
PDF_CACHE_DIR = Path(os.getenv("NCERT_CACHE_DIR", DATA_DIR / "ncert-cache"))

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("NCERT_LOG_LEVEL", "INFO")

# =============================================================================
# LIVE CATALOG (CHROMADB)
# =============================================================================

# The live catalog is a ChromaDB database filled by scripts/scrape_ncert.py.
# Set NCERT_CATALOG_HOST to talk to a chroma server, or NCERT_CATALOG_DIR to
# open a local persistent database. With neither set, the bundled static
# dataset is used.
CATALOG_HOST = os.getenv("NCERT_CATALOG_HOST") or None
CATALOG_PORT = int(os.getenv("NCERT_CATALOG_PORT", "8000"))
CATALOG_DIR = os.getenv("NCERT_CATALOG_DIR") or None

BOOKS_COLLECTION = "ncert_books"
CHAPTERS_COLLECTION = "ncert_chapters"

# =============================================================================
# EXTRACTION CONFIGURATION
# =============================================================================

# Page/char bounds used when pulling chapter text into a study summary.
# WHY 6 pages? The opening pages carry the chapter's core ideas and keep
# extraction fast on 40+ page chapters.
EXTRACT_MAX_PAGES = int(os.getenv("NCERT_EXTRACT_MAX_PAGES", "6"))
EXTRACT_MAX_CHARS = int(os.getenv("NCERT_EXTRACT_MAX_CHARS", "8000"))

# =============================================================================
# UPSTREAM FETCHING
# =============================================================================

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118 Safari/537.36"
)

# Timeouts in seconds
PDF_FETCH_TIMEOUT = float(os.getenv("NCERT_PDF_TIMEOUT", "30"))
TEXT_FETCH_TIMEOUT = float(os.getenv("NCERT_TEXT_TIMEOUT", "30"))
INDEX_FETCH_TIMEOUT = float(os.getenv("NCERT_INDEX_TIMEOUT", "45"))
SCRAPE_PDF_TIMEOUT = float(os.getenv("NCERT_SCRAPE_PDF_TIMEOUT", "60"))

# The PDF proxy only serves documents from the textbook publisher
ALLOWED_PDF_HOSTS = ("ncert.nic.in",)

# Browser cache lifetime for proxied PDFs
PDF_PROXY_MAX_AGE = 3600

NCERT_LIBRARY_URL = "https://ncert.nic.in/textbook.php"

# =============================================================================
# SCRAPER CONFIGURATION
# =============================================================================

TEXTBOOK_PAGE_URL = "https://ncert.nic.in/textbook.php?ln=en"
PDF_BASE_URL = "https://ncert.nic.in/textbook/pdf"


def _csv_env(name: str, default: str = "") -> set[str]:
    """Read a comma separated environment variable into a set."""
    return {v.strip() for v in os.getenv(name, default).split(",") if v.strip()}


SCRAPE_CLASSES = _csv_env("SCRAPE_CLASSES", "9,10,11,12")
SCRAPE_SUBJECTS = {s.lower() for s in _csv_env("SCRAPE_SUBJECTS")}
SCRAPE_LANGUAGES = {s.lower() for s in _csv_env("SCRAPE_LANGUAGES")}
SCRAPE_MAX_PAGES = int(os.getenv("SCRAPE_MAX_PAGES", "6"))
SCRAPE_MAX_CHARS = int(os.getenv("SCRAPE_MAX_CHARS", "15000"))
SCRAPE_BOOK_DELAY = float(os.getenv("SCRAPE_BOOK_DELAY", "0"))

# Lower = preferred when several language editions match a query
LANGUAGE_PRIORITY = {
    "english": 0,
    "hindi": 1,
    "urdu": 2,
    "sanskrit": 3,
}
DEFAULT_LANGUAGE_PRIORITY = 5

TEXT_PREVIEW_CHARS = 500

# =============================================================================
# EMBEDDING CONFIGURATION
# =============================================================================

# Chapter previews are embedded when written to the live catalog.
# This model creates 384-dimensional vectors.
EMBEDDING_MODEL = "all-MiniLM-L6-v2"
EMBEDDING_DIMENSION = 384

# =============================================================================
# OLLAMA CONFIGURATION
# =============================================================================

OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2")
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

# NCERT text is cut to this many characters before it goes into a prompt
PROMPT_NCERT_CHARS = 8000

# =============================================================================
# LLM PROMPT TEMPLATES
# =============================================================================

IDENTIFY_TOPIC_TEMPLATE = """You are an expert at identifying CBSE curriculum topics. Given a student's prompt about what they want to learn, identify:
1. The subject (Math, Science, or Social Science)
2. The chapter/topic name
3. Your confidence level (0-1)

Student prompt: "{prompt}"
Student class: Class {class_name}

Respond in JSON format:
{{
  "subject": "Math" | "Science" | "Social Science" | null,
  "chapterName": "string",
  "confidence": number
}}

If you cannot confidently identify the subject, set subject to null."""

SUMMARY_PROMPT_TEMPLATE = """You are an expert CBSE tutor helping a Class {class_name} student learn {subject}. Your task is to create a comprehensive, easy-to-understand study summary.

Hard formatting rules (MUST follow exactly):
- Use Markdown.
- Start with a single line title: "Study Summary: [Topic Name]" (no leading # on this line).
- Then add a blank line and the section "## Key Concepts".
- Use the following section headings in this exact order:
  1) "## Key Concepts"
  2) "## Important Definitions"
  3) "## Formulas/Key Points"
  4) "## Step-by-Step Explanation"
  5) "## Practice Questions"
  6) "## Study Tips"
  7) "## Quick Revision Points"
- Put a line containing exactly three dashes --- on its own line BETWEEN each major section.
- Use normal paragraphs and "-" bullet lists inside sections, NOT extra headings.
- Do not add any other top-level headings outside this structure.

Content guidelines:
1. Use simple, student-friendly language (Class {class_name} level)
2. Break down complex concepts into easy steps
3. Include key definitions, formulas, and important points
4. Provide 2-3 CBSE-style practice questions with short answers
5. Include study tips and memory aids
6. Reference NCERT content when provided
7. Use the additional resources to find relevant CBSE exam questions and study guides

{ncert_section}

{resources_section}

Student's request: "{prompt}"

Now generate the study summary ONLY in the required Markdown structure described above."""
