"""
Study Summary - Builds a Markdown study summary with Ollama.

Flow for one request:
1. Work out the subject (from the request, else ask the LLM)
2. Pull the matching NCERT chapter text (optional)
3. Collect reference links (optional)
4. Ask the LLM for a summary in a fixed section layout

Steps 2 and 3 never fail the request; only step 4 can.
"""

import json
import re
from dataclasses import dataclass

import ollama

from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.subjects import (
    MATH,
    SCIENCE,
    SOCIAL_SCIENCE,
    normalize_subject_choice,
)
from ncert_study.config import (
    IDENTIFY_TOPIC_TEMPLATE,
    OLLAMA_BASE_URL,
    OLLAMA_MODEL,
    PROMPT_NCERT_CHARS,
    SUMMARY_PROMPT_TEMPLATE,
)
from ncert_study.errors import GenerationError, NCERTError
from ncert_study.logger import get_logger
from ncert_study.study.pipeline import TopicTextPipeline
from ncert_study.study.resources import format_resources_for_prompt, search_resources

logger = get_logger(__name__)

FALLBACK_SUBJECT = SOCIAL_SCIENCE

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class TopicIdentification:
    subject: str | None
    chapter_name: str
    confidence: float


@dataclass
class StudySummary:
    summary: str
    subject: str
    chapter: str
    ncert_referenced: bool

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "subject": self.subject,
            "chapter": self.chapter,
            "ncertReferenced": self.ncert_referenced,
        }


def _subject_from_text(text: str) -> str | None:
    lower = text.lower()
    if "math" in lower:
        return MATH
    if "social" in lower or "history" in lower or "geography" in lower:
        return SOCIAL_SCIENCE
    if "science" in lower:
        return SCIENCE
    return None


def parse_identification(response: str, prompt: str) -> TopicIdentification:
    """
    Read the LLM's topic identification.

    The model is asked for JSON but often wraps it in prose, so the first
    {...} block is parsed. Without valid JSON the subject is guessed from
    keywords in the response.
    """
    match = _JSON_OBJECT.search(response)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            subject = parsed.get("subject")
            try:
                confidence = float(parsed.get("confidence") or 0.5)
            except (TypeError, ValueError):
                confidence = 0.5
            return TopicIdentification(
                subject=normalize_subject_choice(subject) if isinstance(subject, str) else None,
                chapter_name=parsed.get("chapterName") or prompt,
                confidence=confidence,
            )

    return TopicIdentification(subject=_subject_from_text(response), chapter_name=prompt, confidence=0.5)


class StudySummarizer:
    """
    Generates study summaries grounded in NCERT text.

    Example:
        summarizer = StudySummarizer(pipeline, resolver)
        result = summarizer.summarize("Explain acids and bases", "10", subject="science")
        print(result.summary)
    """

    def __init__(
        self,
        pipeline: TopicTextPipeline,
        resolver: CatalogResolver,
        model: str | None = None,
        client: ollama.Client | None = None,
    ):
        """
        Initialize the summarizer.

        Args:
            pipeline: Topic-to-text pipeline for textbook grounding
            resolver: Catalog resolver for reference links
            model: Ollama model name (uses config default if not provided)
            client: Ollama client (created for OLLAMA_BASE_URL if not provided)
        """
        self.pipeline = pipeline
        self.resolver = resolver
        self.model = model or OLLAMA_MODEL
        self.client = client or ollama.Client(host=OLLAMA_BASE_URL)

    def _generate(self, prompt: str) -> str:
        """Send one user prompt to the model and return its reply."""
        try:
            response = self.client.chat(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise GenerationError(f"Ollama request failed ({self.model}): {e}") from e

        content = response["message"]["content"]
        if not content or not content.strip():
            raise GenerationError(f"Ollama returned an empty response ({self.model})")
        return content

    def identify_topic(self, prompt: str, class_name: str) -> TopicIdentification:
        """Ask the LLM which subject and chapter a prompt is about."""
        try:
            response = self._generate(IDENTIFY_TOPIC_TEMPLATE.format(prompt=prompt, class_name=class_name))
        except GenerationError as e:
            logger.error("Topic identification failed: %s", e)
            return TopicIdentification(subject=None, chapter_name=prompt, confidence=0.0)
        return parse_identification(response, prompt)

    def build_prompt(
        self,
        prompt: str,
        class_name: str,
        subject: str,
        ncert_text: str | None,
        resources_text: str,
    ) -> str:
        if ncert_text:
            ncert_section = (
                "NCERT Textbook Content for this chapter (truncated):\n"
                f"{ncert_text[:PROMPT_NCERT_CHARS]}\n"
            )
        else:
            ncert_section = "Note: NCERT text not found. Use your knowledge of CBSE curriculum.\n"
        resources_section = f"Additional CBSE-related resources:\n{resources_text}\n" if resources_text else ""

        return SUMMARY_PROMPT_TEMPLATE.format(
            class_name=class_name,
            subject=subject,
            ncert_section=ncert_section,
            resources_section=resources_section,
            prompt=prompt,
        )

    def summarize(
        self,
        prompt: str,
        class_name: str,
        subject: str | None = None,
        chapter: str | None = None,
    ) -> StudySummary:
        """
        Produce a study summary.

        Args:
            prompt: What the student asked for
            class_name: Student's class, e.g. "10"
            subject: Optional subject choice ("maths", "s.s", ...)
            chapter: Optional chapter name chosen by the student

        Raises:
            GenerationError: If the final summary cannot be generated
        """
        manual_chapter = chapter.strip() if chapter and chapter.strip() else None
        chapter_name = manual_chapter or prompt

        identified = normalize_subject_choice(subject)
        if subject:
            logger.info("Subject provided: %r -> %s", subject, identified)

        if identified is None and manual_chapter is None:
            identification = self.identify_topic(prompt, class_name)
            identified = identification.subject
            chapter_name = identification.chapter_name
            logger.info("LLM identification: subject=%s chapter=%r", identified, chapter_name)

        if identified is None:
            logger.warning("Could not identify subject, using %s", FALLBACK_SUBJECT)
            identified = FALLBACK_SUBJECT

        ncert_text = None
        ncert_chapter = None
        try:
            topic_text = self.pipeline.get_text_for_topic(class_name, identified, chapter_name)
        except NCERTError as e:
            logger.error("NCERT lookup failed, continuing without it: %s", e)
            topic_text = None
        if topic_text is not None:
            ncert_text = topic_text.text
            ncert_chapter = topic_text.label

        try:
            resources_text = format_resources_for_prompt(
                search_resources(chapter_name, class_name, identified, self.resolver)
            )
        except NCERTError as e:
            logger.error("Resource search failed: %s", e)
            resources_text = ""

        summary = self._generate(self.build_prompt(prompt, class_name, identified, ncert_text, resources_text))

        return StudySummary(
            summary=summary,
            subject=identified,
            chapter=ncert_chapter or chapter_name,
            ncert_referenced=bool(ncert_text),
        )
