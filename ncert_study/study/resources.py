"""
Resource Search Formatter - Reference links for study-summary prompts.

No real searching happens here: the NCERT chapter comes from the catalog and
the rest are search-engine URLs built from the topic.
"""

from dataclasses import dataclass
from urllib.parse import quote

from ncert_study.catalog.models import BookQuery
from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.subjects import resolve_subject_group, title_case
from ncert_study.config import NCERT_LIBRARY_URL
from ncert_study.logger import get_logger
from ncert_study.study.topic_matcher import best_chapter

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resource:
    title: str
    url: str
    snippet: str
    source: str
    type: str  # textbook | sample-paper | video | article


def search_resources(
    topic: str,
    class_name: str,
    subject: str,
    resolver: CatalogResolver,
) -> list[Resource]:
    """
    Build the reference list for a topic.

    The first entry is the matching NCERT chapter when the catalog knows the
    book, otherwise a link to the NCERT library. Sample questions, video
    lessons and revision notes searches follow.
    """
    heading = title_case(topic)
    encoded_query = quote(f"{topic} class {class_name} {subject} CBSE")
    resources: list[Resource] = []

    result = resolver.resolve_book(
        BookQuery(
            class_name=class_name,
            subject_group=resolve_subject_group(subject),
            language="English",
        )
    )
    chapter = best_chapter(result.chapters, topic) if result else None
    if chapter is not None:
        resources.append(
            Resource(
                title=f"{heading} (NCERT Chapter {chapter.number})",
                url=chapter.pdf_url,
                snippet="Official NCERT textbook chapter for detailed explanations and exercises.",
                source="NCERT",
                type="textbook",
            )
        )
    else:
        logger.debug("No NCERT chapter for class %s %s, linking the library", class_name, subject)
        resources.append(
            Resource(
                title=f"{heading} (NCERT Reference)",
                url=NCERT_LIBRARY_URL,
                snippet="Browse the NCERT textbook library to locate the relevant chapter.",
                source="NCERT",
                type="textbook",
            )
        )

    resources.extend(
        [
            Resource(
                title=f"{heading} - CBSE Sample Questions",
                url=f"https://www.google.com/search?q={encoded_query}+sample+questions",
                snippet="Practice CBSE-style questions and previous year problems related to this topic.",
                source="CBSE Academic",
                type="sample-paper",
            ),
            Resource(
                title=f"{heading} - Video Lessons",
                url=f"https://www.youtube.com/results?search_query={encoded_query}",
                snippet="Curated explainer videos from verified CBSE educators.",
                source="YouTube",
                type="video",
            ),
            Resource(
                title=f"{heading} - Revision Notes",
                url=f"https://www.google.com/search?q={encoded_query}+revision+notes",
                snippet="Quick revision notes and mind maps from trusted CBSE portals.",
                source="Topper / Vedantu / Byju's",
                type="article",
            ),
        ]
    )
    return resources


def format_resources_for_prompt(resources: list[Resource]) -> str:
    """
    Render resources as a numbered Markdown list for an LLM prompt.

    Example output:
        # Additional CBSE Resources
        1. Real Numbers (NCERT Chapter 1) (NCERT) - Official ... [https://...]
    """
    if not resources:
        return ""

    lines = ["# Additional CBSE Resources"]
    for i, resource in enumerate(resources, 1):
        lines.append(f"{i}. {resource.title} ({resource.source}) - {resource.snippet} [{resource.url}]")
    return "\n".join(lines)
