"""
Study module - Turns a student's topic into study material.

This module is responsible for:
1. Matching a topic to a textbook chapter
2. Pulling that chapter's text
3. Generating study summaries using Ollama
"""

from .pipeline import TopicText, TopicTextPipeline
from .summary import StudySummarizer, StudySummary
from .topic_matcher import best_chapter, best_match

__all__ = [
    "TopicText",
    "TopicTextPipeline",
    "StudySummarizer",
    "StudySummary",
    "best_chapter",
    "best_match",
]
