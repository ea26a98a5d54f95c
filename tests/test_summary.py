"""Tests for the study summary generator (Ollama replaced by a fake)."""

import pytest

from ncert_study.errors import GenerationError
from ncert_study.study.summary import StudySummarizer, parse_identification

from conftest import REAL_NUMBERS_PDF, FakeOllamaClient

REAL_NUMBERS_URL = "https://ncert.nic.in/textbook/pdf/jemh101.pdf"


class TestParseIdentification:
    def test_json_wrapped_in_prose(self):
        response = 'Sure!\n{"subject": "Math", "chapterName": "Real Numbers", "confidence": 0.9}\nHope this helps.'
        result = parse_identification(response, "prompt")
        assert result.subject == "Math"
        assert result.chapter_name == "Real Numbers"
        assert result.confidence == 0.9

    def test_null_subject(self):
        result = parse_identification('{"subject": null, "chapterName": ""}', "my prompt")
        assert result.subject is None
        assert result.chapter_name == "my prompt"

    def test_keyword_fallback(self):
        assert parse_identification("This is about history.", "p").subject == "Social Science"
        assert parse_identification("Mathematics, clearly", "p").subject == "Math"
        assert parse_identification("no idea", "p").subject is None


class TestSummarize:
    def test_with_subject_and_ncert_text(self, summarizer, ollama_client, cache):
        cache.put(REAL_NUMBERS_URL, REAL_NUMBERS_PDF)

        result = summarizer.summarize("Explain real numbers", "10", subject="maths")

        assert result.subject == "Math"
        assert result.ncert_referenced is True
        assert result.chapter == "Real Numbers (Chapter 1)"
        assert result.summary.startswith("Study Summary")
        # Only the summary prompt; no identification round trip
        assert len(ollama_client.prompts) == 1
        prompt = ollama_client.prompts[0]
        assert "Class 10 student learn Math" in prompt
        assert "Euclid" in prompt
        assert "# Additional CBSE Resources" in prompt

    def test_identifies_subject_with_llm(self, pipeline, static_resolver, cache):
        cache.put(REAL_NUMBERS_URL, REAL_NUMBERS_PDF)
        client = FakeOllamaClient(
            replies=[
                '{"subject": "Math", "chapterName": "Real Numbers", "confidence": 0.8}',
                "Study Summary: Real Numbers",
            ]
        )
        summarizer = StudySummarizer(pipeline, static_resolver, model="fake-model", client=client)

        result = summarizer.summarize("What is Euclid's lemma?", "10")

        assert result.subject == "Math"
        assert result.chapter == "Real Numbers (Chapter 1)"
        assert len(client.prompts) == 2
        assert 'Student prompt: "What is Euclid\'s lemma?"' in client.prompts[0]

    def test_unknown_subject_defaults_to_social_science(self, pipeline, static_resolver, upstream):
        client = FakeOllamaClient(replies=['{"subject": null}', "Study Summary: Something"])
        summarizer = StudySummarizer(pipeline, static_resolver, model="fake-model", client=client)

        result = summarizer.summarize("tell me something", "12")

        assert result.subject == "Social Science"
        assert result.ncert_referenced is False
        assert result.chapter == "tell me something"
        assert "NCERT text not found" in client.prompts[-1]

    def test_manual_chapter_skips_identification(self, pipeline, static_resolver, upstream):
        client = FakeOllamaClient(replies=["Study Summary: French Revolution"])
        summarizer = StudySummarizer(pipeline, static_resolver, model="fake-model", client=client)

        summarizer.summarize("revise", "9", chapter="The French Revolution")

        assert len(client.prompts) == 1

    def test_missing_ncert_pdf_is_not_fatal(self, summarizer, upstream):
        upstream.add(REAL_NUMBERS_URL, b"", status_code=503)

        result = summarizer.summarize("Explain real numbers", "10", subject="Math")

        assert result.ncert_referenced is False
        assert result.summary

    def test_llm_failure_raises(self, pipeline, static_resolver, upstream):
        client = FakeOllamaClient(error=ConnectionError("ollama down"))
        summarizer = StudySummarizer(pipeline, static_resolver, model="fake-model", client=client)

        with pytest.raises(GenerationError):
            summarizer.summarize("Explain real numbers", "10", subject="Math")

    def test_empty_llm_reply_raises(self, pipeline, static_resolver, upstream):
        client = FakeOllamaClient(replies=["   "])
        summarizer = StudySummarizer(pipeline, static_resolver, model="fake-model", client=client)

        with pytest.raises(GenerationError):
            summarizer.summarize("Explain real numbers", "10", subject="Math")
