"""Tests for the terminal study helper's command handling."""

import pytest

from ncert_study.interfaces.cli import Session, handle_class, handle_subject, parse_command


@pytest.fixture()
def session(static_resolver, pipeline, summarizer):
    return Session(resolver=static_resolver, pipeline=pipeline, summarizer=summarizer)


class TestParseCommand:
    def test_plain_text_is_ask(self):
        assert parse_command("  What is a lemma? ") == ("ask", "What is a lemma?")

    def test_slash_command_with_argument(self):
        assert parse_command("/Topic real numbers") == ("topic", "real numbers")

    def test_slash_command_without_argument(self):
        assert parse_command("/chapters") == ("chapters", "")

    def test_empty(self):
        assert parse_command("   ") == ("empty", "")


class TestSessionCommands:
    def test_class_requires_number(self, session):
        handle_class(session, "nine")
        assert session.class_name == "10"

        handle_class(session, "9")
        assert session.class_name == "9"

    def test_subject_synonyms(self, session):
        handle_subject(session, "maths")
        assert session.subject == "Math"

        handle_subject(session, "s.s")
        assert session.subject == "Social Science"

    def test_subject_auto_clears(self, session):
        handle_subject(session, "science")
        handle_subject(session, "auto")
        assert session.subject is None
        assert session.subject_label == "auto"

    def test_unknown_subject_becomes_its_own_group(self, session):
        handle_subject(session, "english")
        assert session.subject == "English"
