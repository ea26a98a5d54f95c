"""
Catalog records.

Books and chapters come from either the live catalog (ChromaDB, filled by the
scraper) or the bundled static dataset. The ``source`` field on every record
says which. Records are treated as read-only values for the life of a request.

The to_dict() methods render the camelCase JSON shape served over HTTP.
"""

from dataclasses import dataclass, field, replace

SOURCE_CATALOG = "catalog"
SOURCE_STATIC = "static"


@dataclass(frozen=True)
class BookRecord:
    """
    One textbook edition.

    Attributes:
        id: Record id ("static-..." for the bundled dataset)
        class_name: Class label, e.g. "10"
        subject: Subject display name, e.g. "Mathematics"
        subject_group: Canonical group: "Math", "Science", "Social Science", ...
        subject_key: Slug of the subject name
        language: Language display name
        language_key: Slug of the language
        title: Human title of the book
        chapter_count: Declared number of chapters
        code: Publisher's short code (e.g. "jemh1"), live catalog only
        priority: Lower wins when several editions match a query
        source: SOURCE_CATALOG or SOURCE_STATIC
    """

    id: str
    class_name: str
    subject: str
    subject_group: str
    subject_key: str
    language: str
    language_key: str
    title: str
    chapter_count: int
    source: str
    code: str | None = None
    priority: int | None = None

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.priority or 0, self.title)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "class": self.class_name,
            "subject": self.subject,
            "subjectGroup": self.subject_group,
            "subjectKey": self.subject_key,
            "language": self.language,
            "languageKey": self.language_key,
            "title": self.title,
            "chapterCount": self.chapter_count,
            "source": self.source,
        }
        if self.code is not None:
            data["code"] = self.code
        if self.priority is not None:
            data["priority"] = self.priority
        return data


@dataclass(frozen=True)
class ChapterRecord:
    """
    One chapter of a book.

    Attributes:
        id: Record id
        number: 1-based position within the book
        title: Derived from content when available, else "Chapter N"
        pdf_url: Where to download the chapter PDF
        source: SOURCE_CATALOG or SOURCE_STATIC
        original_pdf_url: Publisher URL when pdf_url points at a mirror
        derived_title: Title guessed from the PDF's first page
        text_url: Pre-extracted plain text, if published
        text_preview: First few hundred characters of the text
        size_bytes: Size of the PDF
    """

    id: str
    number: int
    title: str
    pdf_url: str
    source: str
    original_pdf_url: str | None = None
    derived_title: str | None = None
    text_url: str | None = None
    text_preview: str | None = None
    size_bytes: int | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "pdfUrl": self.pdf_url,
            "originalPdfUrl": self.original_pdf_url or self.pdf_url,
            "source": self.source,
        }
        optional = {
            "derivedTitle": self.derived_title,
            "textUrl": self.text_url,
            "textPreview": self.text_preview,
            "sizeBytes": self.size_bytes,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class BookQuery:
    """
    A loosely specified book lookup.

    Either book_id, or class_name plus any of the subject and language
    fields. Language is a soft preference.
    """

    book_id: str | None = None
    class_name: str | None = None
    subject: str | None = None
    subject_group: str | None = None
    subject_key: str | None = None
    language: str | None = None
    language_key: str | None = None

    @property
    def has_language(self) -> bool:
        return bool(self.language or self.language_key)

    def without_language(self) -> "BookQuery":
        return replace(self, language=None, language_key=None)

    def describe(self) -> str:
        """Compact form for log lines."""
        parts = [f"{k}={v}" for k, v in vars(self).items() if v]
        return ", ".join(parts) or "<empty>"


@dataclass
class BookResponse:
    """A resolved book with its chapters in reading order."""

    source: str
    book: BookRecord
    chapters: list[ChapterRecord]

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "book": self.book.to_dict(),
            "chapters": [chapter.to_dict() for chapter in self.chapters],
        }


@dataclass
class SubjectOption:
    key: str
    label: str
    subject_group: str
    books: list[BookRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "subjectGroup": self.subject_group,
            "books": [book.to_dict() for book in self.books],
        }


@dataclass
class ClassOption:
    class_name: str
    subjects: list[SubjectOption] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "class": self.class_name,
            "subjects": [subject.to_dict() for subject in self.subjects],
        }


@dataclass
class LibraryOptions:
    """Every known class -> subject -> book combination for selection UIs."""

    source: str
    classes: list[ClassOption] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "classes": [entry.to_dict() for entry in self.classes],
        }


def class_sort_key(class_name: str) -> tuple[int, str]:
    """Sort classes numerically, with any non-numeric labels last."""
    try:
        return (int(class_name), class_name)
    except ValueError:
        return (10**6, class_name)


def build_options(source: str, books: list[BookRecord]) -> LibraryOptions:
    """
    Group books by class and subject key.

    Classes are sorted numerically, subjects by label, and books within a
    subject by (priority, title).
    """
    by_class: dict[str, dict[str, SubjectOption]] = {}
    for book in books:
        subjects = by_class.setdefault(book.class_name, {})
        option = subjects.get(book.subject_key)
        if option is None:
            option = SubjectOption(
                key=book.subject_key,
                label=book.subject,
                subject_group=book.subject_group,
            )
            subjects[book.subject_key] = option
        option.books.append(book)

    classes = []
    for class_name in sorted(by_class, key=class_sort_key):
        subjects = sorted(by_class[class_name].values(), key=lambda s: s.label)
        for subject in subjects:
            subject.books.sort(key=lambda b: b.sort_key)
        classes.append(ClassOption(class_name=class_name, subjects=subjects))

    return LibraryOptions(source=source, classes=classes)
