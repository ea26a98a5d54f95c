"""
CLI Interface - Interactive terminal study helper.

Browse the NCERT catalog and ask for study summaries from the terminal:
- Free-form prompts become study summaries
- Catalog browsing (/options, /chapters)
- Topic lookup against the textbook (/topic)
- Class and subject selection (/class, /subject)

Run with:
    python -m ncert_study chat
"""

from dataclasses import dataclass

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ncert_study.catalog.models import BookQuery
from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.catalog.subjects import normalize_subject_choice, resolve_subject_group
from ncert_study.errors import NCERTError
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.study.pipeline import TopicTextPipeline
from ncert_study.study.summary import StudySummarizer

console = Console()

DEFAULT_CLASS = "10"
TOPIC_PREVIEW_CHARS = 600


@dataclass
class Session:
    """What the student picked so far, plus the services to answer them."""

    resolver: CatalogResolver
    pipeline: TopicTextPipeline
    summarizer: StudySummarizer
    class_name: str = DEFAULT_CLASS
    subject: str | None = None

    @property
    def subject_label(self) -> str:
        return self.subject or "auto"


def print_welcome(session: Session):
    """Print welcome message and instructions."""
    welcome_text = f"""
[bold blue]NCERT Study Library[/bold blue]

Ask for a study summary of any CBSE topic, or browse the NCERT textbooks.

• [cyan]Class[/cyan] - {session.class_name}
• [cyan]Subject[/cyan] - {session.subject_label}
• [cyan]Catalog[/cyan] - {session.resolver.active_source}

[dim]Type /help for all commands[/dim]
"""
    console.print(Panel(welcome_text, border_style="blue"))


def print_help():
    """Print help message with available commands."""
    table = Table(title="Available Commands", show_header=True, header_style="bold cyan")
    table.add_column("Command", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="dim")

    commands = [
        ("(any text)", "Generate a study summary", "Explain acids and bases"),
        ("/class <n>", "Set your class", "/class 9"),
        ("/subject <name>", "Set the subject (or 'auto')", "/subject maths"),
        ("/options", "List classes, subjects and books", "/options"),
        ("/chapters", "List chapters for class + subject", "/chapters"),
        ("/topic <text>", "Find the chapter for a topic", "/topic real numbers"),
        ("/clear", "Clear the screen", "/clear"),
        ("/help", "Show this help message", "/help"),
        ("/exit", "Exit", "/exit"),
    ]

    for cmd, desc, example in commands:
        table.add_row(cmd, desc, example)

    console.print(table)


def parse_command(user_input: str) -> tuple[str, str]:
    """
    Split input into (command, argument text).

    Plain text is the 'ask' command. Empty input is 'empty'.

    Example:
        parse_command("/topic real numbers")  # ('topic', 'real numbers')
        parse_command("What is a lemma?")     # ('ask', 'What is a lemma?')
    """
    user_input = user_input.strip()

    if not user_input:
        return ("empty", "")

    if user_input.startswith("/"):
        parts = user_input[1:].split(maxsplit=1)
        command = parts[0].lower() if parts else ""
        args = parts[1].strip() if len(parts) > 1 else ""
        return (command, args)

    return ("ask", user_input)


def handle_class(session: Session, args: str):
    if not args.isdigit():
        console.print("[yellow]Usage: /class <number>[/yellow]")
        return
    session.class_name = args
    console.print(f"[green]Class set to {args}[/green]")


def handle_subject(session: Session, args: str):
    if not args:
        console.print("[yellow]Usage: /subject <name>  (maths, science, s.s, auto)[/yellow]")
        return
    if args.lower() == "auto":
        session.subject = None
        console.print("[green]Subject will be detected from your prompt[/green]")
        return
    session.subject = normalize_subject_choice(args) or resolve_subject_group(args)
    console.print(f"[green]Subject set to {session.subject}[/green]")


def handle_options(session: Session):
    options = session.resolver.get_library_options()

    table = Table(
        title=f"NCERT Library ({options.source})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Class", style="cyan")
    table.add_column("Subject", style="white")
    table.add_column("Books", style="green")

    for class_option in options.classes:
        for subject in class_option.subjects:
            titles = ", ".join(f"{b.title} ({b.language})" for b in subject.books)
            table.add_row(class_option.class_name, subject.label, titles)

    console.print(table)


def handle_chapters(session: Session):
    if session.subject is None:
        console.print("[yellow]Pick a subject first: /subject <name>[/yellow]")
        return

    result = session.resolver.resolve_book(
        BookQuery(class_name=session.class_name, subject_group=session.subject, language="English")
    )
    if result is None:
        console.print(f"[yellow]No NCERT book for Class {session.class_name} {session.subject}[/yellow]")
        return

    table = Table(title=f"{result.book.title} ({result.source})", show_header=True, header_style="bold cyan")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Chapter", style="white")
    table.add_column("PDF", style="dim")
    for chapter in result.chapters:
        table.add_row(str(chapter.number), chapter.title, chapter.pdf_url)

    console.print(table)


def handle_topic(session: Session, args: str):
    if not args:
        console.print("[yellow]Usage: /topic <text>[/yellow]")
        return
    if session.subject is None:
        console.print("[yellow]Pick a subject first: /subject <name>[/yellow]")
        return

    with console.status("[bold green]Reading the textbook...", spinner="dots"):
        topic_text = session.pipeline.get_text_for_topic(session.class_name, session.subject, args)

    if topic_text is None:
        console.print("[yellow]No textbook text found for that topic.[/yellow]")
        return

    console.print(f"\n[bold green]📖 {topic_text.label}[/bold green] [dim](match {topic_text.score:.2f})[/dim]")
    console.print(topic_text.text[:TOPIC_PREVIEW_CHARS])


def handle_ask(session: Session, prompt: str):
    with console.status("[bold green]Writing your summary...", spinner="dots"):
        result = session.summarizer.summarize(prompt, session.class_name, subject=session.subject)

    source = "NCERT" if result.ncert_referenced else "general knowledge"
    console.print(f"\n[bold green]🎓 {result.subject} - {result.chapter}[/bold green] [dim]({source})[/dim]")
    console.print(Markdown(result.summary))


def build_session() -> Session:
    resolver = CatalogResolver.from_config()
    pipeline = TopicTextPipeline(resolver, PdfCache(), Fetcher())
    return Session(resolver=resolver, pipeline=pipeline, summarizer=StudySummarizer(pipeline, resolver))


def main():
    """Main CLI loop."""
    session = build_session()
    print_welcome(session)

    while True:
        try:
            user_input = Prompt.ask(f"[bold cyan]Class {session.class_name}[/bold cyan]")
            command, args = parse_command(user_input)

            if command == "empty":
                continue

            elif command in ("exit", "quit"):
                console.print("\n[bold blue]Goodbye! Keep learning! 📚[/bold blue]")
                break

            elif command == "help":
                print_help()

            elif command == "clear":
                console.clear()
                print_welcome(session)

            elif command == "class":
                handle_class(session, args)

            elif command == "subject":
                handle_subject(session, args)

            elif command == "options":
                handle_options(session)

            elif command == "chapters":
                handle_chapters(session)

            elif command == "topic":
                handle_topic(session, args)

            elif command == "ask":
                handle_ask(session, args)

            else:
                console.print(f"[yellow]Unknown command: /{command}[/yellow]")
                console.print("[dim]Type /help for available commands[/dim]")

            console.print()

        except KeyboardInterrupt:
            console.print("\n\n[bold blue]Goodbye! Keep learning! 📚[/bold blue]")
            break
        except NCERTError as e:
            console.print(f"[red]Error: {e}[/red]")
            console.print("[yellow]Make sure Ollama is running: ollama serve[/yellow]")


if __name__ == "__main__":
    main()
