"""Command-line interface for bookreviews.

Built with Typer for commands and Rich for beautiful output.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .catalog.aggregation import fill_distribution
from .catalog.manager import CatalogManager
from .catalog.schemas import ListingPage, ListingQuery, SortKey
from .config import get_config
from .db import get_db
from .errors import BookReviewError
from .logs import configure_logging

# Create the main app
app = typer.Typer(
    name="bookreviews",
    help="Browse and serve a catalog of book reviews.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def star_bar(rating: float) -> str:
    """Five-character star bar for a rating or an average rating."""
    full = int(round(rating))
    return "★" * full + "☆" * (5 - full)


def format_listing_table(page: ListingPage) -> Table:
    """Create a rich table for one listing page."""
    table = Table(
        title=f"Books - page {page.current_page} of {page.total_pages}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Genre", style="yellow")
    table.add_column("Year", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("ID", style="dim")

    for book in page.books:
        rating = (
            f"{star_bar(book.average_rating)} {book.average_rating:.2f}"
            if book.review_count
            else "-"
        )
        table.add_row(
            book.title,
            book.author,
            book.genre or "-",
            str(book.year) if book.year is not None else "-",
            rating,
            str(book.review_count),
            book.id,
        )

    return table


# ============================================================================
# Database Commands
# ============================================================================


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    config = get_config()
    for problem in config.validate():
        print_warning(problem)
    get_db()
    print_success(f"Database ready at {config.db_path}")


@app.command()
def seed(
    destroy: bool = typer.Option(False, "--destroy", "-d", help="Only remove all data"),
) -> None:
    """Replace the catalog with demo data (or wipe it with --destroy)."""
    from .seed import DEMO_PASSWORD, destroy_data, import_demo_data

    db = get_db()
    if destroy:
        destroy_data(db)
        print_success("Data destroyed")
        return

    summary = import_demo_data(db)
    print_success(
        f"Imported {summary.users} users, {summary.books} books, {summary.reviews} reviews"
    )
    console.print(f"[dim]Demo users log in with password '{DEMO_PASSWORD}'[/dim]")


# ============================================================================
# Catalog Commands
# ============================================================================


@app.command("books")
def list_books(
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Title or author text"),
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="Exact genre, or All"),
    sort: SortKey = typer.Option(SortKey.TITLE_ASC, "--sort", help="Sort order"),
) -> None:
    """List books with average ratings, five per page."""
    query = ListingQuery(page=page, search=search, genre=genre, sort=sort)
    result = CatalogManager(get_db()).list_books(query)

    if not result.books:
        console.print("[dim]No books found.[/dim]")
    else:
        console.print(format_listing_table(result))

    console.print(f"[dim]{result.total_books} matching book(s)[/dim]")
    if result.genres:
        console.print(f"[dim]Genres: {', '.join(result.genres)}[/dim]")


@app.command()
def show(
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Show a book with its rating distribution and reviews."""
    try:
        detail = CatalogManager(get_db()).get_book_detail(book_id)
    except BookReviewError as e:
        print_error(e.message)
        raise typer.Exit(1)

    book = detail.book
    owner = book.owner.name if book.owner else "unknown"
    header = [
        f"[bold]{book.title}[/bold] by {book.author}",
        f"Genre: {book.genre or '-'}    Year: {book.year or '-'}    Added by: {owner}",
        "",
        book.description,
        "",
        f"Average rating: {detail.average_rating:.2f} ({detail.review_count} review(s))",
    ]
    console.print(Panel("\n".join(header), title="Book"))

    histogram = Table(title="Rating distribution", show_header=False)
    histogram.add_column("Stars")
    histogram.add_column("Count", justify="right")
    for bucket in fill_distribution(detail.rating_distribution):
        histogram.add_row("★" * bucket.rating, str(bucket.count))
    console.print(histogram)

    for review in detail.reviews:
        author = review.author.name if review.author else "unknown"
        console.print(
            f"[yellow]{star_bar(review.rating)}[/yellow] "
            f"[green]{author}[/green]: {review.review_text}"
        )


# ============================================================================
# Server Command
# ============================================================================


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    config = get_config()
    configure_logging(config.log_level)
    for problem in config.validate():
        print_warning(problem)

    uvicorn.run(
        "bookreviews.api.app:create_app",
        factory=True,
        host=host or config.host,
        port=port or config.port,
        reload=reload,
    )


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"bookreviews version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
