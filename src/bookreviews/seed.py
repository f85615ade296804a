"""Demo data for a fresh catalog.

``import_demo_data`` wipes users, books and reviews and inserts a small
catalog spread over two listing pages. Every demo user has the password
``DEMO_PASSWORD``.
"""

from dataclasses import dataclass

from loguru import logger

from .auth.passwords import hash_password
from .db.schemas import BookCreate
from .db.sqlite import Database
from .reviews.models import Review

DEMO_PASSWORD = "123456"

DEMO_USERS = [
    ("Alice Johnson", "alice@example.com"),
    ("Bob Smith", "bob@example.com"),
    ("Charlie Brown", "charlie@example.com"),
]

# (title, author, description, genre, year, owner email)
DEMO_BOOKS = [
    (
        "1984",
        "George Orwell",
        "A clerk in a surveillance state begins to doubt the official version of history.",
        "Dystopian Fiction",
        1949,
        "bob@example.com",
    ),
    (
        "Brave New World",
        "Aldous Huxley",
        "An engineered society keeps its citizens content with pleasure and conditioning.",
        "Dystopian Fiction",
        1932,
        "alice@example.com",
    ),
    (
        "Dune",
        "Frank Herbert",
        "A noble heir is drawn into the politics of the desert planet that produces the spice.",
        "Science Fiction",
        1965,
        "bob@example.com",
    ),
    (
        "The Left Hand of Darkness",
        "Ursula K. Le Guin",
        "An envoy tries to bring a world of ambisexual people into an interstellar alliance.",
        "Science Fiction",
        1969,
        "charlie@example.com",
    ),
    (
        "Sapiens",
        "Yuval Noah Harari",
        "A brief history of humankind from the Stone Age to the present.",
        "Non-Fiction",
        2011,
        "alice@example.com",
    ),
    (
        "Where the Crawdads Sing",
        "Delia Owens",
        "A girl raises herself alone in the marshes of North Carolina.",
        "Literary Fiction",
        2018,
        "charlie@example.com",
    ),
    (
        "Clean Architecture",
        "Robert C. Martin",
        "Principles for structuring software so that it stays easy to change.",
        "Technology",
        2017,
        "alice@example.com",
    ),
]

# (book title, reviewer email, rating, text)
DEMO_REVIEWS = [
    ("1984", "alice@example.com", 5, "Chilling and still relevant."),
    ("1984", "bob@example.com", 4, "Powerful, if bleak."),
    ("1984", "charlie@example.com", 5, "Everyone should read it once."),
    ("Dune", "charlie@example.com", 5, "World-building nobody has matched since."),
    ("Dune", "bob@example.com", 3, "Slow start, strong finish."),
    ("Sapiens", "bob@example.com", 4, "Big ideas, breezy style."),
    ("Clean Architecture", "charlie@example.com", 2, "Too much repetition for my taste."),
]


@dataclass
class SeedSummary:
    """Counts of inserted demo records."""

    users: int = 0
    books: int = 0
    reviews: int = 0


def destroy_data(db: Database) -> None:
    """Remove all users, books and reviews."""
    db.clear_all()
    logger.info("All catalog data removed")


def import_demo_data(db: Database) -> SeedSummary:
    """Replace the catalog contents with the demo data set."""
    destroy_data(db)
    summary = SeedSummary()

    with db.get_session() as session:
        user_ids = {}
        for name, email in DEMO_USERS:
            user = db.create_user(name, email, hash_password(DEMO_PASSWORD), session=session)
            user_ids[email] = user.id
            summary.users += 1

        book_ids = {}
        for title, author, description, genre, year, owner in DEMO_BOOKS:
            data = BookCreate(
                title=title, author=author, description=description, genre=genre, year=year
            )
            book = db.create_book(data, owner_id=user_ids[owner], session=session)
            book_ids[title] = book.id
            summary.books += 1

        for title, reviewer, rating, text in DEMO_REVIEWS:
            session.add(
                Review(
                    book_id=book_ids[title],
                    author_id=user_ids[reviewer],
                    rating=rating,
                    review_text=text,
                )
            )
            summary.reviews += 1

    logger.info(
        "Seeded {} users, {} books, {} reviews", summary.users, summary.books, summary.reviews
    )
    return summary
