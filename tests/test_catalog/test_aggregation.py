"""Tests for the pure catalog aggregation functions."""

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Optional

import pytest

from bookreviews.catalog.aggregation import (
    average_rating,
    build_detail,
    build_listing,
    distinct_genres,
    fill_distribution,
    matches,
    paginate,
    rating_distribution,
    rating_stats_by_book,
    total_pages,
)
from bookreviews.catalog.schemas import ListingQuery, SortKey
from bookreviews.reviews.schemas import RatingBucket


@dataclass
class FakeBook:
    id: str
    title: str
    author: str = "Someone"
    description: str = "About something."
    genre: Optional[str] = None
    year: Optional[int] = None
    owner_id: str = "u1"
    created_at: str = "2024-01-01T00:00:00+00:00"
    updated_at: str = "2024-01-01T00:00:00+00:00"


def fake_review(review_id: str, author_id: str, rating: int, created_at: str):
    return SimpleNamespace(
        id=review_id,
        book_id="b1",
        author_id=author_id,
        rating=rating,
        review_text="text",
        created_at=created_at,
        updated_at=created_at,
    )


NAMES = {"u1": "Alice", "u2": "Bob"}


class TestRatingStatistics:
    def test_average(self):
        assert average_rating([5, 4, 5], places=2) == 4.67
        assert average_rating([5, 4, 5]) == pytest.approx(14 / 3)

    def test_average_without_reviews(self):
        assert average_rating([]) == 0.0

    def test_stats_by_book(self):
        stats = rating_stats_by_book([("a", 5), ("a", 4), ("b", 1)])
        assert stats["a"].average == 4.5
        assert stats["a"].count == 2
        assert stats["b"].count == 1
        assert "c" not in stats

    def test_distribution_highest_first_without_zero_buckets(self):
        buckets = rating_distribution([5, 4, 5])
        assert [(b.rating, b.count) for b in buckets] == [(5, 2), (4, 1)]

    def test_fill_distribution(self):
        filled = fill_distribution([RatingBucket(rating=4, count=2)])
        assert [(b.rating, b.count) for b in filled] == [(5, 0), (4, 2), (3, 0), (2, 0), (1, 0)]


class TestFilterAndPaging:
    def test_search_title_or_author_case_insensitive(self):
        book = FakeBook("1", "The Hobbit", author="J.R.R. Tolkien")
        assert matches(book, search="hobbit")
        assert matches(book, search="TOLKIEN")
        assert not matches(book, search="dune")

    def test_search_is_literal(self):
        book = FakeBook("1", "C++ Primer")
        assert matches(book, search="c++")
        assert not matches(FakeBook("2", "Cats"), search="c.t")

    def test_genre_exact(self):
        book = FakeBook("1", "Dune", genre="Science Fiction")
        assert matches(book, genre="Science Fiction")
        assert not matches(book, genre="science fiction")
        assert matches(book, genre=None)

    def test_total_pages(self):
        assert total_pages(7) == 2
        assert total_pages(5) == 1
        assert total_pages(0) == 0

    def test_paginate(self):
        items = list(range(1, 8))
        assert paginate(items, 2) == [6, 7]
        assert paginate(items, 3) == []

    def test_distinct_genres(self):
        books = [
            FakeBook("1", "a", genre="Fantasy"),
            FakeBook("2", "b", genre="Classic"),
            FakeBook("3", "c", genre="Fantasy"),
            FakeBook("4", "d", genre=None),
        ]
        assert distinct_genres(books) == ["Classic", "Fantasy"]


class TestListingQuery:
    @pytest.mark.parametrize("page", [None, "", "abc", "0", -3, 0])
    def test_bad_page_means_first(self, page):
        assert ListingQuery(page=page).page == 1

    def test_page_from_string(self):
        assert ListingQuery(page="3").page == 3

    def test_all_genre_is_no_filter(self):
        assert ListingQuery(genre="All").genre is None
        assert ListingQuery(genre="  ").genre is None
        assert ListingQuery(genre="Fantasy").genre == "Fantasy"

    def test_unknown_sort_falls_back_to_title(self):
        assert ListingQuery(sort="newest").sort == SortKey.TITLE_ASC
        assert ListingQuery(sort="RATING_DESC").sort == SortKey.RATING_DESC


class TestBuildListing:
    """Tests for the listing page."""

    @pytest.fixture
    def books(self):
        return [
            FakeBook("1", "Emma", genre="Classic", year=1815),
            FakeBook("2", "Dune", genre="Science Fiction", year=1965, owner_id="u2"),
            FakeBook("3", "beloved", genre="Literary", year=1987),
            FakeBook("4", "Anathem", genre="Science Fiction", year=None),
            FakeBook("5", "Cosmos", genre=None, year=1980),
            FakeBook("6", "Frankenstein", genre="Classic", year=1818),
            FakeBook("7", "Gilead", genre="Literary", year=2004),
        ]

    def test_first_page(self, books):
        page = build_listing(books, [], NAMES)

        assert page.current_page == 1
        assert page.total_pages == 2
        assert page.total_books == 7
        assert [b.title for b in page.books] == ["Anathem", "beloved", "Cosmos", "Dune", "Emma"]
        assert page.genres == ["Classic", "Literary", "Science Fiction"]

    def test_second_page(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(page=2))
        assert [b.title for b in page.books] == ["Frankenstein", "Gilead"]

    def test_page_beyond_range_is_empty(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(page=9))
        assert page.books == []
        assert page.total_pages == 2
        assert page.current_page == 9

    def test_unreviewed_books_have_zero_average(self, books):
        page = build_listing(books, [], NAMES)
        assert all(b.average_rating == 0 and b.review_count == 0 for b in page.books)

    def test_owner_attached(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(search="dune"))
        assert page.books[0].owner.name == "Bob"

    def test_rating_desc_breaks_ties_by_title(self, books):
        ratings = [("1", 4), ("2", 5), ("2", 3), ("3", 2), ("5", 5)]
        page = build_listing(books, ratings, NAMES, ListingQuery(sort="rating_desc"))

        assert [b.title for b in page.books] == ["Cosmos", "Dune", "Emma", "beloved", "Anathem"]
        dune = page.books[1]
        assert dune.average_rating == 4.0
        assert dune.review_count == 2

    def test_rating_asc(self, books):
        ratings = [("1", 4), ("3", 2)]
        page = build_listing(books, ratings, NAMES, ListingQuery(sort="rating_asc", page=2))
        assert [b.title for b in page.books] == ["beloved", "Emma"]

    def test_year_desc_missing_year_last(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(sort="year_desc", page=2))
        assert [b.title for b in page.books] == ["Emma", "Anathem"]

    def test_year_asc_missing_year_first(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(sort="year_asc"))
        assert [b.year for b in page.books] == [None, 1815, 1818, 1965, 1980]

    def test_genre_filter_keeps_all_genres(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(genre="Classic"))

        assert [b.title for b in page.books] == ["Emma", "Frankenstein"]
        assert page.total_pages == 1
        assert page.genres == ["Classic", "Literary", "Science Fiction"]

    def test_search_and_genre_combined(self, books):
        page = build_listing(
            books, [], NAMES, ListingQuery(search="E", genre="Literary")
        )
        assert [b.title for b in page.books] == ["beloved", "Gilead"]

    def test_no_matches(self, books):
        page = build_listing(books, [], NAMES, ListingQuery(search="zzz"))
        assert page.books == []
        assert page.total_books == 0
        assert page.total_pages == 0


class TestBuildDetail:
    def test_detail(self):
        book = FakeBook("b1", "Dune", owner_id="u1")
        reviews = [
            fake_review("r3", "u2", 5, "2024-03-01T00:00:00+00:00"),
            fake_review("r2", "u1", 4, "2024-02-01T00:00:00+00:00"),
            fake_review("r1", "u3", 5, "2024-01-01T00:00:00+00:00"),
        ]

        detail = build_detail(book, reviews, NAMES)

        assert detail.book.owner.name == "Alice"
        assert detail.average_rating == 4.67
        assert detail.review_count == 3
        assert [r.id for r in detail.reviews] == ["r3", "r2", "r1"]
        assert detail.reviews[0].author.name == "Bob"
        assert detail.reviews[2].author is None
        assert [(b.rating, b.count) for b in detail.rating_distribution] == [(5, 2), (4, 1)]

    def test_detail_without_reviews(self):
        detail = build_detail(FakeBook("b1", "Dune"), [], NAMES)
        assert detail.average_rating == 0
        assert detail.review_count == 0
        assert detail.reviews == []
        assert detail.rating_distribution == []
