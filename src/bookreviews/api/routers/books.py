"""Book API router: listing, detail and ownership-checked CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends

from ...books.manager import BookManager
from ...catalog.manager import CatalogManager
from ...catalog.schemas import BookDetail, ListingPage, ListingQuery
from ...db.schemas import BookCreate, BookResponse, BookUpdate
from ..deps import get_actor_id, get_book_manager, get_catalog_manager

router = APIRouter()


@router.get("", response_model=ListingPage)
def list_books(
    page: Optional[str] = None,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    sort: Optional[str] = None,
    catalog: CatalogManager = Depends(get_catalog_manager),
) -> ListingPage:
    """List books with search, genre filter, sorting and pagination."""
    query = ListingQuery(page=page, search=search, genre=genre, sort=sort)
    return catalog.list_books(query)


@router.get("/{book_id}", response_model=BookDetail)
def get_book(
    book_id: str,
    catalog: CatalogManager = Depends(get_catalog_manager),
) -> BookDetail:
    """Get a book with its reviews and rating summary."""
    return catalog.get_book_detail(book_id)


@router.post("", response_model=BookResponse)
def create_book(
    data: BookCreate,
    actor_id: str = Depends(get_actor_id),
    books: BookManager = Depends(get_book_manager),
) -> BookResponse:
    """Create a new book owned by the caller."""
    return BookResponse.model_validate(books.create_book(actor_id, data))


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: str,
    data: BookUpdate,
    actor_id: str = Depends(get_actor_id),
    books: BookManager = Depends(get_book_manager),
) -> BookResponse:
    """Update a book the caller owns."""
    return BookResponse.model_validate(books.update_book(actor_id, book_id, data))


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    actor_id: str = Depends(get_actor_id),
    books: BookManager = Depends(get_book_manager),
) -> dict[str, str]:
    """Delete a book the caller owns, along with its reviews."""
    books.delete_book(actor_id, book_id)
    return {"msg": "Book and associated reviews removed"}
