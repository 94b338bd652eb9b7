"""
Catalog administration — book metadata CRUD for administrators.

Endpoints:
    POST    /admin/books            — Create a book (201)
    PUT     /admin/books/{book_id}  — Replace a book's metadata
    DELETE  /admin/books/{book_id}  — Remove a book (204)

Invalid forms are rejected with 422 and a field -> message map in
error.details.fields.
"""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import require_admin
from domain.responses import success_response
from models import BookForm, BookView
from utils.validators import validated_book_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/books", tags=["admin"])


@router.post("", status_code=201)
async def create_book(
    form: BookForm,
    admin_id: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    from services import catalog_service

    book = await catalog_service.create_book(db, form=form)
    await db.commit()
    await db.refresh(book)
    return success_response(data=BookView.from_book(book).model_dump(by_alias=True, mode="json"))


@router.put("/{book_id}")
async def update_book(
    form: BookForm,
    book_id: str = Depends(validated_book_id),
    admin_id: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    from services import catalog_service

    book = await catalog_service.update_book(db, book_id=book_id, form=form)
    await db.commit()
    await db.refresh(book)
    return success_response(data=BookView.from_book(book).model_dump(by_alias=True, mode="json"))


@router.delete("/{book_id}", status_code=204)
async def delete_book(
    book_id: str = Depends(validated_book_id),
    admin_id: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    from services import catalog_service

    await catalog_service.delete_book(db, book_id=book_id)
    await db.commit()
    return Response(status_code=204)
