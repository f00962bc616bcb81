from contextlib import contextmanager
from typing import Type, Any, Optional, List, Dict
from sqlalchemy import select
from sqlalchemy.orm import DeclarativeMeta
from sqlalchemy.exc import SQLAlchemyError
from app.extensions import db
from app.lib.logger import logger


@contextmanager
def transaction():
    """Yield a session; commit on success, roll back and re-raise on error."""
    session = db.session()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error(f"Transaction rolled back: {e}")
        session.rollback()
        raise
    finally:
        db.session.remove()


def _build_select(model, filters=None, order_by=None, eager_opts=None):
    stmt = select(model)
    if filters:
        for cond in filters:
            stmt = stmt.where(cond)
    if eager_opts:
        stmt = stmt.options(*eager_opts)
    if order_by:
        stmt = stmt.order_by(*order_by)
    return stmt


def select_with_filter(
    model: Type[DeclarativeMeta],
    filters: Optional[List[Any]] = None,
    order_by: Optional[List[Any]] = None,
    eager_opts: Optional[List[Any]] = None,
):
    try:
        with db.session() as session:
            stmt = _build_select(model, filters, order_by, eager_opts)
            return session.execute(stmt).scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Database error in select_with_filter: {e}")
        db.session.rollback()
        raise
    finally:
        db.session.remove()


def select_with_filter_one(
    model: Type[DeclarativeMeta],
    filters: Optional[List[Any]] = None,
    order_by: Optional[List[Any]] = None,
    eager_opts: Optional[List[Any]] = None,
):
    try:
        with db.session() as session:
            stmt = _build_select(model, filters, order_by, eager_opts)
            return session.execute(stmt).scalars().first()
    except SQLAlchemyError as e:
        logger.error(f"Database error in select_with_filter_one: {e}")
        db.session.rollback()
        raise
    finally:
        db.session.remove()


def update_one_by_filter(
    model: Type[DeclarativeMeta],
    filters: List[Any],
    data: Dict[str, Any],
):
    """Update exactly one row; raises NoResultFound when nothing matches."""
    with transaction() as session:
        stmt = _build_select(model, filters)
        instance = session.execute(stmt).scalars().one()
        for key, value in data.items():
            setattr(instance, key, value)
    return instance


def select_rows(stmt) -> List[Dict[str, Any]]:
    """Run a column-level select and return plain dicts."""
    try:
        with db.session() as session:
            return [dict(row) for row in session.execute(stmt).mappings().all()]
    except SQLAlchemyError as e:
        logger.error(f"Database error in select_rows: {e}")
        db.session.rollback()
        raise
    finally:
        db.session.remove()
