# storefront/repos/__init__.py
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select


def fetch_page(db: Session, stmt: Select, offset: int, limit: int) -> Tuple[List, int]:
    """Zwraca (wiersze strony, liczba wszystkich wierszy) dla zapytania."""
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = db.execute(stmt.offset(offset).limit(limit)).unique().scalars().all()
    return list(rows), total
