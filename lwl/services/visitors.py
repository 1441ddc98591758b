"""Anonymous page-view tracking."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lwl.core.validation import validate_input
from lwl.db.models.visitor import Visitor
from lwl.utils.exceptions import ValidationError

BUTTON_CLICK_PREFIX = "button_click:"


class VisitorService:
    def __init__(self, db: Session):
        self.db = db

    def track(
        self,
        visitor_id: str,
        page: str,
        *,
        referer: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Visitor:
        for value, limit in ((visitor_id, 64), (page, 512)):
            result = validate_input(value, max_length=limit)
            if not result.is_valid:
                raise ValidationError(result.error or "Invalid visitor data")

        visit = Visitor(
            visitor_id=visitor_id,
            page=page,
            referer=referer or None,
            user_agent=user_agent or None,
            ip_address=ip_address,
        )
        self.db.add(visit)
        self.db.commit()
        return visit

    def track_button_click(self, visitor_id: str, button_name: str, **kwargs) -> Visitor:
        return self.track(visitor_id, f"{BUTTON_CLICK_PREFIX}{button_name}", **kwargs)

    def top_pages(self, limit: int = 10) -> list[tuple[str, int]]:
        count = func.count(Visitor.id)
        stmt = (
            select(Visitor.page, count)
            .where(~Visitor.page.startswith(BUTTON_CLICK_PREFIX))
            .group_by(Visitor.page)
            .order_by(count.desc(), Visitor.page)
            .limit(limit)
        )
        return [(page, total) for page, total in self.db.execute(stmt)]

    def top_referrers(self, limit: int = 10) -> list[tuple[str, int]]:
        count = func.count(Visitor.id)
        stmt = (
            select(Visitor.referer, count)
            .where(Visitor.referer.is_not(None))
            .group_by(Visitor.referer)
            .order_by(count.desc(), Visitor.referer)
            .limit(limit)
        )
        return [(referer, total) for referer, total in self.db.execute(stmt)]

    def unique_visitors(self) -> int:
        return int(self.db.scalar(select(func.count(func.distinct(Visitor.visitor_id)))) or 0)
