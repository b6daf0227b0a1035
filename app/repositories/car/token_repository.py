"""Token repository."""

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.base.enums import TokenStatus
from app.models.car import Token
from app.repositories.base.base_repository import BaseRepository


class TokenRepository(BaseRepository[Token]):

    def __init__(self, db: Session):
        super().__init__(Token, db)

    def find_active_for_car(self, car_id: str) -> List[Token]:
        stmt = (
            select(Token)
            .where(Token.car_id == car_id, Token.status == TokenStatus.ACTIVE)
            .order_by(Token.created_at)
        )
        return self._all(stmt)

    def find_by_user(self, user_id: str) -> List[Token]:
        stmt = select(Token).where(Token.user_id == user_id).order_by(Token.created_at.desc())
        return self._all(stmt)
