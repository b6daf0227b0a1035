"""
Token purchase and drop endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor
from app.schemas.car import TokenPurchase, TokenResponse
from app.schemas.common import ApiResponse, success_response
from app.services.inventory.token_service import TokenService

router = APIRouter(prefix="/tokens")


@router.post("", response_model=ApiResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
def purchase_token(
    payload: TokenPurchase,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    # admins may issue on behalf of a user
    user_id = payload.user_id if actor.is_privileged and payload.user_id else actor.id
    token = TokenService(db).purchase_token(payload.car_id, user_id, payload.kind)
    return success_response(TokenResponse.model_validate(token), "Token purchased successfully")


@router.put("/{token_id}/drop", response_model=ApiResponse[TokenResponse])
def drop_token(
    token_id: str,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    token = TokenService(db).drop_token(token_id, actor)
    return success_response(TokenResponse.model_validate(token), "Token dropped successfully")
