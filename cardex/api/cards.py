from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query

from cardex.api import deps
from cardex.schemas import CardOut, CardUpdate, MessageResponse
from cardex.services.card_repository import CardRepository
from cardex.services.catalog_query import CardFilters, PageRequest, SortMode

router = APIRouter()


@router.get("", response_model=List[CardOut])
def read_cards(
    repository: CardRepository = Depends(deps.get_card_repository),
    name: Optional[str] = Query(default=None, description="Case-insensitive substring of the card name"),
    type: Optional[str] = Query(default=None, description="Card type; 'Monster Card' matches every non spell/trap type"),
    rarity: Optional[str] = Query(default=None, description="Exact set rarity"),
    sort_price: Optional[str] = Query(default=None, alias="sortPrice", description="ASC or DESC"),
    sort_alphabetical: Optional[str] = Query(default=None, alias="sortAlphabetical", description="ASC; wins over sortPrice"),
    # Kept as raw strings: malformed values fall back to defaults instead of a 422
    page: Optional[str] = Query(default=None, description="Page number, 1-based"),
    limit: Optional[str] = Query(default=None, description="Items per page"),
) -> Any:
    """
    Retrieve cards with optional filters, a single sort order and pagination.
    """
    filters = CardFilters(name=name, type=type, rarity=rarity)
    sort_mode = SortMode.from_request(sort_alphabetical=sort_alphabetical, sort_price=sort_price)
    return repository.search(filters, sort_mode, PageRequest.parse(page=page, limit=limit))


@router.get("/{card_id}", response_model=CardOut)
def read_card(
    card_id: int,
    repository: CardRepository = Depends(deps.get_card_repository),
) -> Any:
    return repository.get(card_id)


@router.put("/{card_id}", response_model=MessageResponse)
def update_card(
    card_id: int,
    card_in: CardUpdate,
    repository: CardRepository = Depends(deps.get_card_repository),
    user_id: int = Depends(deps.get_current_user_id),
) -> Any:
    repository.update(card_id, card_in.model_dump(exclude_unset=True))
    return MessageResponse(message="Card updated")


@router.delete("/{card_id}", response_model=MessageResponse)
def delete_card(
    card_id: int,
    repository: CardRepository = Depends(deps.get_card_repository),
    user_id: int = Depends(deps.get_current_user_id),
) -> Any:
    repository.delete(card_id)
    return MessageResponse(message="Card deleted")
