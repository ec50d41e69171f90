from typing import Optional
from sqlmodel import Field, SQLModel

SPELL_CARD = "Spell Card"
TRAP_CARD = "Trap Card"
# "Monster Card" is not stored as such: it is every type that is neither a
# spell nor a trap (Normal Monster, Effect Monster, Fusion Monster, ...)
MONSTER_CARD = "Monster Card"
NON_MONSTER_TYPES = (SPELL_CARD, TRAP_CARD)


class Card(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    type: Optional[str] = Field(default=None, index=True)
    frame_type: Optional[str] = None
    description: Optional[str] = None
    race: Optional[str] = None
    archetype: Optional[str] = None
    ygoprodeck_url: Optional[str] = None

    # Printing
    set_name: Optional[str] = None
    set_code: Optional[str] = None
    set_rarity: Optional[str] = Field(default=None, index=True)
    set_price: Optional[float] = Field(default=None, index=True)

    # Marketplace prices
    cardmarket_price: Optional[float] = None
    tcgplayer_price: Optional[float] = None
    ebay_price: Optional[float] = None
    amazon_price: Optional[float] = None
    coolstuffinc_price: Optional[float] = None

    image_url: Optional[str] = None

    # Combat stats (monsters only)
    atk: Optional[int] = None
    defense: Optional[int] = None
    level: Optional[int] = None
    attribute: Optional[str] = None


# Columns a maintenance update may touch; id is never rewritten
EDITABLE_COLUMNS = tuple(name for name in Card.model_fields if name != "id")
