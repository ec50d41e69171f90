from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CardBase(BaseModel):
    name: str
    type: Optional[str] = None
    frame_type: Optional[str] = None
    description: Optional[str] = None
    race: Optional[str] = None
    archetype: Optional[str] = None
    ygoprodeck_url: Optional[str] = None
    set_name: Optional[str] = None
    set_code: Optional[str] = None
    set_rarity: Optional[str] = None
    set_price: Optional[float] = None
    # Marketplace prices
    cardmarket_price: Optional[float] = None
    tcgplayer_price: Optional[float] = None
    ebay_price: Optional[float] = None
    amazon_price: Optional[float] = None
    coolstuffinc_price: Optional[float] = None
    image_url: Optional[str] = None
    atk: Optional[int] = None
    defense: Optional[int] = None
    level: Optional[int] = None
    attribute: Optional[str] = None


class CardOut(CardBase):
    id: int


class CardUpdate(BaseModel):
    """Partial update; only the fields present in the body are written."""
    name: Optional[str] = None
    type: Optional[str] = None
    frame_type: Optional[str] = None
    description: Optional[str] = None
    race: Optional[str] = None
    archetype: Optional[str] = None
    ygoprodeck_url: Optional[str] = None
    set_name: Optional[str] = None
    set_code: Optional[str] = None
    set_rarity: Optional[str] = None
    set_price: Optional[float] = None
    cardmarket_price: Optional[float] = None
    tcgplayer_price: Optional[float] = None
    ebay_price: Optional[float] = None
    amazon_price: Optional[float] = None
    coolstuffinc_price: Optional[float] = None
    image_url: Optional[str] = None
    atk: Optional[int] = None
    defense: Optional[int] = None
    level: Optional[int] = None
    attribute: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> Optional[str]:
        # Omitting name leaves it untouched; an explicit null would clear a required column
        if v is None:
            raise ValueError("name cannot be null")
        return v


# Bodies accept the field names of the original client (pseudo, mot_de_passe)
# as well as username/password
class Credentials(BaseModel):
    username: Optional[str] = Field(default=None, alias="pseudo")
    password: Optional[str] = Field(default=None, alias="mot_de_passe")

    model_config = ConfigDict(populate_by_name=True)


class UserCreate(BaseModel):
    username: str = Field(alias="pseudo", min_length=1)
    password: str = Field(alias="mot_de_passe", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class UserOut(BaseModel):
    id: int
    username: str = Field(serialization_alias="pseudo")


class LoginResponse(BaseModel):
    success: bool
    message: str
    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    success: bool = True
    message: str
