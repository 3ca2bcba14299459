"""
Database Schemas for SneakPeak

Each Pydantic model stored in MongoDB maps to a collection named after
the lowercase of the class name.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"
CUSTOM_TEXT_MAX_LENGTH = 10

Material = Literal["matte", "shiny"]


class SneakerConfiguration(BaseModel):
    sole: str = Field(..., pattern=HEX_COLOR)
    upper: str = Field(..., pattern=HEX_COLOR)
    laces: str = Field(..., pattern=HEX_COLOR)
    logo: str = Field(..., pattern=HEX_COLOR)
    material: Material = "matte"
    customText: Optional[str] = Field(None, max_length=CUSTOM_TEXT_MAX_LENGTH)


class ConfigurationUpdate(BaseModel):
    """Partial configuration for merge updates; unset fields are left alone."""
    sole: Optional[str] = Field(None, pattern=HEX_COLOR)
    upper: Optional[str] = Field(None, pattern=HEX_COLOR)
    laces: Optional[str] = Field(None, pattern=HEX_COLOR)
    logo: Optional[str] = Field(None, pattern=HEX_COLOR)
    material: Optional[Material] = None
    customText: Optional[str] = Field(None, max_length=CUSTOM_TEXT_MAX_LENGTH)


class Product(BaseModel):
    """Sneaker template from the catalog"""
    id: str
    name: str
    base_price: float = Field(..., ge=0)
    default_config: SneakerConfiguration


class Design(BaseModel):
    """
    Saved sneaker custom designs
    Collection: design
    """
    userId: str = Field(..., description="Owner id (Supabase uid or anonymous token)")
    productId: str = Field(..., description="Catalog product this design is based on")
    name: str = Field(..., min_length=1, description="Friendly name for the design")
    configuration: SneakerConfiguration
    tags: List[str] = Field(default_factory=list)


# Request bodies

class SaveDesignBody(BaseModel):
    userId: str = Field(..., min_length=1)
    name: str
    tags: List[str] = []

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please give your design a name.")
        return v.strip()


class SelectProductBody(BaseModel):
    productId: str


class AIDesignerBody(BaseModel):
    prompt: str
