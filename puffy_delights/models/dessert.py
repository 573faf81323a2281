"""
Dessert related data models
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


@dataclass
class Dessert:
    """Dessert data model"""
    id: int
    name: str
    description: str
    price_cents: int
    pack_of: int = 1
    in_stock: bool = True
    is_featured: bool = False
    tags: List[str] = field(default_factory=list)
    image: Optional[str] = None
    ingredients: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, description and tags"""
        term = term.lower()
        return (
            term in self.name.lower()
            or term in (self.description or "").lower()
            or any(term in tag.lower() for tag in self.tags)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price_cents": self.price_cents,
            "pack_of": self.pack_of,
            "in_stock": self.in_stock,
            "is_featured": self.is_featured,
            "tags": list(self.tags),
            "image": self.image,
            "ingredients": self.ingredients,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }


@dataclass
class DessertForm:
    """Validated dessert fields coming from the admin surface"""
    name: str
    description: str
    price_cents: int
    pack_of: int
    in_stock: bool = True
    is_featured: bool = False
    tags: List[str] = field(default_factory=list)
    image: Optional[str] = None
    ingredients: Optional[str] = None
