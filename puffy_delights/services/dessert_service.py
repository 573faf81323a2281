"""
Dessert service - catalog browsing and admin dessert management
"""
import logging
from typing import Dict, List, Any, Optional

from ..exceptions import BackendError, NotFoundError, ValidationError
from ..models.dessert import Dessert, DessertForm
from ..database.repository import DessertRepository

logger = logging.getLogger(__name__)

SORT_KEYS = ("name", "price-low", "price-high", "featured")


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_int(data: Dict[str, Any], name: str, errors: List[str], default: Optional[int] = None) -> int:
    value = data.get(name)
    if default is not None and value in (None, ""):
        return default
    try:
        return int(str(value if value is not None else "").strip())
    except ValueError:
        errors.append(name)
        return 0


def parse_dessert_form(data: Dict[str, Any]) -> DessertForm:
    """Validate the admin dessert form.

    ``price_cents`` and ``pack_of`` may arrive as strings; ``tags`` may be a
    list or a comma separated string. Raises ValidationError naming every bad
    field at once.
    """
    errors: List[str] = []

    name = str(data.get("name") or "").strip()
    if not name:
        errors.append("name")

    price_cents = _as_int(data, "price_cents", errors)
    if price_cents < 0 and "price_cents" not in errors:
        errors.append("price_cents")

    pack_of = _as_int(data, "pack_of", errors, default=1)
    if pack_of < 1 and "pack_of" not in errors:
        errors.append("pack_of")

    if errors:
        raise ValidationError(f"Invalid dessert fields: {', '.join(errors)}", errors)

    tags = data.get("tags") or []
    if isinstance(tags, str):
        tags = tags.split(",")
    tags = [str(tag).strip() for tag in tags if str(tag).strip()]

    return DessertForm(
        name=name,
        description=str(data.get("description") or "").strip(),
        price_cents=price_cents,
        pack_of=pack_of,
        in_stock=_as_bool(data.get("in_stock"), True),
        is_featured=_as_bool(data.get("is_featured"), False),
        tags=tags,
        image=(data.get("image") or None),
        ingredients=(data.get("ingredients") or None)
    )


class DessertService:
    # Catalog queries for shoppers and CRUD for the admin surface

    def __init__(self, dessert_repository: DessertRepository):
        self.dessert_repo = dessert_repository

    def list_desserts(self, search: Optional[str] = None, tag: Optional[str] = None,
                      sort: str = "name") -> List[Dessert]:
        desserts = self.dessert_repo.find_desserts()

        if search:
            desserts = [d for d in desserts if d.matches(search.strip())]

        if tag and tag != "all":
            desserts = [d for d in desserts if tag in d.tags]

        if sort == "price-low":
            desserts.sort(key=lambda d: d.price_cents)
        elif sort == "price-high":
            desserts.sort(key=lambda d: d.price_cents, reverse=True)
        elif sort == "featured":
            desserts.sort(key=lambda d: not d.is_featured)
        else:
            desserts.sort(key=lambda d: d.name.lower())

        return desserts

    def featured_desserts(self) -> List[Dessert]:
        # Featured desserts, or the three newest when nothing is featured
        desserts = self.dessert_repo.find_desserts()
        featured = [d for d in desserts if d.is_featured]
        return featured if featured else desserts[:3]

    def get_dessert(self, dessert_id: int) -> Optional[Dessert]:
        return self.dessert_repo.get_dessert_by_id(dessert_id)

    def count_desserts(self) -> int:
        return self.dessert_repo.count_desserts()

    def create_dessert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            form = parse_dessert_form(data)
            dessert = self.dessert_repo.create_dessert(form)
        except ValidationError as e:
            return {"success": False, "error": str(e), "invalid_fields": e.missing_fields}
        except BackendError as e:
            logger.error("Dessert creation failed: %s", e)
            return {"success": False, "error": "Error saving dessert. Please try again.",
                    "backend_error": True}

        logger.info("Dessert %s created", dessert.id)
        return {"success": True, "dessert": dessert.to_dict()}

    def update_dessert(self, dessert_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            form = parse_dessert_form(data)
            dessert = self.dessert_repo.update_dessert(dessert_id, form)
        except ValidationError as e:
            return {"success": False, "error": str(e), "invalid_fields": e.missing_fields}
        except NotFoundError as e:
            return {"success": False, "error": str(e), "not_found": True}
        except BackendError as e:
            logger.error("Dessert %s update failed: %s", dessert_id, e)
            return {"success": False, "error": "Error saving dessert. Please try again.",
                    "backend_error": True}

        logger.info("Dessert %s updated", dessert_id)
        return {"success": True, "dessert": dessert.to_dict()}

    def delete_dessert(self, dessert_id: int) -> Dict[str, Any]:
        try:
            self.dessert_repo.delete_dessert(dessert_id)
        except NotFoundError as e:
            return {"success": False, "error": str(e), "not_found": True}
        except BackendError as e:
            logger.error("Dessert %s deletion failed: %s", dessert_id, e)
            return {"success": False, "error": "Error deleting dessert. Please try again.",
                    "backend_error": True}

        logger.info("Dessert %s deleted", dessert_id)
        return {"success": True, "message": f"Dessert {dessert_id} deleted"}
