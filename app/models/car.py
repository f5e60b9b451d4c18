from dataclasses import dataclass, field, asdict

from app.exceptions import SchemaValidationError
from app.utils.constants import MIN_CAR_YEAR, MAX_CAR_YEAR
from app.utils.validators import is_blank, to_float_safe, str_list

# Fields an admin may set through create/update. `available` is only honoured on create.
EDITABLE_FIELDS = ("make", "model", "year", "description", "category",
                   "features", "price_per_day", "images")


@dataclass
class Car:
    """
    Schema for a car listing. The Store keeps raw dicts; this class validates
    and normalizes a payload before it becomes a stored document.
    """
    make: str
    model: str
    year: int
    price_per_day: float
    description: str = ""
    category: str = ""
    features: list = field(default_factory=list)
    available: bool = True
    images: list = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict) -> "Car":
        """Validate a raw payload; raise SchemaValidationError listing every problem."""
        errors = []

        make = payload.get("make")
        if is_blank(make) or not isinstance(make, str):
            errors.append("Please provide car make")
        model = payload.get("model")
        if is_blank(model) or not isinstance(model, str):
            errors.append("Please provide car model")

        year = payload.get("year")
        try:
            year = int(year)
            if isinstance(payload.get("year"), bool) or not (MIN_CAR_YEAR <= year <= MAX_CAR_YEAR):
                raise ValueError
        except (TypeError, ValueError):
            errors.append("Please provide manufacturing year")

        price = to_float_safe(payload.get("price_per_day"))
        if price is None or price <= 0:
            errors.append("Please provide price per day")

        features = str_list(payload.get("features"))
        if features is None:
            errors.append("Features must be a list of strings")
        images = str_list(payload.get("images"))
        if images is None:
            errors.append("Images must be a list of strings")

        available = payload.get("available", True)
        if not isinstance(available, bool):
            errors.append("Available must be a boolean")

        description = payload.get("description") or ""
        category = payload.get("category") or ""
        if not isinstance(description, str) or not isinstance(category, str):
            errors.append("Description and category must be strings")

        if errors:
            raise SchemaValidationError(errors)

        return cls(
            make=make.strip(),
            model=model.strip(),
            year=year,
            price_per_day=price,
            description=description.strip(),
            category=category.strip(),
            features=features,
            available=available,
            images=images,
        )

    def to_doc(self) -> dict:
        return asdict(self)
