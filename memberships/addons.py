from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Addon:
    id: str
    name: str
    price: Decimal
    unit: str
    description: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "unit": self.unit,
            "description": self.description,
        }


AVAILABLE_ADDONS = (
    Addon(
        id="personal-training",
        name="Personal Training",
        price=Decimal("500"),
        unit="session",
        description="One-on-one training with certified trainers",
    ),
    Addon(
        id="diet-plan",
        name="Diet Plan",
        price=Decimal("1000"),
        unit="month",
        description="Customized nutrition plans by dietitians",
    ),
    Addon(
        id="supplements",
        name="Supplements Package",
        price=Decimal("1000"),
        unit="month",
        description="Premium protein and supplement package",
    ),
)

ADDONS_BY_ID = {a.id: a for a in AVAILABLE_ADDONS}
