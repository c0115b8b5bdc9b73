from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Food:
    # nutrition values are per 100 g
    id: str
    name: str
    category: str
    protein: float
    calories: float
    fat: float
    carbs: float
    serving: str = "100g"
    image: str = ""

    def as_dict(self) -> dict:
        return asdict(self)


FOOD_CATEGORIES = ("Protein", "Carbohydrates", "Fats")

FOODS = (
    Food("chicken-breast", "Chicken Breast", "Protein", 31, 165, 3.6, 0,
         image="https://images.unsplash.com/photo-1604503468506-a8da13d82791?w=400&h=300&fit=crop"),
    Food("eggs", "Eggs (boiled)", "Protein", 13, 155, 11, 1.1,
         image="https://images.unsplash.com/photo-1518569656558-1f25e69d93d7?w=400&h=300&fit=crop"),
    Food("whey-protein", "Whey Protein Powder", "Protein", 80, 370, 3, 10),
    Food("cottage-cheese", "Cottage Cheese / Paneer", "Protein", 18, 265, 20, 1.2),
    Food("greek-yogurt", "Greek Yogurt (plain)", "Protein", 10, 59, 0.4, 3.6),
    Food("brown-rice", "Brown Rice (cooked)", "Carbohydrates", 2.6, 111, 0.9, 23),
    Food("oats", "Oats", "Carbohydrates", 13, 389, 7, 66),
    Food("sweet-potato", "Sweet Potato (boiled)", "Carbohydrates", 1.6, 86, 0.1, 20),
    Food("peanut-butter", "Peanut Butter", "Fats", 25, 588, 50, 20),
    Food("almonds", "Almonds", "Fats", 21, 579, 50, 22,
         image="https://images.unsplash.com/photo-1508061253366-f7da158b6d46?w=400&h=300&fit=crop"),
)

FOODS_BY_ID = {f.id: f for f in FOODS}


def search_foods(category: str = "", search: str = "") -> list[Food]:
    category = (category or "").strip()
    needle = (search or "").strip().lower()
    result = []
    for food in FOODS:
        if category and category != "All" and food.category != category:
            continue
        if needle and needle not in food.name.lower():
            continue
        result.append(food)
    return result
