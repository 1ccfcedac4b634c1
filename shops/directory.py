"""Static shop directory.

The directory is a read-only lookup table: shops and their products are not
stored in the database and are never mutated at runtime. Shop accounts are
linked to one of these ids at registration, and delivery requests carry the id
so a shop can find its own orders.
"""

SHOPS = [
    {
        "id": "shop1",
        "name": "Village General Store",
        "address": "Main Road 12, Rampur",
        "products": [
            {"id": "p1", "name": "Rice 5kg", "price": 6.5},
            {"id": "p2", "name": "Lentils 1kg", "price": 2.2},
            {"id": "p3", "name": "Cooking Oil 1L", "price": 3.1},
            {"id": "p4", "name": "Salt 1kg", "price": 0.6},
        ],
    },
    {
        "id": "shop2",
        "name": "Green Valley Pharmacy",
        "address": "Market Square 3, Sonpur",
        "products": [
            {"id": "p5", "name": "Paracetamol 500mg", "price": 1.8},
            {"id": "p6", "name": "Oral Rehydration Salts", "price": 0.9},
            {"id": "p7", "name": "Bandage Roll", "price": 1.2},
        ],
    },
    {
        "id": "shop3",
        "name": "Fresh Farm Produce",
        "address": "Canal Lane 7, Rampur",
        "products": [
            {"id": "p8", "name": "Tomatoes 1kg", "price": 1.4},
            {"id": "p9", "name": "Onions 1kg", "price": 1.1},
            {"id": "p10", "name": "Potatoes 2kg", "price": 1.6},
            {"id": "p11", "name": "Eggs (12)", "price": 2.4},
        ],
    },
    {
        "id": "shop4",
        "name": "Hardware & Tools",
        "address": "Station Road 21, Sonpur",
        "products": [
            {"id": "p12", "name": "Torch", "price": 4.5},
            {"id": "p13", "name": "Batteries AA (4)", "price": 2.0},
        ],
    },
]


def get_shop(shop_id):
    """Return the shop dict for `shop_id`, or None if it is unknown."""
    for shop in SHOPS:
        if shop["id"] == shop_id:
            return shop
    return None


def shop_exists(shop_id) -> bool:
    return get_shop(shop_id) is not None
