# catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


MENU_ITEMS = {
    1: {"id": 1, "name": "Margherita", "unit_price_cents": 24900, "available": True, "restaurant_id": 1},
    2: {"id": 2, "name": "Garlic Bread", "unit_price_cents": 9900, "available": True, "restaurant_id": 1},
    3: {"id": 3, "name": "Tiramisu", "unit_price_cents": 14900, "available": False, "restaurant_id": 1},
    4: {"id": 4, "name": "Masala Dosa", "unit_price_cents": 12000, "available": True, "restaurant_id": 2},
    5: {"id": 5, "name": "Filter Coffee", "unit_price_cents": 4000, "available": True, "restaurant_id": 3},
}

RESTAURANTS = {
    1: {"id": 1, "name": "Pizza Place", "is_open": True, "owner_id": 100},
    2: {"id": 2, "name": "Dosa Corner", "is_open": True, "owner_id": 101},
    3: {"id": 3, "name": "Night Cafe", "is_open": False, "owner_id": 101},
}

ADDRESSES = {
    1: {"id": 1, "user_id": 1, "address_line": "12 MG Road", "city": "Bengaluru", "postal_code": "560001", "lat": 12.9756, "lon": 77.6050},
    2: {"id": 2, "user_id": 2, "address_line": "4 Park Street", "city": "Kolkata", "postal_code": "700016", "lat": 22.5535, "lon": 88.3514},
}


@app.get("/menu-items/{menu_item_id}")
def get_menu_item(menu_item_id: int):
    item = MENU_ITEMS.get(menu_item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


@app.get("/restaurants/{restaurant_id}")
def get_restaurant(restaurant_id: int):
    restaurant = RESTAURANTS.get(restaurant_id)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@app.get("/users/{user_id}/addresses/{address_id}")
def get_address(user_id: int, address_id: int):
    address = ADDRESSES.get(address_id)
    #scoped lookup, another user's address is a 404
    if not address or address["user_id"] != user_id:
        raise HTTPException(status_code=404, detail="Address not found")
    return address
