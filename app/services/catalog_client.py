# app/services/catalog_client.py
from app.domain.schemas import MenuItemInfo, RestaurantInfo
from app.services.http_client import ServiceClient
from app.utils.settings import CATALOG_SERVICE_URL


class CatalogClient(ServiceClient):
    """Read-only view of the restaurant/menu catalog."""

    service_name = "Catalog service"

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or CATALOG_SERVICE_URL, timeout)

    def resolve_menu_item(self, menu_item_id: int) -> MenuItemInfo:
        data = self.get_json(f"/menu-items/{menu_item_id}", "Menu item not found")
        return MenuItemInfo.model_validate(data)

    def resolve_restaurant(self, restaurant_id: int) -> RestaurantInfo:
        data = self.get_json(f"/restaurants/{restaurant_id}", "Restaurant not found")
        return RestaurantInfo.model_validate(data)
