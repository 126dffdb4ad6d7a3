# app/services/address_client.py
from app.domain.errors import NotFound
from app.domain.schemas import AddressInfo
from app.services.http_client import ServiceClient
from app.utils.settings import USER_SERVICE_URL


class AddressClient(ServiceClient):
    service_name = "User service"

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        super().__init__(base_url or USER_SERVICE_URL, timeout)

    def resolve_address(self, address_id: int, owner_user_id: int) -> AddressInfo:
        data = self.get_json(
            f"/users/{owner_user_id}/addresses/{address_id}",
            "Delivery address not found",
        )
        address = AddressInfo.model_validate(data)

        #scoped lookup, someone else's address looks exactly like a missing one
        if address.user_id != owner_user_id:
            raise NotFound("Delivery address not found")

        return address
