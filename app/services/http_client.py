# app/services/http_client.py
import requests
from requests import RequestException

from app.domain.errors import CollaboratorUnavailable, NotFound
from app.utils.retry import http_retry
from app.utils.settings import HTTP_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ServiceClient:
    """
    Base for the collaborator clients.
    Retries belong here (tenacity), the order core never retries on its own.
    404 -> NotFound, transport errors and 5xx after retries -> Unavailable.
    """

    service_name = "service"

    def __init__(self, base_url: str, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.session = requests.Session()

    @http_retry()
    def _fetch(self, url: str) -> requests.Response:
        logger.info(f"{self.__class__.__name__} GET {url}")
        return self.session.get(url, timeout=self.timeout)

    def get_json(self, path: str, not_found_message: str) -> dict:
        url = f"{self.base_url}{path}"

        try:
            resp = self._fetch(url)
        except RequestException as e:
            logger.error(f"{self.service_name} unreachable ({url}): {e}")
            raise CollaboratorUnavailable(f"{self.service_name} is unavailable") from e

        if resp.status_code == 404:
            raise NotFound(not_found_message)

        if resp.status_code >= 400:
            logger.error(f"{self.service_name} answered {resp.status_code} for {url}")
            raise CollaboratorUnavailable(f"{self.service_name} is unavailable")

        return resp.json()
