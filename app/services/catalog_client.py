import logging
from dataclasses import dataclass

import requests

from app.core.config import settings
from app.core.errors import DependencyError

logger = logging.getLogger(__name__)


@dataclass
class CatalogConfig:
    base_url: str           # manageservice root, e.g. https://manageservice.up.railway.app
    timeout: int = 5


class CatalogClient:
    """Read-only view of the service catalog's GET /api/services listing."""

    def __init__(self, cfg: CatalogConfig):
        self.cfg = cfg

    def list_services(self) -> list[dict]:
        url = self.cfg.base_url.rstrip("/") + "/api/services"
        try:
            r = requests.get(url, timeout=self.cfg.timeout)
        except requests.RequestException as e:
            logger.error("Service catalog unreachable at %s: %s", url, e)
            raise DependencyError("Service catalog unavailable") from e
        if r.status_code >= 400:
            logger.error("Service catalog error %s: %s", r.status_code, r.text[:200])
            raise DependencyError("Service catalog unavailable")
        try:
            data = r.json()
        except ValueError as e:
            raise DependencyError("Service catalog returned invalid JSON") from e
        if not isinstance(data, list):
            raise DependencyError("Service catalog returned unexpected payload")
        return data

    def get_service(self, service_id: int) -> dict | None:
        for svc in self.list_services():
            try:
                if int(svc.get("id")) == service_id:
                    return svc
            except (TypeError, ValueError):
                continue
        return None


def get_catalog_client() -> CatalogClient | None:
    if not settings.SERVICE_CATALOG_URL:
        return None
    return CatalogClient(CatalogConfig(settings.SERVICE_CATALOG_URL, settings.SERVICE_CATALOG_TIMEOUT))
