"""
Design State Store

Holds the single active sneaker configuration plus the selected product's
metadata. All mutation goes through merge_update / replace_all /
select_product / reset; readers only ever get copies.
"""

import logging
import threading
from typing import Any, Dict, Mapping, Optional

from busy import InFlightGuard
from schemas import SneakerConfiguration

logger = logging.getLogger(__name__)

DEFAULT_CONFIGURATION = SneakerConfiguration(
    sole="#1a1a1a",
    upper="#ffffff",
    laces="#000000",
    logo="#00a8ff",
    material="matte",
    customText="",
)
DEFAULT_PRODUCT_NAME = "Classic Runner"
DEFAULT_BASE_PRICE = 149.99


class DesignStore:
    def __init__(self):
        # sync routes run in FastAPI's thread pool
        self._lock = threading.RLock()
        self._config = DEFAULT_CONFIGURATION.model_copy()
        self.product_id: Optional[str] = None
        self.product_name: str = DEFAULT_PRODUCT_NAME
        self.base_price: float = DEFAULT_BASE_PRICE

    @property
    def configuration(self) -> SneakerConfiguration:
        with self._lock:
            return self._config.model_copy()

    def merge_update(self, fields: Mapping[str, Any]) -> SneakerConfiguration:
        """Overlay ``fields`` onto the active configuration without validating them."""
        with self._lock:
            self._config = self._config.model_copy(update=dict(fields))
            return self._config.model_copy()

    def replace_all(self, configuration: SneakerConfiguration) -> None:
        with self._lock:
            self._config = configuration.model_copy()

    def select_product(self, product_id: str, name: str, price: float,
                       default_configuration: SneakerConfiguration) -> None:
        with self._lock:
            self.product_id = product_id
            self.product_name = name
            self.base_price = price
            self._config = default_configuration.model_copy()
        logger.debug("Selected product %s (%s)", product_id, name)

    def reset(self) -> None:
        """Restore the built-in default, not the selected product's own defaults."""
        with self._lock:
            self._config = DEFAULT_CONFIGURATION.model_copy()

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "productId": self.product_id,
                "productName": self.product_name,
                "basePrice": self.base_price,
                "config": self._config.model_dump(),
            }


class CustomizerSession:
    """Context object handed to the routes: the store plus one guard per async action."""

    def __init__(self, store: Optional[DesignStore] = None):
        self.store = store or DesignStore()
        self.ai = InFlightGuard("AI design")
        self.save = InFlightGuard("save")
        self.load = InFlightGuard("load")
        self.delete = InFlightGuard("delete")

    def status(self) -> Dict[str, Any]:
        state = self.store.snapshot()
        state["busy"] = {
            "ai": self.ai.busy,
            "save": self.save.busy,
            "load": self.load.busy,
            "delete": self.delete.busy,
        }
        return state
