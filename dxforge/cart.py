"""A cart for staging packages before installing them all at once."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    """A package staged for installation, with its files and configuration."""

    id: str
    package_id: str
    variant: Optional[str] = None
    files: List[Path] = field(default_factory=list)
    config: Any = None

    def __post_init__(self) -> None:
        self.files = [Path(f) for f in self.files]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "package_id": self.package_id,
            "variant": self.variant,
            "files": [str(f) for f in self.files],
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CartItem":
        if not isinstance(data, dict):
            raise ValueError("cart item must be a JSON object")
        missing = [key for key in ("id", "package_id", "files", "config") if key not in data]
        if missing:
            raise ValueError(f"missing field `{missing[0]}`")
        if not isinstance(data["files"], list):
            raise ValueError("`files` must be a list")
        return cls(
            id=str(data["id"]),
            package_id=str(data["package_id"]),
            variant=data.get("variant"),
            files=[Path(f) for f in data["files"]],
            config=data["config"],
        )


_lock = threading.Lock()
_items: List[CartItem] = []


def stage_item_in_cart(item: CartItem) -> None:
    with _lock:
        logger.info("Staging item in cart: %s", item.package_id)
        _items.append(item)


def commit_entire_cart() -> List[Path]:
    """Install every staged item, empty the cart and return the files installed."""
    with _lock:
        items = list(_items)
        _items.clear()
    logger.info("Committing cart with %d items", len(items))
    return [path for item in items for path in item.files]


def commit_cart_immediately() -> List[Path]:
    return commit_entire_cart()


def clear_cart_completely() -> None:
    with _lock:
        logger.info("Clearing cart (%d items)", len(_items))
        _items.clear()


def remove_specific_cart_item(item_id: str) -> None:
    """Remove every staged item with the given id."""
    with _lock:
        _items[:] = [item for item in _items if item.id != item_id]
    logger.info("Removed item from cart: %s", item_id)


def get_current_cart_contents() -> List[CartItem]:
    with _lock:
        return list(_items)


def export_cart_as_shareable_json() -> str:
    with _lock:
        data = [item.to_dict() for item in _items]
    return json.dumps(data, indent=2, ensure_ascii=False)


def import_cart_from_json(json_text: str) -> None:
    """Add the items in a JSON array to the cart; raises ValueError if malformed."""
    data = json.loads(json_text)
    if not isinstance(data, list):
        raise ValueError("cart JSON must be an array")
    items = [CartItem.from_dict(entry) for entry in data]
    with _lock:
        logger.info("Importing %d items into cart", len(items))
        _items.extend(items)