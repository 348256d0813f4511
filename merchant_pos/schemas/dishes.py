"""
Dish Schemas for Merchant POS
=============================

Pydantic models for dishes and their inventory configuration. The
inventory_config describes which raw inventory items one unit of the dish
consumes, and how customer options (size, sugar level, ...) change that.

Endpoint Coverage:
------------------
- GET /admin/dishes: List dishes
- POST /admin/dishes: Create a dish
- GET /admin/dishes/{id}: Get a dish
- PUT /admin/dishes/{id}: Update a dish
- DELETE /admin/dishes/{id}: Delete a dish
- POST /admin/dishes/{id}/usage-preview: Estimate usage for given options

Example inventory_config:
-------------------------
    {
        "base_inventory": [{"inventory_id": "3", "quantity": 200}],
        "conditional_inventory": [
            {
                "inventory_id": "7",
                "base_quantity": 1,
                "conditions": [
                    {"option_type": "size", "option_value": "large", "multiplier": 2}
                ]
            }
        ]
    }
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryCondition(BaseModel):
    option_type: str
    option_value: Any
    multiplier: float = Field(1, ge=0)
    additional_quantity: float = Field(0, ge=0)


class BaseInventoryEntry(BaseModel):
    inventory_id: str
    quantity: float = Field(..., gt=0)


class ConditionalInventoryEntry(BaseModel):
    inventory_id: str
    base_quantity: float = Field(..., gt=0)
    conditions: List[InventoryCondition] = []


class InventoryConfig(BaseModel):
    base_inventory: List[BaseInventoryEntry] = []
    conditional_inventory: List[ConditionalInventoryEntry] = []


class DishOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    price: float
    is_active: bool
    inventory_config: Optional[Dict[str, Any]] = None


class DishCreate(BaseModel):
    """
    Request model for creating a dish.

    inventory_config is validated against InventoryConfig and stored as JSON.
    """
    name: str
    category: str = "general"
    price: float = Field(..., ge=0)
    is_active: bool = True
    inventory_config: Optional[InventoryConfig] = None


class DishUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    inventory_config: Optional[InventoryConfig] = None


class UsagePreviewRequest(BaseModel):
    selected_options: Dict[str, Any] = {}


class UsageDisplayRow(BaseModel):
    key: str
    display_name: str
    quantity: float
    unit: str


class UsagePreviewResponse(BaseModel):
    dish_id: int
    usage: Dict[str, float]
    rows: List[UsageDisplayRow]
