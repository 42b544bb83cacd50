"""
Shared pydantic base model.

The public JSON contract uses camelCase field names (``startDate``,
``tripCount``) while Python code uses snake_case attributes.  Models
derived from ``ApiModel`` accept either spelling on input and emit
camelCase when FastAPI serialises them.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
