"""Shared pydantic base for models exchanged with the browser as camelCase JSON."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys.

    Python code uses attribute names; ``to_wire`` produces the camelCase
    JSON the frontend and stored budget states use. NaN and infinity are
    rejected for every float field.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
