"""Pydantic base models shared by the strategy lab domain."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def _to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class WireModel(BaseModel):
    """
    Base model whose JSON form uses camelCase keys (``riskParams``, ``nextNodes``).

    Python code keeps snake_case attribute names; both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_wire(self) -> dict:
        """Dump the model using its wire (camelCase) keys."""

        return self.model_dump(mode="json", by_alias=True)


class ConfigModel(BaseModel):
    """Base for YAML-backed configuration models; unknown keys are rejected."""

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )


__all__ = ["WireModel", "ConfigModel"]
