"""Pydantic schemas for runtime validation of manifest values."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from pandoc_tree.application.options import (
    BuildConfig,
    CompileFromPath,
    ContentElement,
    Special,
)
from pandoc_tree.manifest.options import ConverterOption

IDENT_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class SpecialSchema(BaseModel):
    """Validated ``special(ty: ...)`` element."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    element: Literal["special"] = "special"
    ty: str

    def to_element(self) -> Special:
        return Special(kind=self.ty)


class CompileFromPathSchema(BaseModel):
    """Validated ``compile_from_path(path: ..., route: ...)`` element."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    element: Literal["compile_from_path"] = "compile_from_path"
    path: str = Field(min_length=1)
    route: str | None = None

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path cannot be blank.")
        return value

    def to_element(self) -> CompileFromPath:
        return CompileFromPath(path=self.path, route=self.route)


ElementSchema = Annotated[
    SpecialSchema | CompileFromPathSchema, Field(discriminator="element")
]


class ManifestSchema(BaseModel):
    """Validated top-level manifest fields."""

    model_config = ConfigDict(extra="forbid")

    mod_name: str = Field(pattern=IDENT_PATTERN)
    tree_name: str = Field(pattern=IDENT_PATTERN)
    content: list[ElementSchema] = Field(min_length=1)
    options: list[InstanceOf[ConverterOption]] = Field(default_factory=list)
    nproc: int = Field(default=1, ge=1, strict=True)

    def to_config(self) -> BuildConfig:
        content: tuple[ContentElement, ...] = tuple(
            item.to_element() for item in self.content
        )
        return BuildConfig(
            mod_name=self.mod_name,
            tree_name=self.tree_name,
            content=content,
            converter_options=tuple(self.options),
            nproc=self.nproc,
        )
