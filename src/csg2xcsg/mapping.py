"""OpenSCAD -> xcsg tag mapping table and wildcard tag resolution."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from csg2xcsg.errors import ConfigError

WILDCARD = "*"
NOT_AVAILABLE = "N/A"


class TagMapping(BaseModel):
    """Read-only table from OpenSCAD tag to xcsg tag template.

    A template ending in ``*`` is completed with ``2d`` or ``3d`` once the
    dimension of the node is known.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    tags: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("tags")
    @classmethod
    def _check_templates(cls, tags: Mapping[str, str]) -> Mapping[str, str]:
        for source, target in tags.items():
            if not source or not target:
                raise ValueError(f"empty tag in mapping entry {source!r}: {target!r}")
            if WILDCARD in target[:-1]:
                raise ValueError(f"'*' is only allowed at the end of a template: {target!r}")
        return MappingProxyType(dict(tags))

    def target(self, source_tag: str) -> str | None:
        return self.tags.get(source_tag)

    def merged(self, overrides: Mapping[str, str]) -> TagMapping:
        return TagMapping(tags={**self.tags, **overrides})


DEFAULT_TAG_MAPPING = TagMapping(
    tags={
        # openscad          xcsg
        "cube": "cuboid",
        "cylinder": "cone",
        "polyhedron": "polyhedron",
        "sphere": "sphere",
        "linear_extrude": "sweep",
        "rotate_extrude": "rotate_extrude",
        "group": "union*",
        "union": "union*",
        "color": "union*",
        "multmatrix": "union*",
        "render": "union*",
        "difference": "difference*",
        "intersection": "intersection*",
        "hull": "hull*",
        "minkowski": "minkowski*",
        "circle": "circle",
        "polygon": "polygon",
        "square": "rectangle",
        "offset": "offset2d",
        "projection": "projection2d",
        # no xcsg counterpart, reported as not supported
        "import": NOT_AVAILABLE,
        "surface": NOT_AVAILABLE,
        "text": NOT_AVAILABLE,
        "resize": NOT_AVAILABLE,
    }
)


def resolve_tag(template: str, dimension: int) -> str:
    """Complete a wildcard template with the node dimension.

    Templates without a trailing ``*`` are returned unchanged. With dimension
    0 the template is returned unresolved and still ends in ``*``.
    """
    if not template.endswith(WILDCARD):
        return template
    stem = template[: -len(WILDCARD)]
    if dimension == 2:
        return stem + "2d"
    if dimension == 3:
        return stem + "3d"
    return template


def load_tag_mapping(path: Path, base: TagMapping = DEFAULT_TAG_MAPPING) -> TagMapping:
    """Load mapping overrides from a YAML file and merge them over ``base``.

    The file holds a single ``tags`` mapping of OpenSCAD tag to xcsg template.

    Raises:
        ConfigError: On unreadable files, YAML errors or schema violations.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read mapping file: {e}") from e

    yml = YAML(typ="safe")
    yml.allow_duplicate_keys = False
    try:
        data = yml.load(text)
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in mapping file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Mapping file {path} must contain a mapping at top level")

    try:
        overrides = TagMapping(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Mapping file {path} failed schema validation:\n{e}") from e
    return base.merged(overrides.tags)
