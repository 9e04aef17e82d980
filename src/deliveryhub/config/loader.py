"""Load board configuration from a JSON document.

The document has the same shape as the built-in tables. Every top-level
section that is present replaces the matching default section; absent
sections keep the defaults::

    {
      "advance": {"Backlog": ["Scoping In Progress"]},
      "backtrack": {"Scoping In Progress": ["Backlog", "Cancelled"]},
      "advance_overrides": {"Client": {"In Client Approval": {
          "Ready for Development": {"label": "Approve", "icon": "✅"}}}},
      "backtrack_overrides": {},
      "personas": {"Client": {"columns": {...}, "extended": {...}, "views": {...}}},
      "column_styles": {"Backlog": {"bg": "#eee", "color": "#111"}},
      "display_names": {}, "stage_owners": {}, "view_labels": {}, "intentions": []
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from deliveryhub.config import defaults
from deliveryhub.config.exceptions import ConfigLoadError
from deliveryhub.config.models import BoardConfig, PersonaLayout
from deliveryhub.stages import (
    ColumnStyle,
    OptionOverride,
    Persona,
    Stage,
    StageError,
    StageGraph,
)

logger = logging.getLogger(__name__)


def _edges(raw: Mapping[str, list[str]]) -> dict[Stage, list[Stage]]:
    return {Stage.parse(source): [Stage.parse(t) for t in targets] for source, targets in raw.items()}


def _style(raw: Mapping[str, str]) -> ColumnStyle:
    return ColumnStyle(bg=raw["bg"], color=raw["color"])


def _override(raw: Mapping[str, Any]) -> OptionOverride:
    style = raw.get("style")
    return OptionOverride(
        label=raw.get("label"),
        icon=raw.get("icon"),
        style=_style(style) if style else None,
        autofocus=bool(raw.get("autofocus", False)),
    )


def _overrides(raw: Mapping[str, Any]) -> dict:
    result: dict[Persona, dict[Stage, dict[Stage, OptionOverride]]] = {}
    for persona, by_source in raw.items():
        result[Persona.parse(persona)] = {
            Stage.parse(source): {
                Stage.parse(target): _override(spec) for target, spec in by_target.items()
            }
            for source, by_target in by_source.items()
        }
    return result


def _layout(raw: Mapping[str, Any]) -> PersonaLayout:
    return PersonaLayout.build(
        column_to_stages={
            key: [Stage.parse(s) for s in stages] for key, stages in raw.get("columns", {}).items()
        },
        column_is_extended=raw.get("extended", {}),
        board_views=raw.get("views", {}),
    )


def parse_board_config(document: Mapping[str, Any]) -> BoardConfig:
    """Build a BoardConfig from an already-decoded document.

    Raises:
        ConfigLoadError: If a section is malformed or names an unknown stage
            or persona.
    """
    try:
        advance = _edges(document["advance"]) if "advance" in document else defaults.ADVANCE_EDGES
        backtrack = (
            _edges(document["backtrack"]) if "backtrack" in document else defaults.BACKTRACK_EDGES
        )
        advance_overrides = (
            _overrides(document["advance_overrides"])
            if "advance_overrides" in document
            else defaults.ADVANCE_OVERRIDES
        )
        backtrack_overrides = (
            _overrides(document["backtrack_overrides"])
            if "backtrack_overrides" in document
            else defaults.BACKTRACK_OVERRIDES
        )
        if "column_styles" in document:
            styles = {key: _style(spec) for key, spec in document["column_styles"].items()}
        else:
            styles = dict(defaults.COLUMN_STYLES)
        if "personas" in document:
            layouts = {
                Persona.parse(name): _layout(spec) for name, spec in document["personas"].items()
            }
        else:
            layouts = dict(defaults.DEFAULT_LAYOUTS)
        if "stage_owners" in document:
            owners = {Stage.parse(s): owner for s, owner in document["stage_owners"].items()}
        else:
            owners = dict(defaults.STAGE_OWNERS)
        display_names = dict(document.get("display_names", defaults.DISPLAY_NAMES))
        view_labels = dict(document.get("view_labels", defaults.VIEW_LABELS))
        intentions = tuple(document.get("intentions", defaults.INTENTIONS))
    except StageError as e:
        raise ConfigLoadError(str(e)) from e
    except (KeyError, TypeError, AttributeError) as e:
        raise ConfigLoadError(f"Malformed board configuration: {e!r}") from e

    return BoardConfig(
        stage_graph=StageGraph(
            advance_edges=advance,
            backtrack_edges=backtrack,
            advance_overrides=advance_overrides,
            backtrack_overrides=backtrack_overrides,
            styles=styles,
        ),
        layouts=MappingProxyType(layouts),
        column_styles=MappingProxyType(styles),
        display_names=MappingProxyType(display_names),
        stage_owners=MappingProxyType(owners),
        view_labels=MappingProxyType(view_labels),
        intentions=intentions,
    )


def load_board_config(path: str | Path) -> BoardConfig:
    """Read, parse and validate a board configuration file.

    Args:
        path: JSON file to read.

    Returns:
        The validated configuration.

    Raises:
        ConfigLoadError: If the file cannot be read or decoded.
        ConfigValidationError: If the tables are inconsistent.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigLoadError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(document, dict):
        raise ConfigLoadError(f"{path}: top level must be an object")

    logger.info("Loading board configuration from %s", path)
    return parse_board_config(document).validated()
