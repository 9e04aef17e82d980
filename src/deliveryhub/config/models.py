"""Immutable configuration objects for the board engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from deliveryhub.stages import ColumnStyle, Persona, Stage, StageGraph

DEFAULT_VIEW = "all"


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class PersonaLayout:
    """Column tables for a single persona.

    Attributes:
        column_to_stages: Column key -> underlying stages, first entry is the
            stage assigned when a ticket is dropped into the column.
        column_is_extended: Column key -> hidden unless extended columns are shown.
        board_views: View name -> ordered column keys.
    """

    column_to_stages: Mapping[str, tuple[Stage, ...]]
    column_is_extended: Mapping[str, bool] = field(default_factory=_empty_mapping)
    board_views: Mapping[str, tuple[str, ...]] = field(default_factory=_empty_mapping)

    @classmethod
    def build(
        cls,
        column_to_stages: Mapping[str, object],
        column_is_extended: Mapping[str, bool] | None = None,
        board_views: Mapping[str, object] | None = None,
    ) -> PersonaLayout:
        """Build a layout, freezing every mapping and sequence."""
        return cls(
            column_to_stages=MappingProxyType(
                {key: tuple(stages) for key, stages in column_to_stages.items()}
            ),
            column_is_extended=MappingProxyType(dict(column_is_extended or {})),
            board_views=MappingProxyType(
                {name: tuple(keys) for name, keys in (board_views or {}).items()}
            ),
        )


@dataclass(frozen=True)
class BoardConfig:
    """Everything the engine needs to know about one board.

    Passed into the engine at construction and never mutated.
    """

    stage_graph: StageGraph
    layouts: Mapping[Persona, PersonaLayout]
    column_styles: Mapping[str, ColumnStyle] = field(default_factory=_empty_mapping)
    display_names: Mapping[str, str] = field(default_factory=_empty_mapping)
    stage_owners: Mapping[Stage, str] = field(default_factory=_empty_mapping)
    view_labels: Mapping[str, str] = field(default_factory=_empty_mapping)
    intentions: tuple[str, ...] = ()

    def layout(self, persona: Persona) -> PersonaLayout:
        """Layout for ``persona``; an empty layout when none is configured."""
        layout = self.layouts.get(persona)
        if layout is None:
            return PersonaLayout.build({})
        return layout

    @property
    def personas(self) -> list[Persona]:
        return list(self.layouts)

    def validated(self) -> BoardConfig:
        """Return self after checking every consistency rule.

        Raises:
            ConfigValidationError: Listing every problem found.
        """
        from deliveryhub.config.exceptions import ConfigValidationError  # noqa: PLC0415
        from deliveryhub.config.validation import validate_board_config  # noqa: PLC0415

        problems = validate_board_config(self)
        if problems:
            raise ConfigValidationError(problems)
        return self
