"""StageGraph - allowed forward and backward moves between lifecycle stages."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from deliveryhub.stages.models import (
    NEUTRAL_OPTION_STYLE,
    ColumnStyle,
    OptionOverride,
    Persona,
    Stage,
    TransitionOption,
)

logger = logging.getLogger(__name__)

ADVANCE_ICON = "➡️"
BACKTRACK_ICON = "⬅️"
CUSTOM_BACKTRACK_ICON = "🔙"
CANCEL_ICON = "🛑"

AdvanceOverrides = Mapping[Persona, Mapping[Stage, Mapping[Stage, OptionOverride]]]
BacktrackOverrides = Mapping[Persona, Mapping[Stage, Mapping[Stage, OptionOverride]]]


def _freeze_edges(edges: Mapping[Stage, object]) -> Mapping[Stage, tuple[Stage, ...]]:
    return MappingProxyType({source: tuple(targets) for source, targets in edges.items()})


def _freeze_overrides(
    overrides: Mapping[Persona, Mapping[Stage, Mapping[Stage, OptionOverride]]] | None,
) -> Mapping[Persona, Mapping[Stage, Mapping[Stage, OptionOverride]]]:
    frozen: dict[Persona, Mapping[Stage, Mapping[Stage, OptionOverride]]] = {}
    for persona, by_source in (overrides or {}).items():
        frozen[persona] = MappingProxyType(
            {source: MappingProxyType(dict(by_target)) for source, by_target in by_source.items()}
        )
    return MappingProxyType(frozen)


class StageGraph:
    """Directed graph of advance and backtrack edges over the stage set.

    The graph is immutable once built. Persona override tables only change
    how an edge is presented (label, icon, style), except backtrack
    overrides, which replace the backtrack targets for that stage entirely.
    """

    def __init__(
        self,
        advance_edges: Mapping[Stage, object],
        backtrack_edges: Mapping[Stage, object],
        advance_overrides: AdvanceOverrides | None = None,
        backtrack_overrides: BacktrackOverrides | None = None,
        styles: Mapping[str, ColumnStyle] | None = None,
    ) -> None:
        """Initialize the graph.

        Args:
            advance_edges: Stage -> ordered forward/lateral targets.
            backtrack_edges: Stage -> ordered regression targets.
            advance_overrides: persona -> from stage -> to stage -> decoration.
            backtrack_overrides: persona -> from stage -> {to stage: decoration};
                when present for a stage, replaces the default targets.
            styles: Style lookup keyed by stage or column name.
        """
        self.advance_edges = _freeze_edges(advance_edges)
        self.backtrack_edges = _freeze_edges(backtrack_edges)
        self.advance_overrides = _freeze_overrides(advance_overrides)
        self.backtrack_overrides = _freeze_overrides(backtrack_overrides)
        self.styles: Mapping[str, ColumnStyle] = MappingProxyType(dict(styles or {}))

    def _style_for(self, target: Stage) -> ColumnStyle:
        return self.styles.get(target.value, NEUTRAL_OPTION_STYLE)

    def get_advance_options(self, current: Stage, persona: Persona) -> list[TransitionOption]:
        """Forward moves available from ``current`` for ``persona``.

        A stage with no entry in the advance table has no options.
        """
        persona_overrides = self.advance_overrides.get(persona, {}).get(current, {})
        options = []
        for target in self.advance_edges.get(current, ()):
            if target == current:
                continue
            override = persona_overrides.get(target, OptionOverride())
            icon = override.icon or ADVANCE_ICON
            if target == Stage.CANCELLED:
                icon = CANCEL_ICON
            options.append(
                TransitionOption(
                    target=target,
                    label=override.label or target.value,
                    icon=icon,
                    style=override.style or self._style_for(target),
                    autofocus=override.autofocus,
                )
            )
        return options

    def get_backtrack_options(self, current: Stage, persona: Persona) -> list[TransitionOption]:
        """Backward moves available from ``current`` for ``persona``."""
        custom = self.backtrack_overrides.get(persona, {}).get(current)
        if custom is not None:
            return [
                TransitionOption(
                    target=target,
                    label=override.label or target.value,
                    icon=override.icon or CUSTOM_BACKTRACK_ICON,
                    style=override.style or self._style_for(target),
                    autofocus=override.autofocus,
                )
                for target, override in custom.items()
            ]
        return [
            TransitionOption(
                target=target,
                label=target.value,
                icon=BACKTRACK_ICON,
                style=self._style_for(target),
            )
            for target in self.backtrack_edges.get(current, ())
        ]

    def is_legal(self, current: Stage, target: Stage, persona: Persona) -> bool:
        """Whether ``target`` is offered as an advance or backtrack option."""
        options = self.get_advance_options(current, persona) + self.get_backtrack_options(
            current, persona
        )
        return any(option.target == target for option in options)

    def stages(self) -> set[Stage]:
        """Every stage referenced by the edge and override tables."""
        referenced: set[Stage] = set()
        for table in (self.advance_edges, self.backtrack_edges):
            for source, targets in table.items():
                referenced.add(source)
                referenced.update(targets)
        for overrides in (self.advance_overrides, self.backtrack_overrides):
            for by_source in overrides.values():
                for source, by_target in by_source.items():
                    referenced.add(source)
                    referenced.update(by_target)
        return referenced
