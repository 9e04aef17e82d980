"""Consistency checks for board configuration tables."""

from __future__ import annotations

from deliveryhub.config.models import DEFAULT_VIEW, BoardConfig
from deliveryhub.stages import TERMINAL_STAGES, Stage


def validate_board_config(config: BoardConfig) -> list[str]:
    """Check every consistency rule and collect the violations.

    Args:
        config: Configuration to check.

    Returns:
        One message per problem found. Empty when the configuration is valid.
    """
    problems: list[str] = []

    for persona, layout in config.layouts.items():
        columns = layout.column_to_stages

        if DEFAULT_VIEW not in layout.board_views:
            problems.append(f"{persona}: missing '{DEFAULT_VIEW}' view")

        for view, keys in layout.board_views.items():
            for key in keys:
                if key not in columns:
                    problems.append(f"{persona}: view '{view}' references undefined column '{key}'")

        for key, stages in columns.items():
            if not stages:
                problems.append(f"{persona}: column '{key}' has no stages")

        for key in layout.column_is_extended:
            if key not in columns:
                problems.append(f"{persona}: extension flag for undefined column '{key}'")

        all_keys = layout.board_views.get(DEFAULT_VIEW, ())
        covered = {stage for key in all_keys for stage in columns.get(key, ())}
        missing = [stage.value for stage in Stage if stage not in covered]
        if DEFAULT_VIEW in layout.board_views and missing:
            problems.append(
                f"{persona}: '{DEFAULT_VIEW}' view does not cover " + ", ".join(missing)
            )

    graph = config.stage_graph
    for source, targets in graph.advance_edges.items():
        if source in targets:
            problems.append(f"{source}: advances to itself")

    for stage in Stage:
        if stage in TERMINAL_STAGES:
            continue
        if Stage.CANCELLED not in graph.backtrack_edges.get(stage, ()):
            problems.append(f"{stage}: cannot backtrack to {Stage.CANCELLED}")

    for overrides in (graph.advance_overrides, graph.backtrack_overrides):
        for persona, by_source in overrides.items():
            for source, by_target in by_source.items():
                if not isinstance(source, Stage):
                    problems.append(f"{persona}: override source '{source}' is not a stage")
                for target in by_target:
                    if not isinstance(target, Stage):
                        problems.append(f"{persona}: override target '{target}' is not a stage")

    return problems
