from __future__ import annotations

from specdev.artifacts.repository import RepositorySnapshot
from specdev.stages import Stage


def next_stage(snapshot: RepositorySnapshot) -> Stage:
    """Next actionable stage for a repository snapshot.

    An incomplete intake form still points at REQUIREMENTS: that is the step
    the user works towards, and the requirements command itself reports what
    has to be filled in first.
    """
    if not snapshot.intake_present:
        return Stage.INTAKE
    if not snapshot.intake_complete:
        return Stage.REQUIREMENTS
    if not snapshot.has(Stage.REQUIREMENTS):
        return Stage.REQUIREMENTS
    if not snapshot.has(Stage.DESIGN):
        return Stage.DESIGN
    # Re-running the last stage is the default once everything exists.
    return Stage.IMPLEMENTATION
