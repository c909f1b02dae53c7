"""Reconcile stages run one after another over a manifest."""

from __future__ import annotations

from typing import Any, Callable

Manifest = list[dict[str, Any]]
Stage = Callable[[Manifest, Any], Manifest]


class Stages(list):
    """An ordered list of stages; each takes a manifest and returns the next one."""

    def execute(self, manifest: Manifest, instance: Any) -> Manifest:
        """Run every stage in order and return the final manifest.

        The first stage that raises stops the run; the exception propagates.
        """
        for stage in self:
            manifest = stage(manifest, instance)
        return manifest


def no_op(manifest: Manifest, instance: Any) -> Manifest:
    """A stage that returns the manifest unchanged."""
    return manifest