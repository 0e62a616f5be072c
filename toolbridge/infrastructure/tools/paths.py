"""
Path resolution against a SandboxPolicy.
"""

from __future__ import annotations

import os
from typing import Iterable

from toolbridge.abstractions.dto.tools import SandboxPolicy
from .errors import PathResolutionError


def _is_within(path: str, root: str) -> bool:
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # different drives on Windows
        return False


class SandboxPaths:
    """
    Resolves tool path arguments for one policy.

    Relative paths are joined onto the root directory, absolute paths are taken
    as given. When the policy confines paths, the result (after following
    symlinks) must sit inside the root or one of the allowed roots.
    """

    def __init__(self, policy: SandboxPolicy):
        self.policy = policy
        self._roots = [os.path.realpath(r) for r in self._all_roots(policy)]

    @staticmethod
    def _all_roots(policy: SandboxPolicy) -> Iterable[str]:
        yield policy.root_directory
        yield from sorted(policy.allowed_roots)

    @property
    def root(self) -> str:
        return self.policy.root_directory

    def resolve(self, raw: str) -> str:
        if "\x00" in raw:
            raise PathResolutionError(f"invalid path {raw!r}")
        expanded = os.path.expanduser(raw)
        if os.path.isabs(expanded):
            resolved = os.path.normpath(expanded)
        else:
            resolved = os.path.normpath(os.path.join(self.policy.root_directory, expanded))

        if self.policy.confine_paths:
            real = os.path.realpath(resolved)
            if not any(_is_within(real, root) for root in self._roots):
                raise PathResolutionError(f"path '{raw}' is outside the sandbox roots")
        return resolved


__all__ = ["SandboxPaths"]
