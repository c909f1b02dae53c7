"""Locating the manifests of the enabled eventing sources."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

KO_ENV_KEY = "KO_DATA_PATH"
LATEST_VERSION = "latest"
COMMA = ","

_NUM = r"(?:0|[1-9][0-9]*)"
_IDENT = r"(?:[0-9A-Za-z-]+)"
_SEMVER = re.compile(
    rf"^v(?P<major>{_NUM})(?:\.(?P<minor>{_NUM})(?:\.(?P<patch>{_NUM})"
    rf"(?:-{_IDENT}(?:\.{_IDENT})*)?(?:\+{_IDENT}(?:\.{_IDENT})*)?)?)?$"
)


@dataclass
class SourceConfigs:
    """Which eventing sources are enabled."""

    ceph: bool = False
    github: bool = False
    gitlab: bool = False
    kafka: bool = False
    rabbitmq: bool = False
    redis: bool = False

    def enabled(self) -> list[str]:
        """Names of the enabled sources, in installation order."""
        order = ("ceph", "github", "gitlab", "kafka", "rabbitmq", "redis")
        return [name for name in order if getattr(self, name)]


def major_minor(version: str) -> str:
    """Return ``major.minor`` of a semantic version, with or without a leading ``v``.

    Raises ``ValueError`` when the version is not a valid semantic version.
    """
    candidate = version if version.startswith("v") else "v" + version
    match = _SEMVER.match(candidate)
    if match is None:
        raise ValueError(f"invalid version {version!r}")
    return f"{match['major']}.{match['minor'] or '0'}"


def source_path(
    version: str,
    sources: Optional[SourceConfigs],
    ko_data_dir: Optional[str] = None,
) -> str:
    """Return the comma-joined manifest paths of the enabled sources for ``version``.

    Without any source configuration the result is empty. ``ko_data_dir``
    defaults to the ``KO_DATA_PATH`` environment variable.
    """
    if sources is None:
        return ""
    if ko_data_dir is None:
        ko_data_dir = os.environ.get(KO_ENV_KEY, "")
    if version.lower() == LATEST_VERSION:
        source_version = LATEST_VERSION
    else:
        source_version = major_minor(version)
    base = os.path.join(ko_data_dir, "eventing-source", source_version)
    return COMMA.join(os.path.join(base, name) for name in sources.enabled())