"""Chart metadata models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Maintainer:
    name: str = ""
    email: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> Maintainer:
        return cls(
            name=d.get("name", "") or "",
            email=d.get("email", "") or "",
            url=d.get("url", "") or "",
        )


@dataclass(frozen=True)
class ChartMetadata:
    """Snapshot of the fields of a Chart.yaml that testing relies on."""

    name: str = ""
    version: str = ""
    app_version: str = ""
    description: str = ""
    api_version: str = ""
    deprecated: bool = False
    maintainers: tuple[Maintainer, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: dict | None) -> ChartMetadata:
        if not d:
            return cls()
        return cls(
            name=d.get("name", "") or "",
            version=str(d.get("version", "") or ""),
            app_version=str(d.get("appVersion", "") or ""),
            description=d.get("description", "") or "",
            api_version=d.get("apiVersion", "") or "",
            deprecated=d.get("deprecated") is True,
            maintainers=tuple(Maintainer.from_dict(m) for m in d.get("maintainers") or []),
        )
