"""JSON response bodies of the application's simple views."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HomeResponse:
    """Body of the home view: the application name."""

    app_name: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON object form."""
        return {"app_name": self.app_name}


@dataclass
class ObligacjeResponse:
    """Body listing bond names."""

    obligacje: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        """Return the JSON object form."""
        return {"obligacje": list(self.obligacje)}