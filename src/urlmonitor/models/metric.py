# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Metric record handed to a metrics sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MEASUREMENT = "url_monitor"


@dataclass
class Metric:
    name: str = MEASUREMENT
    fields: dict[str, Any] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "fields": dict(self.fields), "tags": dict(self.tags)}
