"""Deterministic collaborator for tests/CI and for running without an API key."""

from __future__ import annotations

import hashlib
from typing import Optional

from .service import map_link


class FakeAssistant:
    def describe(self, latitude: float, longitude: float) -> tuple[str, Optional[str]]:
        return f"Near {latitude:.4f}, {longitude:.4f}", map_link(latitude, longitude)

    def respond(self, question: str, context: str) -> str:
        digest = hashlib.sha256(f"{question}|{context}".encode("utf-8")).hexdigest()[:16]
        return f"Simulated answer ({digest}) for: {question}"
