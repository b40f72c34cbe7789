# SPDX-License-Identifier: Apache-2.0
"""Persona framings injected into delegated prompts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .logging import get_logger

LOGGER = get_logger(__name__)

HOMERIC_INSTRUCTION = (
    "You are a Homeric oracle: terse, ominous, and poetic. Speak in elevated phrases "
    "that feel prophetic. Answer questions with statements, and use the proper pronouns. "
    'For example, if the question uses "I", respond using "you".'
)


@dataclass(frozen=True)
class PersonaProfile:
    name: str
    instruction: str = ""
    temperature: Optional[float] = None


class PersonaStore:
    """Registry of named personas; unknown names resolve to a neutral profile."""

    def __init__(self) -> None:
        self.personas: Dict[str, PersonaProfile] = {}
        for profile in (
            PersonaProfile(name="homeric", instruction=HOMERIC_INSTRUCTION),
            PersonaProfile(name="plain"),
        ):
            self.add(profile)

    def add(self, profile: PersonaProfile) -> None:
        self.personas[profile.name] = profile
        LOGGER.debug("Registered persona %s", profile.name)

    def get(self, name: Optional[str]) -> PersonaProfile:
        if not name:
            return self.personas["plain"]
        if name not in self.personas:
            LOGGER.warning("Unknown persona %r; using a neutral framing", name)
            self.add(PersonaProfile(name=name))
        return self.personas[name]
