"""Documentation framework profiles and prose component detection.

A profile pairs an import pattern with the component names whose children are
prose. Tuple order is detection priority: Starlight > Fern > Mintlify.
"""

import re
from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class FrameworkProfile:
    id: str
    pattern: re.Pattern[str]
    components: frozenset[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


STARLIGHT = FrameworkProfile(
    id="starlight",
    pattern=re.compile(r"@astrojs/"),
    components=frozenset(
        {
            "Aside", "Card", "CardGrid", "LinkCard",
            "Steps", "Tabs", "TabItem", "FileTree",
        }
    ),
)  # fmt: skip

FERN = FrameworkProfile(
    id="fern",
    pattern=re.compile(r"@fern-ui/"),
    components=frozenset(
        {
            "Info", "Warning", "Success", "Error", "Note", "Launch", "Tip", "Check",
            "Accordion", "AccordionGroup", "Aside", "Card", "Frame",
            "Steps", "Step", "Tabs", "Tab",
            "Tooltip", "Indent", "ParamField",
        }
    ),
)  # fmt: skip

MINTLIFY = FrameworkProfile(
    id="mintlify",
    pattern=re.compile(r"@mintlify/"),
    components=frozenset(
        {
            "Note", "Warning", "Info", "Tip", "Check", "Callout",
            "Card", "CardGroup", "Accordion", "AccordionGroup", "Expandable",
            "Columns", "Column", "Frame", "Steps", "Step", "Tabs", "Tab",
            "Tooltip", "ParamField", "ResponseField", "Param", "Update",
            "Aside", "Definition",
        }
    ),
)  # fmt: skip

FRAMEWORKS: tuple[FrameworkProfile, ...] = (STARLIGHT, FERN, MINTLIFY)


def get_framework(framework_id: str | None) -> FrameworkProfile | None:
    """Look up a profile by id, case-insensitively."""
    if not framework_id:
        return None
    wanted = framework_id.lower()
    return next((profile for profile in FRAMEWORKS if profile.id == wanted), None)


def detect_framework(text: str, override: str | None = None) -> FrameworkProfile | None:
    """Pick the profile governing a document.

    A recognised override wins outright; anything else falls through to
    auto-detection, where the first profile (in priority order) whose pattern
    occurs in the text is chosen.
    """
    if override:
        profile = get_framework(override)
        if profile is not None:
            logger.debug(f"Framework {profile.id!r} selected by override")
            return profile
        logger.debug(f"Ignoring unknown framework override {override!r}")

    for profile in FRAMEWORKS:
        if profile.matches(text):
            logger.debug(f"Framework {profile.id!r} detected from imports")
            return profile

    logger.debug("No framework detected, all JSX will be escaped")
    return None


def resolve_prose_components(text: str, override: str | None = None) -> frozenset[str] | None:
    """Return the prose component names for a document, or None to always escape JSX."""
    profile = detect_framework(text, override)
    return profile.components if profile is not None else None
