"""Post-processing helpers for the README document."""

from .badges import BADGE_KINDS, BadgeManager, build_badge_markdown, build_badge_url

__all__ = ["BADGE_KINDS", "BadgeManager", "build_badge_markdown", "build_badge_url"]
