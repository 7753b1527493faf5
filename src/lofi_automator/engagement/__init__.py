"""Post-publish engagement follow-ups."""

from lofi_automator.engagement.reporter import ChannelSummary, EngagementReporter

__all__ = ["ChannelSummary", "EngagementReporter"]
