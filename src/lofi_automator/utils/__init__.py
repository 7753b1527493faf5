"""Utility modules for the lofi automator."""

from lofi_automator.utils.feature_flags import FeatureFlags, get_feature_flags

__all__ = ["FeatureFlags", "get_feature_flags"]
