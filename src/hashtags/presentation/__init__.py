"""Hashtag panel view models."""

from hashtags import PAGE_SIZE_OPTIONS
from hashtags.presentation.hashtag_list import HashtagListView, Tab
from hashtags.presentation.panel import HashtagPanel, PanelState
from hashtags.presentation.post_card import FallbackPostRenderer
from hashtags.presentation.tag_results import TagResultsView
from hashtags.presentation.types import RenderNode, ViewState, render_text

__all__ = [
    "FallbackPostRenderer",
    "HashtagListView",
    "HashtagPanel",
    "PAGE_SIZE_OPTIONS",
    "PanelState",
    "RenderNode",
    "Tab",
    "TagResultsView",
    "ViewState",
    "render_text",
]
