"""Embed snippet generation for widgets."""

from html import escape

__all__ = [
    "DEFAULT_WIDGET_BASE_URL",
    "build_embed_code",
]

DEFAULT_WIDGET_BASE_URL = "https://feedflow.app/widget"


def build_embed_code(
    widget_id: str,
    base_url: str = DEFAULT_WIDGET_BASE_URL,
    height: int = 600,
) -> str:
    """Build the ``<iframe>`` snippet that embeds a widget.

    Args:
        widget_id: Id of the stored widget
        base_url: Widget host; the id is appended as the last path segment
        height: Frame height in pixels

    Returns:
        HTML fragment, opaque to flowdesk
    """
    src = escape(f"{base_url.rstrip('/')}/{widget_id}", quote=True)
    return f'<iframe src="{src}" width="100%" height="{height}" frameborder="0"></iframe>'
