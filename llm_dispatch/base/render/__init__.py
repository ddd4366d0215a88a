"""Document rendering: in-memory document model and the streaming handler."""

from .handler import RenderHandler
from .text_document import TextDocument, TextViewport, TrackedPosition

__all__ = ["RenderHandler", "TextDocument", "TextViewport", "TrackedPosition"]
