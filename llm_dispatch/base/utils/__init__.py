"""Utility helpers (templating, filesystem) shared by the dispatch layer."""

from .template import template_replace, template_render
from .files import new_uuid, payload_file_name, prepare_dir, prune_dir, write_json

__all__ = [
    "template_replace",
    "template_render",
    "new_uuid",
    "payload_file_name",
    "prepare_dir",
    "prune_dir",
    "write_json",
]
