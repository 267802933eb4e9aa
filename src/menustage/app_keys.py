"""Application keys for type-safe app configuration access."""

from aiohttp import web

from menustage.config import EditorConfig
from menustage.editor import MenuEditor
from menustage.reorder import ListReorderable

editor_key = web.AppKey("editor", MenuEditor)
editor_config_key = web.AppKey("editor_config", EditorConfig)
reorderable_key = web.AppKey("reorderable", ListReorderable)
