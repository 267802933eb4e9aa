"""aiohttp server for Menustage.

Application factory and route registration for the editor session API.
The session lives in memory only; nothing is persisted.
"""

import logging

from aiohttp import web

from menustage.api.config import create_config_routes
from menustage.api.menu import create_menu_routes
from menustage.app_keys import editor_config_key, editor_key, reorderable_key
from menustage.config import Config
from menustage.core.converter import dump_tree
from menustage.document import read_menu_file
from menustage.editor import EditorHandlers, MenuEditor
from menustage.reorder import ListReorderable

logger = logging.getLogger(__name__)


def create_app(config: Config, *, menus: object = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        menus: Initial menu document; read from editor.menu_file when None

    Returns:
        Configured aiohttp application

    Raises:
        FileNotFoundError: If the configured menu file doesn't exist
        ValueError: If the configured menu file is invalid
    """
    app = web.Application()

    if menus is None and config.editor.menu_file is not None:
        menus = dump_tree(read_menu_file(config.editor.menu_file))

    # Clients confirm removals themselves before calling the API
    handlers = EditorHandlers(on_confirm_remove=lambda item: True)
    reorderable = ListReorderable()
    editor = MenuEditor(config.editor, handlers, reorderable, menus=menus)
    editor.flush()

    app[editor_key] = editor
    app[editor_config_key] = config.editor
    app[reorderable_key] = reorderable

    app.router.add_routes(create_config_routes())
    app.router.add_routes(create_menu_routes())

    logger.info(f"Editor session ready with {len(editor)} items")
    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
