"""Config API endpoint."""

from aiohttp import web

from menustage.app_keys import editor_config_key


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    config = request.app[editor_config_key]
    return web.json_response(
        {
            "alwaysShowUrl": config.always_show_url,
            "inlineAddmenu": config.inline_addmenu,
            "maxDepth": config.max_depth,
            "confirmRemove": config.confirm_remove,
            "focusAfterAdd": config.focus_after_add,
            "btnAddmenuSelector": config.btn_addmenu_selector,
        },
    )
