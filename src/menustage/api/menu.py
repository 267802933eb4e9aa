"""Menu API endpoints.

Exposes the in-memory editor session: export, flat state, and the item
actions of the editor.
"""

from json import JSONDecodeError

from aiohttp import web

from menustage.app_keys import editor_key, reorderable_key
from menustage.editor import EDITABLE_FIELDS, MenuEditor

ITEM_ACTIONS = ("up", "down", "child-in", "child-out", "remove", "cancel", "toggle")


def create_menu_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/menu", get_menu),
        web.get("/api/menu/items", get_items),
        web.post("/api/menu/items", add_items),
        web.post("/api/menu/quick-add", quick_add),
        web.post("/api/menu/move", move_item),
        web.patch(r"/api/menu/items/{index:\d+}", update_item),
        web.delete(r"/api/menu/items/{index:\d+}", delete_item),
        web.post(r"/api/menu/items/{index:\d+}/{action}", item_action),
    ]


async def get_menu(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    if request.query.get("format") == "string":
        return web.Response(text=editor.data("string"), content_type="application/json")
    return web.json_response({"items": editor.data("object")})


async def get_items(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    return web.json_response({"items": editor.state()})


async def add_items(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    body = await _read_json(request)

    if isinstance(body, dict):
        items = body.get("items")
        depth = body.get("depth", 0)
    else:
        items = body
        depth = 0

    if not _is_int(depth) or not editor.add(items, depth):
        return web.json_response({"error": "Invalid menu payload"}, status=400)

    editor.flush()
    return web.json_response({"items": editor.state()}, status=201)


async def quick_add(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    if not editor.quick_add():
        return web.json_response({"error": "Quick add is disabled"}, status=409)

    editor.flush()
    return web.json_response(
        {"items": editor.state(), "focused": editor.focused_index},
        status=201,
    )


async def move_item(request: web.Request) -> web.Response:
    reorderable = request.app[reorderable_key]
    body = await _read_json(request)

    if not isinstance(body, dict):
        return web.json_response({"error": "Expected an object"}, status=400)
    old_index = body.get("from")
    new_index = body.get("to")
    if not _is_int(old_index) or not _is_int(new_index):
        return web.json_response({"error": "from and to must be integers"}, status=400)

    if not reorderable.move(old_index, new_index):
        return web.json_response({"error": "Move rejected"}, status=400)

    return web.json_response({"items": request.app[editor_key].state()})


async def update_item(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    index = _require_index(request, editor)
    body = await _read_json(request)

    if not isinstance(body, dict):
        return web.json_response({"error": "Expected an object"}, status=400)
    unknown = sorted(set(body) - set(EDITABLE_FIELDS))
    if unknown:
        return web.json_response(
            {"error": "Unknown fields", "fields": unknown},
            status=400,
        )

    for field, value in body.items():
        if not editor.update_field(index, field, value):
            return web.json_response(
                {"error": "Invalid field value", "field": field},
                status=400,
            )

    return web.json_response({"items": editor.state()})


async def delete_item(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    index = _require_index(request, editor)

    if not editor.remove(index):
        return web.json_response({"error": "Removal vetoed", "index": index}, status=409)

    return web.json_response({"items": editor.state()})


async def item_action(request: web.Request) -> web.Response:
    editor = request.app[editor_key]
    index = _require_index(request, editor)
    action = request.match_info["action"]

    if action not in ITEM_ACTIONS:
        return web.json_response(
            {"error": "Unknown action", "action": action},
            status=400,
        )

    if not editor.dispatch(index, action):
        return web.json_response(
            {"error": "Action not applicable", "action": action, "index": index},
            status=409,
        )

    return web.json_response({"items": editor.state()})


def _require_index(request: web.Request, editor: MenuEditor) -> int:
    index = int(request.match_info["index"])
    if index >= len(editor):
        raise web.HTTPNotFound(
            text=f'{{"error": "Item not found", "index": {index}}}',
            content_type="application/json",
        )
    return index


async def _read_json(request: web.Request) -> object:
    try:
        return await request.json()
    except JSONDecodeError:
        raise web.HTTPBadRequest(
            text='{"error": "Invalid JSON"}',
            content_type="application/json",
        ) from None


def _is_int(value: object) -> bool:
    """JSON integers only; ``true``/``false`` are not positions or depths."""
    return isinstance(value, int) and not isinstance(value, bool)
