"""Pages endpoint.

Serves content files and rendered markdown pages for every GET path.
"""

from aiohttp import web

from diplodocus.app_keys import resolver_key


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/{path:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    resolver = request.app[resolver_key]
    page_url = str(request.url.with_query(None).with_fragment(None))

    resolution = await resolver.resolve(request.path, page_url)

    headers = dict(resolution.headers)
    body = resolution.body
    if isinstance(body, str):
        body = body.encode("utf-8")
        content_type = headers.get("Content-Type")
        if content_type is not None and "charset" not in content_type:
            headers["Content-Type"] = f"{content_type}; charset=utf-8"

    return web.Response(status=resolution.status, body=body, headers=headers)
