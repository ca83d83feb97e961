"""On-demand translation endpoint for client-side fetches after page load."""
from __future__ import annotations

from aiohttp import web
from loguru import logger

from translator.background import BackgroundTranslator
from utils.cache import TranslationCache

BACKGROUND_KEY = web.AppKey("background", BackgroundTranslator)
CACHE_KEY = web.AppKey("cache", TranslationCache)
LOCALE_KEY = web.AppKey("default_locale", str)


async def translate_content(request: web.Request) -> web.Response:
    background = request.app[BACKGROUND_KEY]
    content_id = request.query.get("contentId")
    if not content_id:
        return web.json_response({"error": "contentId is required"}, status=400)
    locale = request.query.get("locale") or request.app[LOCALE_KEY]

    status = await background.fetch(content_id, locale)
    if status is None:
        return web.json_response({"error": f"No content for {content_id}"}, status=404)
    logger.info(f"On-demand translation of {content_id} to {locale}: translated={status.translated}")
    return web.json_response(status.to_dict())


async def _shutdown(app: web.Application) -> None:
    background = app[BACKGROUND_KEY]
    await background.drain()
    await background.orchestrator.client.translator.close()
    cache = app[CACHE_KEY]
    await cache.wait_for_flushes()
    cache.flush_to_storage()


def build_app(
    background: BackgroundTranslator,
    cache: TranslationCache,
    *,
    default_locale: str = "zh-CN",
) -> web.Application:
    app = web.Application()
    app[BACKGROUND_KEY] = background
    app[CACHE_KEY] = cache
    app[LOCALE_KEY] = default_locale
    app.router.add_get("/api/translate", translate_content)
    app.on_cleanup.append(_shutdown)
    return app
