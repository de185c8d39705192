import asyncio
import json

import httpx
import typer

from market_api.config import settings
from market_api.exceptions import AnalysisError
from market_api.analysis import service as analysis_service
from market_api.analysis.schemas import AnalysisRequest
from market_api.analysis.services.gemini_client import GeminiClient
from market_api.analysis.services.model_selector import (
    ModelCache,
    ModelSelector,
    generate_candidates,
    pick_model,
)

cli = typer.Typer()


def _require_api_key() -> str:
    api_key = (settings.GEMINI_API_KEY or "").strip()
    if not api_key:
        print("❌ GEMINI_API_KEY is not set")
        raise typer.Exit(code=1)
    return api_key


@cli.command()
def serve(
    host: str = typer.Option(settings.APP_HOST, "--host", help="Bind address."),
    port: int = typer.Option(settings.APP_PORT, "--port", help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)."),
):
    """
    Runs the API server with uvicorn.
    """
    import uvicorn

    uvicorn.run("market_api.main:app", host=host, port=port, reload=reload)


@cli.command(name="list-models")
def list_models():
    """
    Lists models that support generateContent and shows which one auto-detect would pick.
    """
    api_key = _require_api_key()

    async def runner():
        async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as http_client:
            client = GeminiClient(http_client, settings.GEMINI_API_BASE)
            return await client.list_models(api_key)

    result = asyncio.run(runner())
    if not result.ok:
        print(f"❌ Model list failed (HTTP {result.status}): {result.details}")
        raise typer.Exit(code=1)

    candidates = generate_candidates(result.parsed_json)
    for name in candidates:
        print(f" - {name}")
    print(f"\n✅ {len(candidates)} models support generateContent")
    print(f"   Auto-detect choice: {pick_model(candidates) or settings.GEMINI_FALLBACK_MODEL}")
    if settings.forced_model:
        print(f"   (GEMINI_MODEL is set, requests will use: {settings.forced_model})")


@cli.command()
def analyze(
    product: str = typer.Option(..., "--product", "-p", help="Product name, e.g. 등산화."),
    country: str = typer.Option(..., "--country", "-c", help="Target country, e.g. 중국."),
):
    """
    Runs the full market analysis pipeline once and prints the JSON response.
    """
    async def runner():
        async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as http_client:
            client = GeminiClient(http_client, settings.GEMINI_API_BASE)
            selector = ModelSelector(
                client,
                ModelCache(ttl_seconds=settings.MODEL_CACHE_TTL_SECONDS),
                settings.GEMINI_FALLBACK_MODEL,
            )
            return await analysis_service.analyze_market(
                AnalysisRequest(product=product, country=country),
                config=settings,
                client=client,
                selector=selector,
            )

    try:
        response = asyncio.run(runner())
    except AnalysisError as e:
        print(f"❌ {e.message} (HTTP {e.status_code})")
        print(json.dumps(e.to_content(), ensure_ascii=False, indent=2))
        raise typer.Exit(code=1)

    print(json.dumps(response.model_dump(by_alias=True), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    cli()
