from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from chatlink.bootstrap import build_provider
from chatlink.config_loader import load_config, KNOWN_PROVIDERS
from chatlink.core.errors import ConfigError, ProviderHttpFailure, TransportFailure


class ChatRequest(BaseModel):
    message: str
    system: Optional[str] = None


def create_app(
    config_path: Path,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> FastAPI:
    cfg = load_config(Path(config_path))

    if provider:
        cfg["model"]["provider"] = str(provider).lower()
        if cfg["model"]["provider"] not in KNOWN_PROVIDERS:
            raise ConfigError(f"Unknown model.provider '{cfg['model']['provider']}'.")
    if model:
        cfg["model"]["name"] = model

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.provider.close()

    app = FastAPI(lifespan=lifespan)
    app.state.cfg = cfg
    app.state.provider = build_provider(cfg)

    @app.exception_handler(ProviderHttpFailure)
    def _provider_http_failure(_request: Request, exc: ProviderHttpFailure) -> Response:
        # Relay the provider's status and body untouched
        media_type = "application/json" if exc.error is not None else "text/plain"
        return Response(content=exc.content, status_code=exc.status_code, media_type=media_type)

    @app.exception_handler(TransportFailure)
    def _transport_failure(_request: Request, exc: TransportFailure) -> JSONResponse:
        status = 504 if exc.is_timeout else 502
        return JSONResponse({"error": exc.category.value, "message": exc.message}, status_code=status)

    @app.get("/api/config")
    def api_config():
        return JSONResponse(
            {
                "provider": cfg["model"]["provider"],
                "model": cfg["model"]["name"],
                "timeout": cfg["client"]["timeout"],
            }
        )

    @app.post("/api/chat")
    def api_chat(req: ChatRequest):
        if not req.message.strip():
            raise HTTPException(status_code=400, detail="Empty message")
        messages = []
        if req.system:
            messages.append({"role": "system", "content": req.system})
        messages.append({"role": "user", "content": req.message})
        reply = app.state.provider.chat(messages)
        return JSONResponse({"reply": reply["content"]})

    return app


def run(
    *,
    config: Path,
    host: str = "127.0.0.1",
    port: int = 8000,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> None:
    import uvicorn

    app = create_app(config, provider=provider, model=model)
    uvicorn.run(app, host=host, port=port)
