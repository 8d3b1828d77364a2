from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from healthmon import __version__
from healthmon.state import ReadinessState


def create_app(state: ReadinessState) -> FastAPI:
    app = FastAPI(title="healthmon", version=__version__)

    @app.get("/ready", response_class=PlainTextResponse)
    def ready() -> PlainTextResponse:
        if state.is_healthy():
            return PlainTextResponse("OK")
        return PlainTextResponse("NOT READY", status_code=503)

    @app.get("/metrics", response_class=PlainTextResponse)
    def metrics() -> PlainTextResponse:
        value = 1 if state.is_healthy() else 0
        return PlainTextResponse(f"# TYPE ready gauge\nready {value}\n")

    return app


def serve(app: FastAPI, addr: str, port: int) -> None:
    import uvicorn

    uvicorn.run(
        app,
        host=addr,
        port=int(port),
        access_log=False,
        log_level="warning",
    )
