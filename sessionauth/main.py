from sessionauth import create_app
from sessionauth.core.config import get_settings
from sessionauth.core.logging import configure_logging
from sessionauth.core.observability import install_observability

settings = get_settings()
configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

app = create_app(settings)
install_observability(app)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
