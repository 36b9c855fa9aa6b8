from .app import create_app
from .config import Settings
from .logging_config import configure_logging


def main():
    settings = Settings.from_env()
    logger = configure_logging(settings)
    app = create_app(settings)
    service = app.extensions["qris_service"]

    logger.info("QRIS Calculation Service running on port %s", settings.port)
    logger.info("Endpoints: POST /generate-qris, GET /api/create, POST /validate-qris, "
                "GET /download/<artifact_id>, GET /health")
    logger.info("Amount mode: %s, artifact TTL: %ss", settings.amount_mode.value, settings.artifact_ttl)

    service.cache.start_sweep()
    try:
        app.run(host=settings.host, port=settings.port, debug=False)
    finally:
        service.cache.stop_sweep(timeout=5)


if __name__ == '__main__':
    main()
