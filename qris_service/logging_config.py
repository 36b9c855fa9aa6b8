"""JSON logging for the service; every record carries the service name."""

import logging

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "qris-calculator"


def configure_logging(settings):
    """Route all logging through one JSON stream handler at ``settings.log_level``."""
    handler = logging.StreamHandler()
    fmt = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'asctime': 'timestamp', 'levelname': 'level', 'name': 'logger'},
        static_fields={'service': SERVICE_NAME, 'amount_mode': settings.amount_mode.value},
    )
    handler.setFormatter(fmt)
    root = logging.getLogger()
    root.setLevel(settings.log_level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    # werkzeug's per-request lines stay at INFO only when debugging
    logging.getLogger("werkzeug").setLevel(
        logging.INFO if settings.log_level == "DEBUG" else logging.WARNING
    )
    logger = logging.getLogger("qris_service")
    logger.setLevel(settings.log_level)
    return logger
