import logging, sys

LEVEL = logging.INFO

def configure_logging(level: str | int = LEVEL) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    # httpx logs full request URLs at INFO, and ours carry the api_key
    logging.getLogger("httpx").setLevel(logging.WARNING)
