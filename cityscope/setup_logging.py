import logging, sys

# Third-party loggers that are too chatty at INFO (httpx logs every request line).
QUIET = ("httpx", "httpcore")

def setup_logging(level: str = "INFO"):
    """Root logger -> stdout, once. LOG_LEVEL drives `level`."""
    root = logging.getLogger()
    if root.handlers:  # uvicorn --reload re-imports us
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s :: %(message)s"))
    root.addHandler(handler)
    for name in QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)
