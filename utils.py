# utils.py
import logging
import sys

# largest value a PostgreSQL INTEGER column holds
MAX_INT = 2**31 - 1


def setup_logger(name="jamii", level=logging.INFO):
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.propagate = False
    logger.setLevel(level)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s",
                            datefmt="%Y-%m-%d %H:%M:%S")

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    return logger


logger = setup_logger()


def parse_int(value, default, minimum=0, maximum=None):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < minimum:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


def normalize_filter(value, sentinel="All"):
    if value is None:
        return None
    value = value.strip()
    if not value or value == sentinel:
        return None
    return value


def pagination_args(args, config):
    """Read limit/offset from a query string, never failing."""
    limit = parse_int(args.get("limit"), config["DEFAULT_PAGE_SIZE"],
                      minimum=1, maximum=config["MAX_PAGE_SIZE"])
    offset = parse_int(args.get("offset"), 0, maximum=MAX_INT)
    return limit, offset
