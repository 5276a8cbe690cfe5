import logging

TRACE = 5

# Add custom TRACE level
logging.addLevelName(TRACE, "TRACE")


def _trace(self, msg, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


logging.Logger.trace = _trace
logger = logging.getLogger("challenger")


def _silence_noisy_loggers():
    """Silence noisy third-party library loggers"""
    noisy_loggers = [
        "asyncio",
        "aiohttp",
        "aiohttp.access",
        "aiohttp.client",
        "urllib3",
        "web3",
    ]

    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(verbosity: int):
    """
    Setup logging system.

    Args:
        verbosity: Log level (0=SILENT, 1=INFO, 2=DEBUG, 3=TRACE)
    """
    level_map = {
        0: logging.CRITICAL + 1,  # Silent
        1: logging.INFO,
        2: logging.DEBUG,
        3: TRACE,
    }
    level = level_map.get(verbosity, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True
    )

    _silence_noisy_loggers()

    logging.getLogger("challenger").setLevel(level)

