"""Logging configuration with an extra TRACE level below DEBUG."""

import logging

TRACE = 5

# Custom TRACE level
logging.TRACE = TRACE
logging.addLevelName(TRACE, "TRACE")


# Add trace method to standard Logger class for all instances
def trace_method(self, msg, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


logging.Logger.trace = trace_method


def configure_logging(log_level_str: str) -> None:
    """Configure the root logger, honouring TRACE and VERBOSE modes."""
    log_level_str = log_level_str.upper()
    log_level = TRACE if log_level_str == "TRACE" else getattr(logging, log_level_str, logging.INFO)
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)-8s - %(message)s'
        )
    root = logging.getLogger()

    if log_level_str == "VERBOSE":
        root_level = logging.DEBUG
        proxy_level = TRACE
        root.info("VERBOSE mode enabled: client IP resolution traces active for debugging.")
    elif log_level_str == "TRACE":
        root_level = TRACE
        proxy_level = TRACE
    else:
        root_level = log_level
        proxy_level = log_level

    root.setLevel(root_level)
    logging.getLogger("gatekeeper.utils.ip_extractor").setLevel(proxy_level)
    logging.getLogger("gatekeeper.middleware").setLevel(proxy_level)

    if log_level_str == "TRACE":
        root.trace("Trace logging enabled at startup (verbose details).")
    else:
        root.debug("Debug logging enabled at startup.")
