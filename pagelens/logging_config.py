import logging
import sys

from pagelens.config import CONFIG

_LEVELS = {
	'debug': logging.DEBUG,
	'info': logging.INFO,
	'warning': logging.WARNING,
	'error': logging.ERROR,
}


def setup_logging(level: str | None = None, stream=None) -> logging.Logger:
	"""Configure the ``pagelens`` logger tree.

	Safe to call more than once: the handler is only installed the first time.
	"""
	log_level = _LEVELS.get((level or CONFIG.PAGELENS_LOGGING_LEVEL).lower(), logging.INFO)

	logger = logging.getLogger('pagelens')
	logger.setLevel(log_level)

	if not any(getattr(h, '_pagelens_handler', False) for h in logger.handlers):
		handler = logging.StreamHandler(stream or sys.stdout)
		handler.setFormatter(logging.Formatter('%(levelname)-8s [%(name)s] %(message)s'))
		handler._pagelens_handler = True  # type: ignore[attr-defined]
		logger.addHandler(handler)
	logger.propagate = False

	# Silence third-party chatter
	for third_party in ('asyncio', 'playwright'):
		logging.getLogger(third_party).setLevel(logging.WARNING)

	return logger
