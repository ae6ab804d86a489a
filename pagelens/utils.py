import logging
import re
import time
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec('P')
R = TypeVar('R')

_WHITESPACE_RE = re.compile(r'\s+')


def time_execution_async(
	additional_text: str = '',
) -> Callable[[Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]]:
	def decorator(func: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, Coroutine[Any, Any, R]]:
		@wraps(func)
		async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			result = await func(*args, **kwargs)
			execution_time = time.time() - start_time
			if execution_time > 0.25:
				logger.debug(f'⏳ {additional_text.strip("-")}() took {execution_time:.2f}s')
			return result

		return wrapper

	return decorator


def collapse_whitespace(text: str | None) -> str:
	"""Collapse any run of whitespace into one space and trim."""
	if not text:
		return ''
	return _WHITESPACE_RE.sub(' ', text).strip()


def cap_text_length(text: str, max_length: int) -> str:
	if len(text) > max_length:
		return text[:max_length] + '...'
	return text


def _hex_escape(char: str) -> str:
	# Trailing space terminates the hex escape
	return f'\\{ord(char):x} '


def escape_css_identifier(value: str) -> str:
	"""Escape a value for use as an id or class selector, following the CSSOM CSS.escape() rules.

	Whitespace is hex-escaped as well, so ``save btn`` becomes ``save\\20 btn``
	rather than a descendant combinator.
	"""
	escaped = []
	for index, char in enumerate(value):
		code = ord(char)
		if code == 0:
			escaped.append('\ufffd')
		elif code <= 0x20 or code == 0x7F:
			escaped.append(_hex_escape(char))
		elif '0' <= char <= '9' and (index == 0 or (index == 1 and value[0] == '-')):
			escaped.append(_hex_escape(char))
		elif char == '-' and index == 0 and len(value) == 1:
			escaped.append('\\-')
		elif code >= 0x80 or char in '-_' or ('0' <= char <= '9') or ('a' <= char.lower() <= 'z'):
			escaped.append(char)
		else:
			escaped.append('\\' + char)
	return ''.join(escaped)


def escape_css_string(value: str) -> str:
	"""Escape a value for use inside a double-quoted CSS attribute selector."""
	return value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\a ')


def get_error_message(error: BaseException) -> str:
	message = str(error)
	return message if message else type(error).__name__
