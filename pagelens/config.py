"""Configuration for pagelens.

Environment-backed settings are read lazily through ``CONFIG`` so tests can
patch ``os.environ`` at runtime. Formatting options for the page state block
live in ``FormatConfig``.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
	value = os.getenv(name)
	if value is None or value == '':
		return default
	return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_int(name: str, default: int) -> int:
	value = os.getenv(name)
	if value is None or value.strip() == '':
		return default
	return int(value)


class Config:
	"""Attribute-style access to PAGELENS_* environment variables."""

	@property
	def PAGELENS_LOGGING_LEVEL(self) -> str:
		return os.getenv('PAGELENS_LOGGING_LEVEL', 'info').lower()

	@property
	def PAGELENS_HEADLESS(self) -> bool:
		return _env_bool('PAGELENS_HEADLESS', True)

	@property
	def PAGELENS_TEST_ID_ATTRIBUTE(self) -> str:
		return os.getenv('PAGELENS_TEST_ID_ATTRIBUTE', 'data-testid')

	@property
	def PAGELENS_DATA_ATTRIBUTE(self) -> str:
		return os.getenv('PAGELENS_DATA_ATTRIBUTE', 'data-test')

	@property
	def PAGELENS_OVERLAY_SETTLE_DELAY(self) -> float:
		return float(os.getenv('PAGELENS_OVERLAY_SETTLE_DELAY', '0.3'))

	@property
	def PAGELENS_CLICK_TIMEOUT(self) -> float:
		"""Timeout for a single overlay click, in milliseconds (Playwright units)."""
		return float(os.getenv('PAGELENS_CLICK_TIMEOUT', '5000'))

	@property
	def PAGELENS_FULL_CONTENT_ACTION(self) -> str:
		return os.getenv('PAGELENS_FULL_CONTENT_ACTION', 'GetFullPageContent')


CONFIG = Config()


class FormatConfig(BaseModel):
	"""Controls what goes into the formatted page state and how much of it."""

	model_config = ConfigDict(frozen=True, extra='forbid')

	max_content_length: int = Field(default=0, ge=0, description='Max length for the content summary (0 = no limit)')
	include_structure: bool = Field(default=True, description='Include the forms/main/tables outline')
	include_summary: bool = Field(default=True, description='Include the visible text content')
	max_links: int = Field(default=50, ge=0, description='Max number of links to show (0 = no limit)')

	@classmethod
	def from_env(cls) -> 'FormatConfig':
		defaults = cls()
		return cls(
			max_content_length=_env_int('PAGELENS_MAX_CONTENT_LENGTH', defaults.max_content_length),
			include_structure=_env_bool('PAGELENS_INCLUDE_STRUCTURE', defaults.include_structure),
			include_summary=_env_bool('PAGELENS_INCLUDE_SUMMARY', defaults.include_summary),
			max_links=_env_int('PAGELENS_MAX_LINKS', defaults.max_links),
		)


DEFAULT_FORMAT_CONFIG = FormatConfig()
