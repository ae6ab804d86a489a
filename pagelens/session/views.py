from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
	from playwright.async_api import Page


class PageInfo(BaseModel):
	"""Represents one open page as seen by the registry"""

	model_config = ConfigDict(extra='forbid', frozen=True)

	id: str
	browser_id: str | None = None
	url: str = ''


@runtime_checkable
class PageRegistry(Protocol):
	"""Anything that can list open pages and hand out their Playwright handles."""

	def list_pages(self) -> list[PageInfo]: ...

	def get_page(self, page_id: str) -> 'Page | None': ...


class PageLensError(Exception):
	"""Base class for all pagelens errors"""

	message: str

	def __init__(self, message: str):
		self.message = message
		super().__init__(message)


class PageNotFoundError(PageLensError):
	"""Error raised when a page id is not known to the registry"""


class BrowserNotStartedError(PageLensError):
	"""Error raised when a page is requested before the browser was started"""
