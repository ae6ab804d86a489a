import logging
from typing import TYPE_CHECKING

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from pagelens.config import CONFIG
from pagelens.session.views import BrowserNotStartedError, PageInfo, PageNotFoundError

if TYPE_CHECKING:
	from types import TracebackType

logger = logging.getLogger(__name__)


class PlaywrightPageRegistry:
	"""Minimal page registry backed by one Playwright Chromium instance.

	Page ids are handed out as ``p1``, ``p2``... in creation order and are never
	reused within one registry.
	"""

	def __init__(self, headless: bool | None = None):
		self.headless = CONFIG.PAGELENS_HEADLESS if headless is None else headless
		self.browser_id = 'b1'

		self._playwright: Playwright | None = None
		self._browser: Browser | None = None
		self._context: BrowserContext | None = None
		self._pages: dict[str, Page] = {}
		self._page_counter = 0

	async def start(self) -> 'PlaywrightPageRegistry':
		if self._browser is not None:
			return self

		logger.debug(f'Starting Chromium headless={self.headless}')
		self._playwright = await async_playwright().start()
		self._browser = await self._playwright.chromium.launch(headless=self.headless)
		self._context = await self._browser.new_context()
		logger.info(f'🌎 Browser {self.browser_id} started')
		return self

	async def close(self) -> None:
		self._pages.clear()
		if self._browser is not None:
			try:
				await self._browser.close()
			except Exception as e:
				logger.warning(f'⚠️ Error while closing browser {self.browser_id}: {e}')
		if self._playwright is not None:
			await self._playwright.stop()
		self._browser = None
		self._context = None
		self._playwright = None

	async def __aenter__(self) -> 'PlaywrightPageRegistry':
		return await self.start()

	async def __aexit__(
		self,
		exc_type: type[BaseException] | None,
		exc_value: BaseException | None,
		traceback: 'TracebackType | None',
	) -> None:
		await self.close()

	def _next_page_id(self) -> str:
		self._page_counter += 1
		return f'p{self._page_counter}'

	async def new_page(self, url: str | None = None) -> str:
		if self._context is None:
			raise BrowserNotStartedError('Browser has not been started, call start() first')

		page = await self._context.new_page()
		page_id = self._next_page_id()
		self._pages[page_id] = page
		if url:
			await page.goto(url)
		logger.debug(f'Opened page {page_id} url={page.url}')
		return page_id

	async def close_page(self, page_id: str) -> None:
		page = self.require_page(page_id)
		del self._pages[page_id]
		await page.close()
		logger.debug(f'Closed page {page_id}')

	def list_pages(self) -> list[PageInfo]:
		return [PageInfo(id=page_id, browser_id=self.browser_id, url=page.url) for page_id, page in self._pages.items()]

	def get_page(self, page_id: str) -> Page | None:
		return self._pages.get(page_id)

	def require_page(self, page_id: str) -> Page:
		page = self._pages.get(page_id)
		if page is None:
			raise PageNotFoundError(f'Page {page_id} not found')
		return page
