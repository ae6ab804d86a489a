"""Single-flight refresh and cache behaviour of PageStateScanner, driven by a fake registry."""

import asyncio

import pytest

from pagelens.dom.views import PageState
from pagelens.session import PageInfo, PageRegistry, PlaywrightPageRegistry
from pagelens.state import PageStateScanner, ScannerStatus
from pagelens.state.formatter import NO_BROWSER_OPEN, NO_PAGES_OPEN, wrap_browser_state


class FakeRegistry:
	"""Registry whose pages are plain placeholders; scan_page is patched per test."""

	def __init__(self, page_ids: list[str] | None = None, missing: set[str] | None = None):
		self.page_ids = page_ids or []
		self.missing = missing or set()

	def list_pages(self) -> list[PageInfo]:
		return [PageInfo(id=page_id, browser_id='b1', url=f'http://example.test/{page_id}') for page_id in self.page_ids]

	def get_page(self, page_id: str):
		if page_id in self.missing or page_id not in self.page_ids:
			return None
		return object()


def fake_state(page_id: str) -> PageState:
	return PageState(page_id=page_id, url=f'http://example.test/{page_id}', title=f'Title {page_id}')


class TestCache:
	def test_registry_protocol(self):
		assert isinstance(FakeRegistry(), PageRegistry)
		assert isinstance(PlaywrightPageRegistry(), PageRegistry)

	def test_initial_state_is_sentinel(self):
		scanner = PageStateScanner(FakeRegistry())
		assert scanner.get_cached_state() == NO_BROWSER_OPEN
		assert scanner.status == ScannerStatus.IDLE

	async def test_no_pages(self):
		scanner = PageStateScanner(FakeRegistry())
		state = await scanner.refresh_state()

		assert state == wrap_browser_state(NO_PAGES_OPEN)
		assert scanner.get_cached_state() == state

	async def test_unstarted_browser_has_no_pages(self):
		scanner = PageStateScanner(PlaywrightPageRegistry())
		assert NO_PAGES_OPEN in await scanner.refresh_state()

	async def test_missing_page_is_skipped(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry(['p1', 'p2'], missing={'p2'}))

		async def scan_page(page_id, page):
			return fake_state(page_id)

		monkeypatch.setattr(scanner, 'scan_page', scan_page)
		state = await scanner.refresh_state()

		assert 'OPEN PAGES: p1, p2' in state
		assert '=== PAGE: p1 ===' in state
		assert '=== PAGE: p2 ===' not in state

	async def test_failing_page_becomes_error_block(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry(['p1', 'p2']))

		async def scan_page(page_id, page):
			if page_id == 'p2':
				raise RuntimeError('Target page, context or browser has been closed')
			return fake_state(page_id)

		monkeypatch.setattr(scanner, 'scan_page', scan_page)
		state = await scanner.refresh_state()

		assert 'Title: Title p1' in state
		assert '=== PAGE: p2 ===\n[Error scanning: Target page, context or browser has been closed]' in state


class TestSingleFlight:
	async def test_concurrent_refreshes_share_one_scan(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry())
		calls = 0

		async def counting_scan():
			nonlocal calls
			calls += 1
			await asyncio.sleep(0.05)
			return f'state #{calls}'

		monkeypatch.setattr(scanner, 'scan_all_pages', counting_scan)

		results = await asyncio.gather(scanner.refresh_state(), scanner.refresh_state(), scanner.refresh_state())

		assert calls == 1
		assert results == ['state #1'] * 3
		assert scanner.get_cached_state() == 'state #1'

		# Once idle, the next refresh starts a new scan
		assert await scanner.refresh_state() == 'state #2'
		assert calls == 2

	async def test_status_transitions(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry())
		release = asyncio.Event()

		async def gated_scan():
			await release.wait()
			return 'done'

		monkeypatch.setattr(scanner, 'scan_all_pages', gated_scan)

		refresh = asyncio.create_task(scanner.refresh_state())
		await asyncio.sleep(0.01)
		assert scanner.status == ScannerStatus.SCANNING
		# The cache still holds the previous snapshot while scanning
		assert scanner.get_cached_state() == NO_BROWSER_OPEN

		release.set()
		assert await refresh == 'done'
		await asyncio.sleep(0)
		assert scanner.status == ScannerStatus.IDLE

	async def test_failed_scan_resets_guard(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry())

		async def failing_scan():
			raise RuntimeError('browser crashed')

		monkeypatch.setattr(scanner, 'scan_all_pages', failing_scan)

		with pytest.raises(RuntimeError, match='browser crashed'):
			await scanner.refresh_state()
		await asyncio.sleep(0)

		assert scanner.status == ScannerStatus.IDLE
		assert scanner.get_cached_state() == NO_BROWSER_OPEN

		async def working_scan():
			return 'recovered'

		monkeypatch.setattr(scanner, 'scan_all_pages', working_scan)
		assert await scanner.refresh_state() == 'recovered'

	async def test_cancelled_caller_does_not_cancel_scan(self, monkeypatch):
		scanner = PageStateScanner(FakeRegistry())
		release = asyncio.Event()

		async def gated_scan():
			await release.wait()
			return 'fresh'

		monkeypatch.setattr(scanner, 'scan_all_pages', gated_scan)

		waiter = asyncio.create_task(scanner.refresh_state())
		await asyncio.sleep(0.01)
		scan_task = scanner._scan_task
		assert scan_task is not None

		waiter.cancel()
		with pytest.raises(asyncio.CancelledError):
			await waiter
		assert not scan_task.cancelled()
		assert scanner.status == ScannerStatus.SCANNING

		release.set()
		assert await scan_task == 'fresh'
		await asyncio.sleep(0)

		assert scanner.get_cached_state() == 'fresh'
		assert scanner.status == ScannerStatus.IDLE
