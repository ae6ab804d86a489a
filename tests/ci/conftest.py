"""Shared fixtures: a static HTTP server for HTML fixtures and one headless Chromium per session."""

import pytest
from pytest_httpserver import HTTPServer

from pagelens.session import PlaywrightPageRegistry


def serve_html(server: HTTPServer, path: str, html: str) -> None:
	server.expect_request(path).respond_with_data(html, content_type='text/html')


@pytest.fixture(scope='session')
def http_server():
	"""Create and provide a test HTTP server that serves static content."""
	server = HTTPServer()
	server.start()
	yield server
	server.stop()


@pytest.fixture(scope='session')
def base_url(http_server):
	"""Return the base URL for the test HTTP server."""
	return f'http://{http_server.host}:{http_server.port}'


@pytest.fixture(scope='session')
async def page_registry():
	"""Create and provide a headless browser with its page registry."""
	registry = PlaywrightPageRegistry(headless=True)
	await registry.start()
	yield registry
	await registry.close()


@pytest.fixture
async def open_page(page_registry, http_server, base_url):
	"""Serve HTML at a path, open it in a new page, and close the page after the test."""
	opened: list[str] = []

	async def _open(path: str, html: str) -> str:
		serve_html(http_server, path, html)
		page_id = await page_registry.new_page(f'{base_url}{path}')
		opened.append(page_id)
		return page_id

	yield _open

	for page_id in opened:
		if page_registry.get_page(page_id) is not None:
			await page_registry.close_page(page_id)
