from pagelens.session.service import PlaywrightPageRegistry
from pagelens.session.views import (
	BrowserNotStartedError,
	PageInfo,
	PageLensError,
	PageNotFoundError,
	PageRegistry,
)

__all__ = [
	'BrowserNotStartedError',
	'PageInfo',
	'PageLensError',
	'PageNotFoundError',
	'PageRegistry',
	'PlaywrightPageRegistry',
]
