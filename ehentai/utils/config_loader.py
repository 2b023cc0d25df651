"""
Loads client settings from the project's ``config.py``.

``config.py`` is optional (see ``config.example.py``); every setting has a
fallback so the client works without it.
"""

import logging

from ehentai.utils.request_handler import RequestConfig

logger = logging.getLogger(__name__)

_DEFAULTS = {
    'BASE_URL': 'https://e-hentai.org',
    'REQUEST_TIMEOUT': 30,
    'REQUEST_INTERVAL': 0.0,
    'EH_MEMBER_ID': None,
    'EH_PASS_HASH': None,
    'SKIP_CONTENT_WARNING': True,
    'PROXY_HTTP': None,
    'PROXY_HTTPS': None,
}


def load_settings() -> dict:
    """Return the client settings, with defaults for anything config.py lacks."""
    try:
        import config
    except ImportError:
        logger.debug("config.py not found, using default settings")
        return dict(_DEFAULTS)

    return {name: getattr(config, name, default) for name, default in _DEFAULTS.items()}


def load_request_config() -> RequestConfig:
    """Build a RequestConfig from config.py."""
    settings = load_settings()
    return RequestConfig(
        base_url=settings['BASE_URL'].rstrip('/'),
        timeout=settings['REQUEST_TIMEOUT'],
        request_interval=settings['REQUEST_INTERVAL'],
        member_id=settings['EH_MEMBER_ID'],
        pass_hash=settings['EH_PASS_HASH'],
        skip_content_warning=settings['SKIP_CONTENT_WARNING'],
        proxy_http=settings['PROXY_HTTP'],
        proxy_https=settings['PROXY_HTTPS'],
    )
