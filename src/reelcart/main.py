import logging
from functools import partial
from typing import Optional

import uvicorn
from fasthtml.common import *
from monsterui.all import *

from . import catalog
from .adapters.fasthtml import configure_app
from .config import AppConfig, get_config, set_config
from .core import datastar_script
from .entities import Cart, Navigation, VideoFeed
from .logging_config import configure_logging
from .pages import rt as pages_rt
from .pages.components import app_styles
from .persistence import start_sweepers, stop_sweepers

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None):
    """Build the FastHTML app with every entity route and page registered."""
    if config is not None:
        set_config(config)
    config = get_config()

    configure_logging(config.logging)
    catalog.seed(config.feed.seed)

    app, rt = fast_app(
        htmx=False,
        pico=False,
        live=config.web.live,
        debug=config.web.debug,
        secret_key=config.web.secret_key,
        # Sweepers run on the server loop between startup and shutdown
        on_startup=[partial(start_sweepers, config.session.sweep_interval)],
        on_shutdown=[stop_sweepers],
        hdrs=(
            Theme.rose.headers(),
            datastar_script,
            app_styles,
        ),
        htmlkw=dict(cls="bg-black"),
    )

    configure_app(app, rt, [VideoFeed, Cart, Navigation])
    pages_rt.to_app(app)

    logger.info("ReelCart ready (%s)", config.environment.value)
    return app


def run():
    """Console entry point."""
    config = get_config()
    uvicorn.run(create_app(config), host=config.web.host, port=config.web.port)


if __name__ == "__main__":
    run()
