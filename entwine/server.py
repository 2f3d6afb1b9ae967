# entwine/server.py
from __future__ import annotations

import logging

from entwine.app.factory import createApp
from entwine.app.settings import settings

# Basic logging until createApp() installs the configured handlers
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


app = createApp()



def main() -> None:
    """`entwine-server` entry point; same as `uvicorn entwine.server:app`."""
    import uvicorn

    host = str(settings("server.host", "127.0.0.1"))
    port = int(settings("server.port", 7878))
    logger.info("Serving on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)



if __name__ == "__main__":
    main()
