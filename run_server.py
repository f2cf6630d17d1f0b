#!/usr/bin/env python3
"""
Message Board Server
Serves the thread and reply API with uvicorn
"""
import logging
import sys
import uvicorn
from config import DEFAULT_HOST, DEFAULT_PORT, DB_PATH, LOG_LEVEL


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger = logging.getLogger(__name__)

    logger.info("Starting message board server on %s:%s", DEFAULT_HOST, DEFAULT_PORT)
    logger.info("Thread store: %s", DB_PATH)
    logger.info("API endpoints: /api/threads/{board} and /api/replies/{board}")

    try:
        from app import app

        uvicorn.run(
            app,
            host=DEFAULT_HOST,
            port=DEFAULT_PORT,
            reload=False,
            access_log=True
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Error starting server")
        sys.exit(1)

if __name__ == "__main__":
    main()
