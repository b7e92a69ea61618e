# run.py

import logging
import signal
import sys

from slammer.config import load_settings
from slammer.errors import ConfigError
from slammer.slammer import Slammer


def main():
    # Logging setup (level is raised/lowered once the config is read)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    logging.info("Booting OSC slammer")

    try:
        settings = load_settings()
    except ConfigError as e:
        logging.error("Bad config: %s", e)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    logging.debug("Config loaded: %s", settings)

    slammer = Slammer.from_settings(settings)
    signal.signal(signal.SIGTERM, lambda signum, frame: slammer.stop())
    try:
        slammer.run()
    except KeyboardInterrupt:
        logging.info("Shutting down (KeyboardInterrupt)")
    except Exception as e:
        logging.exception("Fatal error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
