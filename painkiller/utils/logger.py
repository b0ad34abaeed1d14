import logging
import logging.config

from painkiller.config import config


def setup_logging(app_config=None) -> logging.Logger:
    """Configure the root logger from the application config"""
    app_config = app_config or config
    if app_config.log_to_file:
        app_config.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(app_config.get_logging_config())
    return logging.getLogger()
