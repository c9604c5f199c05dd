# logger_setup.py

import json
import logging
import os

LOGGER_NAME = "gas_sim"


def setup_logging(config_path='config.json'):
    """
    Configures the "gas_sim" logger from the run configuration.

    Records go to the console and to runs/<run_id>/simulation.log. The logger
    does not propagate, so pygame and Numba output stays out of the run log.
    Calling this again replaces the handlers from the previous call.

    Data Contract:
    - Inputs: config_path (str) - JSON file with 'run_id' and a 'logging'
      section holding 'level' and 'format'.
    - Outputs: logging.Logger - the configured logger.
    - Side Effects: creates runs/<run_id>/ relative to the working directory.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join('runs', run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file), logging.StreamHandler()]

    for old_handler in list(logger.handlers):
        old_handler.close()
        logger.removeHandler(old_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger
