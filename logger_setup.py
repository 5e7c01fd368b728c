# logger_setup.py

import logging
import os
import json

def setup_logging(config_path='config.json'):
    """
    Routes the simulation's log output to the console and to a per-run log file.

    Models log creation and reset at INFO, beams log black photons and resets at
    DEBUG, and the pygame driver logs a throttled per-tick summary. All of it goes
    through the "color_vision" logger, which does not propagate, so pygame and
    Numba messages stay out of runs/<run_id>/simulation.log.

    Data Contract:
    - Inputs: config_path (str) - Path to the configuration file.
    - Outputs: The configured "color_vision" logger.
    - Side Effects:
        - Replaces any handlers left on the "color_vision" logger by an earlier call.
        - Creates <log_root>/<run_id>/ ('runs' unless the config sets 'log_root').
    - Invariants: Assumes the config file contains 'run_id' and a 'logging' dictionary
      with 'level' and 'format'.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger("color_vision")
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(config.get('log_root', 'runs'), run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config['format'])

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    # A second call (tests, restarts) must not leave an open file or double each line
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)

    logger.info(f"Logging initialized for run '{run_id}' at level {log_config['level']}. Log file: {log_file}")
    return logger
