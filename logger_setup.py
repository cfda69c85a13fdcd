# logger_setup.py

import logging
import os

LOGGER_NAME = "rocket_escape"

def setup_logging(config: dict):
    """
    Sets up logging for the game.

    Creates a run-specific log directory and configures the dedicated
    application logger (not the root logger) to write to a log file and,
    unless disabled, to the console. pygame and numba keep their own output.

    Data Contract:
    - Inputs: config (dict) - The parsed config.json contents.
    - Outputs: The configured logging.Logger.
    - Side Effects:
        - Configures the "rocket_escape" logger.
        - Creates <directory>/<run_id>/ for the log file.
    - Invariants: Assumes the config contains 'run_id' and a 'logging' dictionary
      with 'level' and 'format'. 'directory' and 'console' are optional.
    """
    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(log_config.get('directory', 'runs'), run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'game.log')

    formatter = logging.Formatter(log_config['format'])

    # Re-invocation (e.g. a second run in the same process) must not duplicate output
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if log_config.get('console', True):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger
