"""Common utility helpers shared across the MAC curve runner."""

# Import packages
from __future__ import annotations

from logging import getLogger
from pathlib import Path
import argparse
import logging
import os

# Establish logger
logger = getLogger(__name__)


def make_dir(dir_name):
    """Ensure the provided directory exists."""
    if not os.path.exists(dir_name):
        os.makedirs(dir_name)
    else:
        logger.info('Asked to make dir that already exists:' + str(dir_name))


# Logger Setup
def setup_logger(settings):
    """initiates logging, sets up logger in the output directory specified

    Parameters
    ----------
    settings : Config_settings
        settings holding OUTPUT_ROOT and the parsed args (debug flag)
    """
    output_dir = settings.OUTPUT_ROOT
    log_path = Path(output_dir)
    if not Path.is_dir(log_path):
        Path.mkdir(log_path, parents=True)

    # logger level
    if getattr(settings.args, 'debug', False):
        loglevel = logging.DEBUG
    else:
        loglevel = logging.INFO

    # logger configs
    logging.basicConfig(
        filename=f'{output_dir}/run.log',
        encoding='utf-8',
        filemode='w',
        format='%(asctime)s | %(name)s | %(levelname)s :: %(message)s',
        datefmt='%d-%b-%y %H:%M:%S',
        level=loglevel,
        force=True,
    )
    logging.getLogger('pandas').setLevel(logging.WARNING)
    logging.getLogger('numpy').setLevel(logging.WARNING)


def get_args(argv=None):
    """Parses args

    Returns
    -------
    args: Namespace
        Contains arguments passed to main.py executable
    """
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter,
        description='description:\n'
        '\tEvaluates marginal abatement cost curves for every region and model period\n'
        '\tModel years, regions and input files are set in src/common/run_config.toml\n'
        '\tMAC curves are read from a TOML file of [[mac]] tables, prices from a CSV\n'
        '\tof market, region, year|period, price rows',
    )
    parser.add_argument(
        '--config',
        dest='config_path',
        type=Path,
        default=None,
        help='Path to run_config.toml (defaults to src/common/run_config.toml)',
    )
    parser.add_argument(
        '--output-name',
        dest='output_name',
        help='Optional custom name for the output directory.\n'
        'If omitted, the directory name is derived from a hash of the configuration.\n'
        'When the directory already exists a numeric suffix will be appended.',
    )
    parser.add_argument('--debug', action='store_true', help='set logging level to DEBUG')

    # parsing arguments
    args = parser.parse_args(argv)

    return args
