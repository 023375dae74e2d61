"""
Runs MAC curve evaluation over every configured region and model period

"""

# Import packages
from logging import getLogger
from pathlib import Path

# Import python modules
from src.common.config_setup import Config_settings
from abatement import constants
from abatement.constants_overrides import run_config_overrides
from abatement.io.mac_files import load_mac_file, reduction_table
from abatement.markets.frame_source import FramePriceSource

# Establish logger
logger = getLogger(__name__)


def run_mac_evaluation(settings: Config_settings) -> Path:
    """
    Evaluates every MAC curve for every region and period defined in settings

    Engine constants are resolved against the run configuration in use for the
    duration of the run only.

    Parameters
    ----------
    settings: Config_settings
        Contains model years, regions and input paths

    Returns
    -------
    Path
        the reductions csv written to the output directory
    """
    if settings.mac_file is None:
        raise ValueError('mac_file: a MAC definition file must be set in run_config.toml')
    if settings.price_file is None:
        raise ValueError('price_file: a market price file must be set in run_config.toml')

    with run_config_overrides(settings.config_path) as sources:
        logger.info('Constant sources: %s', sources)
        if settings.constant_overrides:
            logger.info('Constant overrides from run config: %s', settings.constant_overrides)
        return _evaluate(settings)


def _evaluate(settings: Config_settings) -> Path:
    logger.info('Reading market prices from %s', settings.price_file)
    prices = FramePriceSource.from_csv(settings.price_file, settings.modeltime)

    logger.info('Reading MAC curves from %s', settings.mac_file)
    evaluators = load_mac_file(settings.mac_file, prices, settings.modeltime)
    for (gas, _sector), evaluator in evaluators.items():
        evaluator.init_calc(gas)

    regions = settings.regions
    if not regions:
        logger.warning('No regions configured; nothing to evaluate')

    results = reduction_table(evaluators, regions, settings.modeltime)
    out_path = Path(settings.OUTPUT_ROOT, constants.REDUCTIONS_FILENAME)
    results.to_csv(out_path, index=False)
    logger.info('Wrote %d reductions to %s', len(results), out_path)
    return out_path
