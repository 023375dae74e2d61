"""main.py for the MAC curve evaluator"""

# Import packages
import logging

# Import python modules
from main.definitions import DEFAULT_CONFIG_PATH
from src.common.config_setup import Config_settings
from src.common.utilities import setup_logger, get_args
from src.integrator.runner import run_mac_evaluation


def main(settings: Config_settings | None = None):
    """
    Evaluates MAC curves as defined in settings

    Parameters
    -------
    settings: Config_settings
        Contains model years, regions and input files
    """
    # MAIN - Instantiate config object if none passed
    if not settings:
        args = get_args()
        config_path = args.config_path or DEFAULT_CONFIG_PATH
        settings = Config_settings(config_path=config_path, args=args)

    # MAIN - Establish the logger
    setup_logger(settings)
    logger = logging.getLogger(__name__)

    # MAIN - Log settings
    logger.info('Starting Logging')
    logger.debug('Logging level set to DEBUG')
    logger.info(f'Config file: {settings.config_path}')
    logger.info(f'Regions: {settings.regions}')
    logger.info(f'Years: {settings.years}')

    # MAIN - Evaluate and report
    out_path = run_mac_evaluation(settings)
    print(f'Results located in: {out_path}')


if __name__ == '__main__':
    main()
