"""This file contains the Config_settings class. It establishes the settings used when evaluating
MAC curves. Settings are read from the run_config.toml file: the model years that define the
period/year mapping, the regions to report, and the input files holding prices and curves."""

###################################################################################################
# Setup

# Import packages
try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    try:
        import tomli as tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError as exc:  # pragma: no cover - dependency missing
        raise ModuleNotFoundError(
            'Python 3.11+ or the tomli package is required to read TOML configuration files.'
        ) from exc
from pathlib import Path
import argparse
import copy
import hashlib
import json
import re
import types

# Import python modules
from main.definitions import PROJECT_ROOT
from src.common.utilities import make_dir
from abatement.constants_overrides import constants_table
from abatement.markets.modeltime import Modeltime

MAX_UNIQUE_DIR_ATTEMPTS = 1000


###################################################################################################
# Configuration Class


class Config_settings:
    """Generates the settings used to evaluate MAC curves. Settings include:  \n
    - Temporal settings (model years, period/year mapping) \n
    - Spatial settings (regions) \n
    - Input paths (MAC definitions, market prices) \n
    - Output paths
    """

    _OUTPUT_OVERRIDE_KEY = 'output_name'
    _OUTPUT_NAME_SANITIZER = re.compile(r'[^A-Za-z0-9._-]+')

    def __init__(self, config_path: Path, args: argparse.Namespace | None = None, test=False):
        """Creates configuration object upon instantiation

        Parameters
        ----------
        config_path : Path
            Path to run_config.toml
        args : Namespace
            Parsed arguments fed to main.py or other parsed object
        test : bool, optional
            Used only for unit testing, writes output under unit_tests/test_logs

        Raises
        ------
        FileNotFoundError
            config_path does not exist
        ValueError
            years missing, empty or not strictly increasing
        """
        self.args = args
        if not args:
            self.args = types.SimpleNamespace()
            self.args.debug = False
            self.args.output_name = None
        elif not hasattr(self.args, 'output_name'):
            self.args.output_name = None
        self.test = test
        self.PROJECT_ROOT = PROJECT_ROOT
        self.config_path = Path(config_path)

        if not self.config_path.exists():
            raise FileNotFoundError(f'Run configuration not found: {self.config_path}')
        with open(self.config_path, 'rb') as src:
            try:
                config = tomllib.load(src)
            except tomllib.TOMLDecodeError as exc:
                raise ValueError(f'Unable to parse {self.config_path}: {exc}') from exc
        self._raw_config = copy.deepcopy(config)
        self.config_root = self.config_path.parent

        # __INIT__: Temporal Configs
        if 'years' not in config:
            raise ValueError('years: model years must be listed in run_config.toml')
        try:
            self.modeltime = Modeltime.from_years(config['years'])
        except (TypeError, ValueError) as exc:
            raise ValueError(f'years: {exc}') from exc
        self.years = list(self.modeltime.years)

        # __INIT__: Spatial Configs
        regions = config.get('regions', [])
        if isinstance(regions, str):
            regions = [regions]
        self.regions = [str(region).strip() for region in regions if str(region).strip()]

        # __INIT__: Inputs
        self.mac_file = self._resolve_input(config.get('mac_file'))
        self.price_file = self._resolve_input(config.get('price_file'))
        self.constant_overrides = constants_table(config)

        # __INIT__: Setting output paths
        if test:
            OUTPUT_ROOT = Path(PROJECT_ROOT, 'unit_tests', 'test_logs')
        else:
            output_base = self._resolve_input(config.get('output_dir', 'output'))
            OUTPUT_ROOT = self._ensure_unique_output_dir(
                output_base / self._determine_output_folder(config)
            )
        self.OUTPUT_ROOT = OUTPUT_ROOT
        self.output_folder_name = OUTPUT_ROOT.name
        make_dir(self.OUTPUT_ROOT)

    def _resolve_input(self, value) -> Path | None:
        """Resolve a configured path relative to the run_config directory."""
        if value in (None, ''):
            return None
        path = Path(str(value)).expanduser()
        if not path.is_absolute():
            path = self.config_root / path
        return path

    def _determine_output_folder(self, config: dict) -> str:
        override = getattr(self.args, 'output_name', None)
        if override in (None, ''):
            override = config.get(self._OUTPUT_OVERRIDE_KEY)
        if override not in (None, ''):
            return self._sanitize_output_name(override)
        return f'mac_{self._config_hash(config)}'

    @classmethod
    def _sanitize_output_name(cls, name: object) -> str:
        sanitized = cls._OUTPUT_NAME_SANITIZER.sub('_', str(name).strip())
        sanitized = re.sub(r'_+', '_', sanitized).strip('_')
        if not sanitized:
            raise ValueError('Output directory override must include at least one valid character')
        return sanitized

    @classmethod
    def _config_hash(cls, config: dict) -> str:
        sanitized = {key: value for key, value in config.items() if key != cls._OUTPUT_OVERRIDE_KEY}
        serialized = json.dumps(sanitized, sort_keys=True, default=str, separators=(',', ':'))
        return hashlib.sha256(serialized.encode('utf-8')).hexdigest()[:10]

    @staticmethod
    def _ensure_unique_output_dir(candidate: Path) -> Path:
        for suffix in range(MAX_UNIQUE_DIR_ATTEMPTS):
            alternative = candidate if suffix == 0 else candidate.parent / f'{candidate.name}_{suffix:02d}'
            if not alternative.exists():
                return alternative
        raise RuntimeError(
            f"Unable to find a unique output directory for '{candidate.name}' after "
            f'{MAX_UNIQUE_DIR_ATTEMPTS} attempts'
        )
