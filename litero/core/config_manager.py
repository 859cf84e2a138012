import configparser
import os

from litero.utils.logger import get_logger

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
# Two levels up from litero/core is the project root
PROJECT_ROOT = os.path.dirname(os.path.dirname(SCRIPT_DIR))
DEFAULT_WORKSPACE_PATH = os.path.join(PROJECT_ROOT, 'workspace')
DEFAULT_CONFIG_PATH = os.path.join(DEFAULT_WORKSPACE_PATH, 'config', 'settings.ini')
PACKAGED_TEMPLATES_DIR = os.path.join(os.path.dirname(SCRIPT_DIR), 'templates')

DEFAULT_OUTPUT_DIR = '.'
DEFAULT_FORMAT = 'html'
DEFAULT_TIMEOUT = 15.0

logger = get_logger(__name__)


def _default_config() -> configparser.ConfigParser:
    config = configparser.ConfigParser()
    config['General'] = {'output_dir': DEFAULT_OUTPUT_DIR}
    config['Output'] = {'default_format': DEFAULT_FORMAT, 'template_dir': PACKAGED_TEMPLATES_DIR}
    config['Network'] = {'timeout': str(int(DEFAULT_TIMEOUT))}
    return config


def get_workspace_path() -> str:
    """LITERO_WORKSPACE_ROOT when set, otherwise <project>/workspace."""
    return os.getenv('LITERO_WORKSPACE_ROOT') or DEFAULT_WORKSPACE_PATH


def default_config_path() -> str:
    env_config_path = os.getenv('LITERO_CONFIG_PATH')
    if env_config_path:
        return env_config_path
    if os.getenv('LITERO_WORKSPACE_ROOT'):
        return os.path.join(get_workspace_path(), 'config', 'settings.ini')
    return DEFAULT_CONFIG_PATH


class ConfigManager:
    def __init__(self, config_file_path=None):
        self.config_file_path = config_file_path or default_config_path()
        self.config = configparser.ConfigParser()
        self._load_config()

    def _load_config(self):
        """Loads the configuration from the INI file, creating a default one when missing."""
        if not os.path.exists(self.config_file_path):
            logger.warning(f"Config file not found at {self.config_file_path}. Creating a default config.")
            default_config = _default_config()
            try:
                os.makedirs(os.path.dirname(self.config_file_path), exist_ok=True)
                with open(self.config_file_path, 'w', encoding='utf-8') as configfile:
                    default_config.write(configfile)
                logger.info(f"Created a default config file at: {self.config_file_path}")
            except OSError as e:
                logger.error(f"Error creating default config file: {e}. Using hardcoded defaults.", exc_info=True)
            self.config = default_config
            return

        self.config.read(self.config_file_path, encoding='utf-8')

        # Fill in sections an older or hand-written file may lack, without rewriting it
        for section, options in _default_config().items():
            if section == configparser.DEFAULTSECT:
                continue
            if not self.config.has_section(section):
                self.config.add_section(section)
                logger.info(f"Added missing [{section}] section to the config.")
            for option, value in options.items():
                if not self.config.has_option(section, option):
                    self.config.set(section, option, value)

    def get_output_dir(self) -> str:
        """
        Returns the directory stories are written to.
        Priority:
        1. LITERO_OUTPUT_DIR environment variable.
        2. Path from config file (settings.ini), relative paths resolved against the cwd.
        3. The current working directory.
        """
        env_output_dir = os.getenv('LITERO_OUTPUT_DIR')
        if env_output_dir:
            logger.info(f"Using output directory from LITERO_OUTPUT_DIR environment variable: {env_output_dir}")
            return os.path.abspath(env_output_dir)

        path_from_config = self.config.get('General', 'output_dir', fallback=DEFAULT_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR
        return os.path.abspath(path_from_config)

    def get_default_format(self) -> str:
        return (self.config.get('Output', 'default_format', fallback=DEFAULT_FORMAT) or DEFAULT_FORMAT).lower()

    def get_template_dir(self) -> str:
        template_dir = self.config.get('Output', 'template_dir', fallback=PACKAGED_TEMPLATES_DIR)
        if not template_dir or not os.path.isdir(template_dir):
            if template_dir:
                logger.warning(f"Configured template directory '{template_dir}' not found. Using packaged templates.")
            return PACKAGED_TEMPLATES_DIR
        return template_dir

    def get_timeout(self) -> float:
        try:
            return self.config.getfloat('Network', 'timeout', fallback=DEFAULT_TIMEOUT)
        except ValueError:
            logger.warning("Invalid [Network] timeout in config. Using the default.")
            return DEFAULT_TIMEOUT
