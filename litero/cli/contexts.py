import os
from typing import Any, Dict, Optional

from litero.core.config_manager import ConfigManager, DEFAULT_FORMAT, DEFAULT_TIMEOUT, PACKAGED_TEMPLATES_DIR
from litero.core.orchestrator import StoryOptions
from litero.utils.logger import get_logger

logger = get_logger(__name__)


class DownloadStoryContext:
    """
    Handles configuration lookup, template loading and argument preparation
    for the download command.
    """
    def __init__(
        self,
        story_url: str,
        filename: Optional[str] = None,
        story_format: Optional[str] = None,
        classic: bool = False,
        nopages: bool = False,
        series: bool = False,
        nobr: bool = False,
        template: Optional[str] = None,
        stream: bool = False,
        output_dir: Optional[str] = None,
        verbose: bool = False,
    ):
        self.story_url = story_url
        self.filename_option: Optional[str] = filename
        self.classic = classic
        self.nopages = nopages
        self.series = series
        self.nobr = nobr
        self.template_option: Optional[str] = template
        self.stream = stream
        self.output_dir_option: Optional[str] = output_dir
        self.verbose = verbose

        self.error_messages: list[str] = []
        self.warning_messages: list[str] = []

        self._config_manager: Optional[ConfigManager] = self._load_config_manager()
        self.story_format: str = (story_format or self._config_value('get_default_format', DEFAULT_FORMAT)).lower()
        self.timeout: float = self._config_value('get_timeout', DEFAULT_TIMEOUT)
        self.output_dir: str = self._resolve_output_dir()
        self.template_path: str = self._resolve_template_path()
        self.template: str = self._load_template()

    def _load_config_manager(self) -> Optional[ConfigManager]:
        try:
            return ConfigManager()
        except Exception as e:
            logger.warning(f"Failed to initialize ConfigManager: {e}. Using defaults.")
            self.warning_messages.append(f"Warning: Could not read the configuration ({e}). Using defaults.")
            return None

    def _config_value(self, getter: str, fallback):
        if self._config_manager is None:
            return fallback
        try:
            return getattr(self._config_manager, getter)()
        except Exception as e:
            logger.warning(f"ConfigManager.{getter} failed: {e}. Using default {fallback!r}.")
            return fallback

    def _resolve_output_dir(self) -> str:
        if self.output_dir_option:
            logger.info(f"Using provided output directory: {self.output_dir_option}")
            return os.path.abspath(self.output_dir_option)
        return self._config_value('get_output_dir', os.getcwd())

    def _resolve_template_path(self) -> str:
        if self.template_option:
            candidate = os.path.join(os.getcwd(), self.template_option)
            if os.path.exists(candidate):
                return candidate
            self.warning_messages.append(f"Warning: Template '{self.template_option}' not found. Using the default template.")

        template_name = f"template.{self.story_format}"
        template_dir = self._config_value('get_template_dir', PACKAGED_TEMPLATES_DIR)
        for directory in (template_dir, PACKAGED_TEMPLATES_DIR):
            candidate = os.path.join(directory, template_name)
            if os.path.exists(candidate):
                return candidate
        return ""

    def _load_template(self) -> str:
        if not self.template_path:
            logger.info(f"No template found for format '{self.story_format}'. Content will be written bare.")
            return ""
        try:
            with open(self.template_path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            logger.error(f"Error loading template {self.template_path}: {e}")
            self.warning_messages.append(f"Warning: Could not load template '{self.template_path}': {e}")
            return ""

    def get_story_options(self) -> StoryOptions:
        return StoryOptions(
            url=self.story_url,
            format=self.story_format,
            classic=self.classic,
            no_page_numbers=self.nopages,
            series=self.series,
            filename=self.filename_option or "",
            no_paragraph_break=self.nobr,
        )

    def get_orchestrator_kwargs(self) -> Dict[str, Any]:
        """Prepares and returns arguments for the orchestrator."""
        return {
            "options": self.get_story_options(),
            "template": self.template,
            # progress and error callbacks are handled by the handler
        }

    def output_path(self, filename: str) -> str:
        return os.path.join(self.output_dir, filename)

    def is_valid(self) -> bool:
        """URL shape and format are validated by the orchestrator; only presence is checked here."""
        if not self.story_url:
            self.error_messages.append("Error: Story URL is required.")
            return False
        return True
