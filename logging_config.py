"""
Centralized logging configuration for Gridpaint
"""
import logging
import sys
from pathlib import Path


class LoggingConfig:
    """Central logging configuration"""

    _initialized = False
    _log_file_path = None

    @classmethod
    def setup_logging(cls, log_dir: Path, console: bool = True):
        """Setup logging system"""
        if cls._initialized:
            return

        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / "gridpaint.log"

        # Root logger
        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG)

        # File handler
        file_handler = logging.FileHandler(cls._log_file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        # The terminal UI owns the screen, so it runs without a console handler
        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
            logger.addHandler(console_handler)

        cls._initialized = True
        logger.info("Logging system initialized")
