"""Application composition root for EmgStream."""

import sys
import logging
from concurrent.futures import Future
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pubsub import pub

from .config import EmgStreamConfig
from .models.events import SessionEvent
from .models.session import SessionInfo
from .services.stream_service import EmgStreamService
from .storage.file_manager import FileManager

logger = logging.getLogger(__name__)


class EmgApp:
    """Owns configuration, stream service and storage for one application session."""

    def __init__(self, config_path: Optional[str] = None, configure_logging: bool = True):
        self.config = EmgStreamConfig(config_path)
        if configure_logging:
            setup_logging(self.config, self.config.get('logging.level', 'INFO'))

        self.service: Optional[EmgStreamService] = None
        self.file_manager: Optional[FileManager] = None
        self.last_stopped: Optional[SessionEvent] = None

    def init(self, clock: Optional[Callable[[], float]] = None) -> None:
        """Create the stream service and file manager and subscribe them."""
        logger.info("Initializing services...")

        if clock is None:
            self.service = EmgStreamService(self.config)
        else:
            self.service = EmgStreamService(self.config, clock=clock)
        self.file_manager = FileManager(
            self.config.get_data_directory(),
            default_filename=self.config.get('export.default_filename', 'emg-data')
        )

        pub.subscribe(self._on_session_event, self.service.session_topic)
        self.service.attach()

        logger.info(f"RMS window: {self.config.get('rms.window_size')} samples, "
                    f"buffer capacity: {self.config.get('signal.buffer_capacity')} samples")

    def _on_session_event(self, event: SessionEvent) -> None:
        if event.event_type == "stopped":
            self.last_stopped = event

    def start_recording(self) -> bool:
        return self.service.start_recording()

    def stop_recording_and_save(self) -> "Future[str]":
        return self.service.stop_recording_and_save()

    def export_last(self, filename: Optional[str] = None) -> Optional[str]:
        """Write the last finished recording to a new session directory.

        Returns:
            Path of the written CSV file, or None if nothing was recorded yet
        """
        payload = self.service.last_export()
        if payload is None:
            logger.warning("Nothing to export: no recording has been stopped yet")
            return None

        session_id = self.file_manager.create_session_directory()
        export_path = self.file_manager.save_export(payload, session_id, filename)

        metadata: Dict[str, Any] = self.last_stopped.metadata if self.last_stopped else {}
        start_time = metadata.get('start_time') or datetime.now()
        self.file_manager.save_session_info(SessionInfo(
            session_id=session_id,
            start_time=start_time,
            duration_seconds=metadata.get('duration_seconds', 0.0),
            export_file=Path(export_path).name,
            file_size_bytes=Path(export_path).stat().st_size,
            record_count=metadata.get('record_count', 0)
        ))

        return export_path

    def shutdown(self) -> None:
        if self.service is None:
            return
        try:
            pub.unsubscribe(self._on_session_event, self.service.session_topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")
        self.service.shutdown()
        logger.info("EmgApp shut down")


def setup_logging(config: EmgStreamConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/emgstream.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("EmgStream starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)
