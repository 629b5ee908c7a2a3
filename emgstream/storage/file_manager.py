"""File management module for exported recordings and session metadata."""

import json
import logging
import random
import string
from pathlib import Path
from datetime import datetime
from typing import List, Optional
from dataclasses import asdict

from ..models.session import SessionInfo
from ..recording.csv_export import EXPORT_EXTENSION

logger = logging.getLogger(__name__)

SESSION_INFO_FILE = "session_info.json"


class FileManager:
    """Manages file storage and organization for exported recordings and metadata."""

    def __init__(self, data_dir: str = "./data", default_filename: str = "emg-data"):
        """Initialize file manager with data directory.

        Args:
            data_dir: Base directory for storing all data
            default_filename: Export file name used when none is given
        """
        self.data_dir = Path(data_dir)
        self.sessions_dir = self.data_dir / "sessions"
        self.logs_dir = self.data_dir / "logs"
        self.default_filename = default_filename

        # Create directory structure
        self._ensure_directories()

        logger.info(f"FileManager initialized with data_dir: {self.data_dir}")

    def _ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        for directory in [self.data_dir, self.sessions_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Ensured directory exists: {directory}")

    def create_session_directory(self) -> str:
        """Create new session directory with timestamp and random suffix.

        Returns:
            Session ID (timestamp-based with random suffix)
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
        session_id = f"{timestamp}_{random_suffix}"
        session_path = self.sessions_dir / session_id
        session_path.mkdir(exist_ok=True)

        logger.info(f"Created session directory: {session_path}")
        return session_id

    def save_export(self, payload: str, session_id: str, filename: Optional[str] = None) -> str:
        """Write an export payload as a UTF-8 CSV file.

        Args:
            payload: CSV text
            session_id: Session identifier
            filename: Optional custom filename, ``.csv`` is appended if missing

        Returns:
            Full path to saved export file
        """
        if filename is None:
            filename = self.default_filename

        if not filename.endswith(EXPORT_EXTENSION):
            filename += EXPORT_EXTENSION

        session_path = self.sessions_dir / session_id
        session_path.mkdir(exist_ok=True)

        export_path = session_path / filename

        try:
            with open(export_path, 'w', encoding='utf-8', newline='') as f:
                f.write(payload)

            logger.info(f"Export saved: {export_path} ({len(payload)} characters)")
            return str(export_path)

        except OSError as e:
            logger.error(f"Error saving export file: {e}")
            raise

    def save_session_info(self, session_info: SessionInfo) -> str:
        """Save session information to JSON file.

        Args:
            session_info: Session information to save

        Returns:
            Path to saved session info file
        """
        session_path = self.sessions_dir / session_info.session_id
        session_path.mkdir(exist_ok=True)

        info_file = session_path / SESSION_INFO_FILE

        try:
            # Convert datetime to string for JSON serialization
            info_dict = asdict(session_info)
            info_dict['start_time'] = session_info.start_time.isoformat()

            with open(info_file, 'w', encoding='utf-8') as f:
                json.dump(info_dict, f, indent=2)

            logger.info(f"Session info saved: {info_file}")
            return str(info_file)

        except OSError as e:
            logger.error(f"Error saving session info: {e}")
            raise

    def load_session_info(self, session_id: str) -> Optional[SessionInfo]:
        """Load session information from JSON file.

        Args:
            session_id: Session identifier

        Returns:
            SessionInfo object or None if not found
        """
        info_file = self.sessions_dir / session_id / SESSION_INFO_FILE

        if not info_file.exists():
            logger.warning(f"Session info file not found: {info_file}")
            return None

        try:
            with open(info_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            # Convert ISO string back to datetime
            data['start_time'] = datetime.fromisoformat(data['start_time'])

            return SessionInfo(**data)

        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.error(f"Error loading session info: {e}")
            return None

    def list_sessions(self) -> List[str]:
        """List all available session IDs.

        Returns:
            List of session IDs sorted by creation time
        """
        sessions = []
        for path in self.sessions_dir.iterdir():
            if path.is_dir() and (path / SESSION_INFO_FILE).exists():
                sessions.append(path.name)

        sessions.sort()  # Sort chronologically
        logger.debug(f"Found {len(sessions)} sessions")
        return sessions

    def get_session_path(self, session_id: str) -> Path:
        """Get full path to session directory."""
        return self.sessions_dir / session_id
