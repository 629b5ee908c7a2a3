"""Unit tests for FileManager class."""

import json
import os
from datetime import datetime
from pathlib import Path

import pytest

from emgstream.models.session import SessionInfo
from emgstream.storage.file_manager import FileManager


@pytest.fixture
def csv_payload():
    return "timestamp,raw,rms\n0.000,0.1000,0.10\n0.005,0.2000,0.15\n"


@pytest.mark.unit
class TestFileManager:
    """Test cases for FileManager class."""

    def test_initialization(self, temp_data_dir):
        fm = FileManager(temp_data_dir)

        assert fm.data_dir == Path(temp_data_dir)
        assert fm.sessions_dir == Path(temp_data_dir) / "sessions"
        assert fm.logs_dir == Path(temp_data_dir) / "logs"
        assert fm.sessions_dir.exists()
        assert fm.logs_dir.exists()

    def test_create_session_directory(self, temp_data_dir):
        fm = FileManager(temp_data_dir)

        session_id = fm.create_session_directory()

        # YYYYMMDD_HHMMSS_XXXX
        assert len(session_id) == 20
        assert session_id.count("_") == 2
        assert (fm.sessions_dir / session_id).is_dir()

    def test_save_export(self, temp_data_dir, csv_payload):
        fm = FileManager(temp_data_dir)
        session_id = fm.create_session_directory()

        filepath = fm.save_export(csv_payload, session_id, "trial.csv")

        assert os.path.basename(filepath) == "trial.csv"
        with open(filepath, 'r', encoding='utf-8', newline='') as f:
            assert f.read() == csv_payload

    def test_save_export_default_filename(self, temp_data_dir, csv_payload):
        fm = FileManager(temp_data_dir)
        session_id = fm.create_session_directory()

        filepath = fm.save_export(csv_payload, session_id)

        assert os.path.basename(filepath) == "emg-data.csv"

    def test_save_export_adds_csv_extension(self, temp_data_dir, csv_payload):
        fm = FileManager(temp_data_dir, default_filename="emg-data")
        session_id = fm.create_session_directory()

        filepath = fm.save_export(csv_payload, session_id, "left-forearm")

        assert filepath.endswith("left-forearm.csv")
        assert os.path.exists(filepath)

    def test_save_and_load_session_info(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        session_id = fm.create_session_directory()
        session_info = SessionInfo(
            session_id=session_id,
            start_time=datetime(2024, 5, 1, 12, 30, 0),
            duration_seconds=12.5,
            export_file="emg-data.csv",
            file_size_bytes=512,
            record_count=2500
        )

        info_path = fm.save_session_info(session_info)

        with open(info_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        assert data["start_time"] == "2024-05-01T12:30:00"
        assert data["record_count"] == 2500

        loaded = fm.load_session_info(session_id)
        assert loaded == session_info

    def test_load_missing_session_info(self, temp_data_dir):
        fm = FileManager(temp_data_dir)

        assert fm.load_session_info("nope") is None

    def test_load_corrupt_session_info(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        session_id = fm.create_session_directory()
        (fm.sessions_dir / session_id / "session_info.json").write_text("{not json", encoding="utf-8")

        assert fm.load_session_info(session_id) is None

    def test_list_sessions(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        saved = fm.create_session_directory()
        fm.create_session_directory()  # no session info, not listed
        fm.save_session_info(SessionInfo(
            session_id=saved,
            start_time=datetime.now(),
            duration_seconds=1.0,
            export_file="emg-data.csv",
            file_size_bytes=10,
            record_count=1
        ))

        assert fm.list_sessions() == [saved]
        assert fm.get_session_path(saved) == fm.sessions_dir / saved
