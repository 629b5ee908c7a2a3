"""Core stream service that ties sample ingest, RMS windowing and recording together."""

import time
import uuid
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from pubsub import pub

from ..config import EmgStreamConfig
from ..emg.buffer import SampleBuffer
from ..emg.rms import RMSWindower
from ..exceptions import EmptyExportError, InvalidSampleError
from ..models.events import SessionEvent
from ..models.samples import Sample
from ..models.session import CaptureRecord
from ..recording.csv_export import ExportPrecision, header_only, serialize_records
from ..recording.session import RecordingSession

logger = logging.getLogger(__name__)


class EmgStreamService:
    """Owns the sample buffer, RMS windower and recording session of one app session."""

    def __init__(self, config: EmgStreamConfig, clock: Callable[[], float] = time.monotonic):
        """Initialize stream service.

        Args:
            config: Application configuration
            clock: Monotonic clock shared by the buffer and the recording session
        """
        self.config = config
        self.sample_topic = config.get('signal.topic', 'emg.sample')
        self.session_topic = config.get('recording.topic', 'emg.session')
        self.display_samples = config.get('signal.display_samples', 50)

        self.buffer = SampleBuffer(
            capacity=config.get('signal.buffer_capacity', 1000),
            value_min=config.get('signal.value_min'),
            value_max=config.get('signal.value_max'),
            invalid_policy=config.get('signal.invalid_policy', 'reject'),
            clock=clock
        )
        self.windower = RMSWindower(
            window_size=config.get('rms.window_size', 50),
            history_capacity=config.get('rms.history_capacity', 200)
        )
        self.session = RecordingSession(clock=clock)
        self.precision = ExportPrecision(
            timestamp=config.get('export.timestamp_precision', 3),
            raw=config.get('export.raw_precision', 4),
            rms=config.get('export.rms_precision', 2)
        )

        self.export_executor = ThreadPoolExecutor(
            max_workers=config.get('export.max_workers', 1),
            thread_name_prefix="EmgExport"
        )
        self.export_lock = threading.Lock()
        self.export_generation = 0
        self._last_export: Optional[str] = None
        self._last_export_generation = 0
        # Serializes start/stop transitions with their events and export generation
        self.control_lock = threading.RLock()
        self.is_shut_down = False

        self.dropped_samples = 0
        self.current_session_id: Optional[str] = None
        self.current_start_time: Optional[datetime] = None
        self.is_attached = False

        logger.info(f"EmgStreamService initialized: sample topic={self.sample_topic}, "
                    f"session topic={self.session_topic}")

    # Ingest

    def attach(self) -> None:
        """Subscribe to the sample topic so a sensor link can push values."""
        if self.is_attached:
            return
        pub.subscribe(self.on_sample, self.sample_topic)
        self.is_attached = True
        logger.info(f"Subscribed to {self.sample_topic}")

    def detach(self) -> None:
        """Unsubscribe from the sample topic."""
        if not self.is_attached:
            return
        pub.unsubscribe(self.on_sample, self.sample_topic)
        self.is_attached = False
        logger.info(f"Unsubscribed from {self.sample_topic}")

    def on_sample(self, value: float) -> Optional[Sample]:
        """Ingest one raw value.

        Invalid values are dropped and logged; nothing is raised to the caller.

        Returns:
            The stored sample, or None if the value was dropped
        """
        try:
            sample = self.buffer.append(value)
        except InvalidSampleError as e:
            self.dropped_samples += 1
            logger.warning(f"Dropped sample: {e}")
            return None

        entry = self.windower.update((sample,))
        rms = entry.rms if entry else self.windower.current_rms()
        self.session.capture(sample, rms)
        return sample

    # Display

    def raw_samples(self, last_n: Optional[int] = None) -> List[float]:
        """Most recent raw values, oldest first (defaults to the display window)."""
        if last_n is None:
            last_n = self.display_samples
        return self.buffer.values(last_n)

    def rms_history(self) -> List[float]:
        return self.windower.rms_values()

    def current_rms(self) -> float:
        return self.windower.current_rms()

    # Recording control

    def start_recording(self) -> bool:
        """Start recording. A second call while recording is a no-op.

        Returns:
            True if a new recording was started
        """
        with self.control_lock:
            if not self.session.start():
                logger.info(f"Already recording session {self.current_session_id}")
                return False

            self.current_session_id = uuid.uuid4().hex[:12]
            self.current_start_time = datetime.now()
            self._publish_session_event("started", {
                "session_id": self.current_session_id,
                "start_time": self.current_start_time
            })
        return True

    def stop_recording_and_save(self) -> "Future[str]":
        """Stop recording and serialize the captured records on the export worker.

        The stop, the record snapshot and the export generation are taken
        under the control lock; only the formatting runs on the worker.

        Returns:
            Future resolving to the CSV payload (header only if nothing was captured)
        """
        with self.control_lock:
            was_recording = self.session.is_recording
            records = self.session.stop()

            generation = 0
            if was_recording:
                with self.export_lock:
                    self.export_generation += 1
                    generation = self.export_generation
                self._publish_session_event("stopped", {
                    "session_id": self.current_session_id,
                    "start_time": self.current_start_time,
                    "record_count": len(records),
                    "duration_seconds": self.session.duration_seconds()
                })
            else:
                logger.info("stop_recording_and_save() called while not recording")

            if self.is_shut_down:
                logger.warning("Export worker is shut down, serializing on the calling thread")
                future: "Future[str]" = Future()
                future.set_result(self._serialize(records, generation))
                return future

            return self.export_executor.submit(self._serialize, records, generation)

    def _serialize(self, records: Tuple[CaptureRecord, ...], generation: int) -> str:
        """Worker task: format records and remember the payload for later export."""
        try:
            payload = serialize_records(records, self.precision, strict=True)
        except EmptyExportError:
            if generation:
                logger.warning("Recording captured no samples, exporting header only")
            payload = header_only()

        if generation:
            with self.export_lock:
                if generation > self._last_export_generation:
                    self._last_export = payload
                    self._last_export_generation = generation

        logger.info(f"Export ready: {len(records)} records, {len(payload)} characters")
        return payload

    def last_export(self) -> Optional[str]:
        """Payload of the most recently stopped recording, if any."""
        with self.export_lock:
            return self._last_export

    def _publish_session_event(self, event_type: str, metadata: Dict[str, Any]) -> None:
        event = SessionEvent(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            metadata=metadata
        )
        pub.sendMessage(self.session_topic, event=event)
        logger.debug(f"Published session event: {event_type}")

    def get_stream_stats(self) -> Dict[str, Any]:
        """Get buffer, RMS and recording statistics."""
        return {
            "buffer": self.buffer.get_buffer_stats(),
            "current_rms": self.windower.current_rms(),
            "rms_history_length": len(self.windower.history()),
            "dropped_samples": self.dropped_samples,
            "recording_state": self.session.state.value,
            "recorded_samples": len(self.session.records()),
            "session_id": self.current_session_id
        }

    def shutdown(self) -> None:
        """Detach from the sample topic and wait for pending exports."""
        self.detach()
        with self.control_lock:
            self.is_shut_down = True
        self.export_executor.shutdown(wait=True)
        logger.info("EmgStreamService shut down")
