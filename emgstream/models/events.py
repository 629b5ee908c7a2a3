"""Event models for pub/sub session notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass
class SessionEvent:
    """Recording lifecycle event."""
    event_id: str
    event_type: str  # "started", "stopped"
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
