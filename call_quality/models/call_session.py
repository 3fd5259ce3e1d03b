"""
Call session data model.

A CallSession is the consultation call being monitored. Only its id is
needed to address the stored session document; the remaining fields
identify the appointment and its participants for logging.
"""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CallSession:
    """Video consultation between a client and an expert."""
    
    id: str
    appointment_id: Optional[str] = None
    expert_id: Optional[str] = None
    client_id: Optional[str] = None
    start_time: float = field(default_factory=time.time)
    
    def __post_init__(self):
        if not self.id:
            raise ValueError('Session ID must not be empty')
