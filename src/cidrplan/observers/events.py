# src/cidrplan/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single resolve invocation
    env: str          # dev/staging/prod

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(env: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "env": env,
    }


# ---------------------------------------------------------------------
# Address plan
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PlanComputed(BaseEvent):
    cluster_cidrs: List[str]
    node_mask_sizes: List[int]
    service_cidrs: List[str]
    api_server_service_ip: str

@dataclass(frozen=True)
class PlanFailed(BaseEvent):
    kind: str         # exception class name
    error: str
