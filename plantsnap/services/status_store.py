from dataclasses import dataclass, field
from typing import List

MAX_LOGS = 200

@dataclass
class StatusStore:
    logs: List[str] = field(default_factory=list)

    def log(self, msg: str):
        # never pass API keys or image bytes in here; /status exposes these lines
        self.logs.append(msg)
        if len(self.logs) > MAX_LOGS:
            self.logs = self.logs[-MAX_LOGS:]

    def clear(self):
        self.logs = []
