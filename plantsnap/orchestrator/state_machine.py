import os
import time
from typing import Optional
from plantsnap.orchestrator.contracts import PlantResult, Phase, demo_result, fallback_result
from plantsnap.orchestrator.errors import NotReadyError
from plantsnap.services.observable import Observable

DEMO_DELAY_S = float(os.getenv("DEMO_DELAY_S", "1.0"))


class IdentifyOrchestrator(Observable):
    """
    State for one identify screen: selected image, current result, loading flag
    and the demo switch. Created when the user is authenticated and discarded
    on logout; at most one identify() call is in flight per instance.

    Per attempt: idle -> loading -> success | fallback
    """

    def __init__(self, vision, session, status_store, demo_delay: float = DEMO_DELAY_S):
        super().__init__()
        self.vision = vision
        self.session = session
        self.status = status_store
        self.demo_delay = demo_delay
        self.image: Optional[bytes] = None
        self.result: Optional[PlantResult] = None
        self.is_loading = False
        self.demo_mode = False
        self.phase = Phase.IDLE

    def set_image(self, image: bytes):
        self._set("image", image)
        self._set("result", None)
        self._set("phase", Phase.IDLE)
        self.status.log(f"identify: image set ({len(image)} bytes)")

    def set_demo_mode(self, enabled: bool):
        self._set("demo_mode", bool(enabled))
        self.status.log(f"identify: demo_mode={self.demo_mode}")

    def identify(self) -> PlantResult:
        if self.is_loading:
            raise NotReadyError("identification already in progress")
        if self.image is None:
            raise NotReadyError("no image selected")
        api_key = self.session.secret
        if api_key is None:
            raise NotReadyError("no api key")

        self._set("is_loading", True)
        self._set("phase", Phase.LOADING)
        t0 = time.time()
        try:
            if self.demo_mode:
                # simulated latency only; no network access in demo mode
                self.status.log(f"identify: demo mode, waiting {self.demo_delay}s")
                time.sleep(self.demo_delay)
                result, phase = demo_result(), Phase.SUCCESS
            else:
                self.status.log("identify: vision.identify")
                try:
                    result, phase = self.vision.identify(self.image, api_key), Phase.SUCCESS
                except Exception as e:
                    # transport and decode failures are not told apart for the user
                    self.status.log(f"identify: error {type(e).__name__}: {e}")
                    result, phase = fallback_result(), Phase.FALLBACK
            self._set("result", result)
            self._set("phase", phase)
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"identify: done {result.common_name} conf={result.confidence:.2f} dt={dt}ms")
            return result
        finally:
            self._set("is_loading", False)
