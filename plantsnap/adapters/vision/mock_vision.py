from plantsnap.adapters.vision.base import VisionAdapter
from plantsnap.orchestrator.contracts import PlantResult, demo_result

class MockVision(VisionAdapter):
    def __init__(self, status_store):
        self.status = status_store

    def identify(self, image_bytes: bytes, api_key: str) -> PlantResult:
        # Mock: ignore image and key, never touches the network
        result = demo_result()
        self.status.log(f"mock_vision: {result.common_name} ({len(image_bytes)} bytes in)")
        return result
