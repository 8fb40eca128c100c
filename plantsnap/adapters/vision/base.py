class VisionAdapter:
    def identify(self, image_bytes: bytes, api_key: str):
        """Return PlantResult for raw image bytes, or raise IdentificationError."""
        raise NotImplementedError
