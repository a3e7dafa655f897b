from emojify.backends.base import FaceDetector, StaticFaceDetector
from emojify.backends.face_landmarker import MediaPipeFaceBackend

__all__ = ["FaceDetector", "StaticFaceDetector", "MediaPipeFaceBackend"]
