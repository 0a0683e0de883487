"""Prediction shapes a model can produce."""

from __future__ import annotations

from .base import Crop, Prediction, RegionPrediction
from .concept import Color, Concept
from .embedding import Embedding
from .frame import Frame
from .regions import Demographics, FaceConcepts, FaceDetection, FaceEmbedding, Focus, Logo

__all__ = [
    "Color",
    "Concept",
    "Crop",
    "Demographics",
    "Embedding",
    "FaceConcepts",
    "FaceDetection",
    "FaceEmbedding",
    "Focus",
    "Frame",
    "Logo",
    "Prediction",
    "RegionPrediction",
]
