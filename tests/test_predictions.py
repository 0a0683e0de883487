"""Tests for the prediction shapes and their deserializers."""

import unittest
from decimal import Decimal

from pydantic import ValidationError

from predictmap.common.tree import Node
from predictmap.core.errors import DeserializationError, MalformedRecord, MissingField, WrongType
from predictmap.predictions import (
    Color,
    Concept,
    Crop,
    Demographics,
    Embedding,
    FaceConcepts,
    FaceDetection,
    FaceEmbedding,
    Focus,
    Frame,
    Logo,
)


def _bbox(top=0.1, left=0.2, bottom=0.5, right=0.6):
    return {"top_row": top, "left_col": left, "bottom_row": bottom, "right_col": right}


def _concept(concept_id="c1", name="cat", value=0.97):
    return {"id": concept_id, "name": name, "value": value, "app_id": "main"}


def _region(data, region_id="r1", bbox=None):
    return {
        "id": region_id,
        "region_info": {"bounding_box": bbox or _bbox()},
        "data": data,
    }


class ConceptTests(unittest.TestCase):
    def test_full_concept(self):
        concept = Concept.deserialize(Node(_concept()))
        self.assertEqual(concept.id, "c1")
        self.assertEqual(concept.name, "cat")
        self.assertEqual(concept.value, 0.97)
        self.assertEqual(concept.app_id, "main")
        self.assertIsNone(concept.language)

    def test_optional_fields_absent(self):
        concept = Concept.deserialize(Node({"id": "ai_123"}))
        self.assertEqual(concept, Concept(id="ai_123"))

    def test_missing_id(self):
        with self.assertRaises(MissingField):
            Concept.deserialize(Node({"name": "cat", "value": 0.3}))

    def test_value_out_of_range(self):
        with self.assertRaises(ValidationError):
            Concept.deserialize(Node(_concept(value=1.5)))

    def test_value_wrong_type(self):
        with self.assertRaises(WrongType):
            Concept.deserialize(Node(_concept(value="high")))

    def test_concepts_are_immutable(self):
        concept = Concept(id="c1", name="cat", value=0.5)
        with self.assertRaises(ValidationError):
            concept.value = 0.9

    def test_identical_trees_give_equal_values(self):
        first = Concept.deserialize(Node(_concept()))
        second = Concept.deserialize(Node(_concept()))
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))


class ColorTests(unittest.TestCase):
    def test_color(self):
        color = Color.deserialize(
            Node(
                {
                    "raw_hex": "#f2f2f2",
                    "w3c": {"hex": "#f5f5f5", "name": "WhiteSmoke"},
                    "value": 0.929,
                }
            )
        )
        self.assertEqual(color.raw_hex, "#f2f2f2")
        self.assertEqual(color.hex, "#f5f5f5")
        self.assertEqual(color.web_safe_color_name, "WhiteSmoke")
        self.assertEqual(color.value, 0.929)

    def test_missing_w3c(self):
        with self.assertRaises(MissingField) as ctx:
            Color.deserialize(Node({"raw_hex": "#000000", "value": 0.1}))
        self.assertEqual(ctx.exception.path, "$.w3c")


class EmbeddingTests(unittest.TestCase):
    def test_embedding(self):
        embedding = Embedding.deserialize(Node({"vector": [0.1, -0.2, 3], "num_dimensions": 3}))
        self.assertEqual(embedding.vector, (0.1, -0.2, 3.0))
        self.assertEqual(embedding.num_dimensions, 3)

    def test_dimension_mismatch(self):
        with self.assertRaises(ValidationError):
            Embedding.deserialize(Node({"vector": [0.1, 0.2], "num_dimensions": 3}))

    def test_non_numeric_component(self):
        with self.assertRaises(WrongType) as ctx:
            Embedding.deserialize(Node({"vector": [0.1, "x"], "num_dimensions": 2}))
        self.assertEqual(ctx.exception.path, "$.vector[1]")


class CropTests(unittest.TestCase):
    def test_crop(self):
        crop = Crop.deserialize(Node(_bbox()))
        self.assertEqual((crop.top, crop.left, crop.bottom, crop.right), (0.1, 0.2, 0.5, 0.6))

    def test_crop_outside_unit_square(self):
        with self.assertRaises(ValidationError):
            Crop.deserialize(Node(_bbox(bottom=1.2)))

    def test_crop_edges_out_of_order(self):
        with self.assertRaises(ValidationError):
            Crop.deserialize(Node(_bbox(top=0.8, bottom=0.2)))


class RegionPredictionTests(unittest.TestCase):
    def test_face_detection_without_concepts(self):
        detection = FaceDetection.deserialize(Node(_region({})))
        self.assertEqual(detection.id, "r1")
        self.assertEqual(detection.crop, Crop(top=0.1, left=0.2, bottom=0.5, right=0.6))
        self.assertEqual(detection.concepts, ())

    def test_face_detection_with_concepts(self):
        detection = FaceDetection.deserialize(Node(_region({"concepts": [_concept()]})))
        self.assertEqual(detection.concepts, (Concept(id="c1", name="cat", value=0.97, app_id="main"),))

    def test_region_without_bounding_box(self):
        with self.assertRaises(MissingField) as ctx:
            FaceDetection.deserialize(Node({"id": "r1", "region_info": {}, "data": {}}))
        self.assertEqual(ctx.exception.path, "$.region_info.bounding_box")

    def test_face_concepts(self):
        entry = _region({"face": {"identity": {"concepts": [_concept("p1", "ada", 0.8)]}}})
        face = FaceConcepts.deserialize(Node(entry))
        self.assertEqual([c.name for c in face.concepts], ["ada"])

    def test_face_concepts_require_identity(self):
        with self.assertRaises(MissingField):
            FaceConcepts.deserialize(Node(_region({"face": {}})))

    def test_demographics(self):
        entry = _region(
            {
                "face": {
                    "age_appearance": {"concepts": [_concept("a1", "30", 0.4)]},
                    "gender_appearance": {"concepts": [_concept("g1", "feminine", 0.9)]},
                    "multicultural_appearance": {"concepts": [_concept("m1", "white", 0.7)]},
                }
            }
        )
        demographics = Demographics.deserialize(Node(entry))
        self.assertEqual(demographics.age_appearance[0].name, "30")
        self.assertEqual(demographics.gender_appearance[0].name, "feminine")
        self.assertEqual(demographics.multicultural_appearance[0].name, "white")

    def test_face_embedding(self):
        entry = _region({"embeddings": [{"vector": [0.5, 0.25], "num_dimensions": 2}]})
        face = FaceEmbedding.deserialize(Node(entry))
        self.assertEqual(face.embeddings, (Embedding(vector=(0.5, 0.25), num_dimensions=2),))

    def test_logo(self):
        logo = Logo.deserialize(Node(_region({"concepts": [_concept("l1", "acme", 0.6)]})))
        self.assertEqual(logo.concepts[0].name, "acme")

    def test_focus_reads_output_level_value(self):
        data = Node({"focus": {"value": 0.8, "density": 0.7}, "regions": []}, "$.data")
        focus = Focus.deserialize(Node(_region({"focus": {"density": 0.45}})), data)
        self.assertEqual(focus.density, Decimal("0.45"))
        self.assertEqual(focus.value, Decimal("0.8"))

    def test_focus_without_output_value(self):
        data = Node({"regions": []}, "$.data")
        with self.assertRaises(MissingField) as ctx:
            Focus.deserialize(Node(_region({"focus": {"density": 0.45}})), data)
        self.assertEqual(ctx.exception.path, "$.data.focus")

    def test_focus_without_enclosing_data(self):
        with self.assertRaises(MalformedRecord) as ctx:
            Focus.deserialize(Node(_region({"focus": {"density": 0.45}}), "$.data.regions[0]"))
        self.assertIsInstance(ctx.exception, DeserializationError)
        self.assertEqual(ctx.exception.path, "$.data.regions[0]")

    def test_focus_density_bounded(self):
        data = Node({"focus": {"value": 0.8}})
        with self.assertRaises(ValidationError):
            Focus.deserialize(Node(_region({"focus": {"density": 1.5}})), data)


class FrameTests(unittest.TestCase):
    def test_frame(self):
        frame = Frame.deserialize(
            Node({"frame_info": {"index": 2, "time": 2000}, "data": {"concepts": [_concept()]}})
        )
        self.assertEqual(frame.index, 2)
        self.assertEqual(frame.time, 2000)
        self.assertEqual(len(frame.concepts), 1)

    def test_frame_time_as_string(self):
        frame = Frame.deserialize(Node({"frame_info": {"index": 0, "time": "1000"}}))
        self.assertEqual(frame.time, 1000)
        self.assertEqual(frame.concepts, ())

    def test_negative_index(self):
        with self.assertRaises(ValidationError):
            Frame.deserialize(Node({"frame_info": {"index": -1, "time": 0}}))
