"""Tests for workflow result deserialization."""

import unittest

from predictmap.core.errors import MalformedRecord, UnknownModelType
from predictmap.predictions import Color, Concept
from predictmap.workflows.results import deserialize_workflow_results


def _output(output_id, type_ext, data):
    return {
        "id": output_id,
        "status": {"code": 10000, "description": "Ok"},
        "created_at": "2019-01-29T16:25:01.474146Z",
        "model": {"id": f"model-{type_ext}", "output_info": {"type_ext": type_ext}},
        "data": data,
    }


def _payload(*outputs):
    return {
        "status": {"code": 10000, "description": "Ok"},
        "workflow": {"id": "food-and-general"},
        "results": [
            {
                "status": {"code": 10000, "description": "Ok"},
                "input": {
                    "id": "i1",
                    "data": {"image": {"url": "https://samples.example.com/celeb.jpg"}},
                },
                "outputs": list(outputs),
            }
        ],
    }


class WorkflowResultTests(unittest.TestCase):
    def test_each_output_uses_its_own_model_type(self):
        payload = _payload(
            _output("o1", "concept", {"concepts": [{"id": "c1", "name": "food", "value": 0.9}]}),
            _output(
                "o2",
                "color",
                {
                    "colors": [
                        {"raw_hex": "#ffffff", "w3c": {"hex": "#ffffff", "name": "White"}, "value": 0.4}
                    ]
                },
            ),
        )
        (result,) = deserialize_workflow_results(payload)

        self.assertEqual(result.input.id, "i1")
        self.assertEqual(len(result.outputs), 2)
        first, second = result.outputs
        self.assertEqual(first.model_type, "concept")
        self.assertEqual(first.model_id, "model-concept")
        self.assertIsInstance(first.predictions[0], Concept)
        self.assertEqual(second.model_type, "color")
        self.assertIsInstance(second.predictions[0], Color)

    def test_service_type_names_resolve_through_aliases(self):
        payload = _payload(_output("o1", "facedetect", {"regions": []}))
        (result,) = deserialize_workflow_results(payload)
        self.assertEqual(result.outputs[0].model_type, "face-detection")

    def test_unknown_type_ext(self):
        payload = _payload(_output("o1", "brand-new-model", {}))
        with self.assertRaises(UnknownModelType) as ctx:
            deserialize_workflow_results(payload)
        self.assertEqual(ctx.exception.item_index, 0)
        self.assertEqual(ctx.exception.output_index, 0)
        self.assertEqual(ctx.exception.path, "$.results[0].outputs[0].model.output_info.type_ext")

    def test_malformed_output_fails_all_results(self):
        payload = _payload(
            _output("o1", "concept", {"concepts": [{"id": "c1"}]}),
            _output("o2", "concept", {"concepts": [{"name": "missing id"}]}),
        )
        with self.assertRaises(MalformedRecord) as ctx:
            deserialize_workflow_results(payload)
        self.assertEqual(ctx.exception.path, "$.results[0].outputs[1].data.concepts[0].id")
        self.assertEqual(ctx.exception.item_index, 0)
        self.assertEqual(ctx.exception.output_index, 1)
        self.assertIn("output=1", str(ctx.exception))

    def test_no_results(self):
        self.assertEqual(deserialize_workflow_results({"results": []}), [])
