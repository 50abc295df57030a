import unittest

from pydantic import TypeAdapter

from bookstore.core.errors import InvalidArgument
from bookstore.schemas.books import BooksUpsert
from bookstore.schemas.patch import PatchDocument
from bookstore.services.patching import apply_patch

_DOCUMENT_ADAPTER = TypeAdapter(PatchDocument)


def _ops(raw):
    return _DOCUMENT_ADAPTER.validate_python(raw)


class ApplyPatchTests(unittest.TestCase):
    def setUp(self):
        self.document = {
            "title": "Dune",
            "isbn": "9780441013593",
            "summary": None,
            "price": "9.99",
            "page_count": 412,
            "in_stock": True,
        }

    def test_add_and_replace_set_the_value(self):
        result = apply_patch(
            self.document,
            _ops(
                [
                    {"op": "add", "path": "/summary", "value": "Spice"},
                    {"op": "replace", "path": "/page_count", "value": 500},
                ]
            ),
        )
        self.assertEqual(result["summary"], "Spice")
        self.assertEqual(result["page_count"], 500)

    def test_remove_clears_the_field(self):
        result = apply_patch(self.document, _ops([{"op": "remove", "path": "/isbn"}]))
        self.assertIsNone(result["isbn"])

    def test_move_and_copy(self):
        moved = apply_patch(self.document, _ops([{"op": "move", "from": "/title", "path": "/summary"}]))
        self.assertEqual(moved["summary"], "Dune")
        self.assertIsNone(moved["title"])

        copied = apply_patch(self.document, _ops([{"op": "copy", "from": "/title", "path": "/summary"}]))
        self.assertEqual(copied["summary"], "Dune")
        self.assertEqual(copied["title"], "Dune")

    def test_operations_apply_in_order(self):
        result = apply_patch(
            self.document,
            _ops(
                [
                    {"op": "replace", "path": "/title", "value": "Dune Messiah"},
                    {"op": "copy", "from": "/title", "path": "/summary"},
                    {"op": "test", "path": "/summary", "value": "Dune Messiah"},
                ]
            ),
        )
        self.assertEqual(result["summary"], "Dune Messiah")

    def test_input_document_is_not_modified(self):
        apply_patch(self.document, _ops([{"op": "replace", "path": "/title", "value": "Other"}]))
        self.assertEqual(self.document["title"], "Dune")

    def test_paths_follow_client_casing(self):
        result = apply_patch(self.document, _ops([{"op": "replace", "path": "/PageCount", "value": 1}]))
        self.assertEqual(result["page_count"], 1)

    def test_test_compares_typed_values(self):
        operations = _ops([{"op": "test", "path": "/price", "value": "9.990"}])
        apply_patch(self.document, operations, schema=BooksUpsert)
        with self.assertRaises(InvalidArgument):
            apply_patch(self.document, operations)

    def test_failed_test_raises(self):
        with self.assertRaises(InvalidArgument) as ctx:
            apply_patch(self.document, _ops([{"op": "test", "path": "/title", "value": "Emma"}]), schema=BooksUpsert)
        self.assertIn("/title", ctx.exception.message)

    def test_empty_or_missing_operations(self):
        with self.assertRaises(InvalidArgument):
            apply_patch(self.document, [])
        with self.assertRaises(InvalidArgument):
            apply_patch(self.document, None)

    def test_unknown_and_nested_paths_are_rejected(self):
        for path in ("/rating", "/author/name", "title", "/"):
            with self.subTest(path=path):
                with self.assertRaises(InvalidArgument):
                    apply_patch(self.document, _ops([{"op": "replace", "path": path, "value": "x"}]))

    def test_unknown_op_is_rejected_by_the_schema(self):
        with self.assertRaises(ValueError):
            _ops([{"op": "increment", "path": "/page_count", "value": 1}])


if __name__ == "__main__":
    unittest.main()
