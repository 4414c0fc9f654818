#!/usr/bin/env python3
"""
Tests for scalar decoding/encoding and binding rows onto classes.
"""

import unittest
from typing import Optional

from ledgerline import (
    MetadataDeclaration,
    MetadataKind,
    NoObjectDataError,
    Options,
    RecordParser,
    ScalarCodec,
    SchemaBinder,
    SchemaDescriptor,
    SequenceTracker,
)
from ledgerline.records.defaults import DataValue
from tests.test_utils import Colour, Label, Product


class TestScalarCodec(unittest.TestCase):

    def setUp(self):
        self.codec = ScalarCodec()

    def test_decode_text(self):
        self.assertEqual(self.codec.decode_text('  " padded "  '), "padded")
        self.assertEqual(self.codec.decode_text('""'), "")

    def test_decode_numbers(self):
        self.assertEqual(self.codec.decode("42", int), 42)
        self.assertEqual(self.codec.decode("4.5", float), 4.5)
        self.assertIsNone(self.codec.decode("abc", int))
        self.assertIsNone(self.codec.decode("", Optional[int]))

    def test_decode_bool(self):
        self.assertTrue(self.codec.decode("True", bool))
        self.assertFalse(self.codec.decode("false", bool))
        self.assertIsNone(self.codec.decode("maybe", bool))

    def test_decode_enum(self):
        self.assertEqual(self.codec.decode("Colour.GREEN", Colour), Colour.GREEN)
        self.assertEqual(self.codec.decode("BLUE", Colour), Colour.BLUE)
        self.assertEqual(self.codec.decode("Colour.PURPLE", Colour), Colour.RED)

    def test_decode_optional_string(self):
        self.assertIsNone(self.codec.decode("", Optional[str]))
        self.assertEqual(self.codec.decode("", str), "")

    def test_placeholder_draws_from_tracker(self):
        tracker = SequenceTracker()
        self.assertEqual(self.codec.decode("#", int, "Foo", tracker), 1)
        self.assertEqual(self.codec.decode(" # ", int, "Foo", tracker), 2)
        self.assertEqual(self.codec.decode("7", int, "Foo", tracker), 7)
        self.assertEqual(self.codec.decode("#", str, "Foo", tracker), "#")
        self.assertEqual(self.codec.decode("#", float, "Foo", tracker), 3.0)

    def test_encode(self):
        self.assertEqual(self.codec.encode("text"), '"text"')
        self.assertEqual(self.codec.encode(True), "True")
        self.assertEqual(self.codec.encode(3), "3")
        self.assertEqual(self.codec.encode(Colour.BLUE), "Colour.BLUE")
        self.assertEqual(self.codec.encode(None, Optional[int]), "")
        self.assertEqual(self.codec.encode(None, Optional[str]), '""')

    def test_booleans_use_data_values(self):
        self.assertEqual(self.codec.encode(False), DataValue.FALSE.value)
        self.assertTrue(self.codec.decode("TRUE", bool))
        self.assertFalse(self.codec.decode(DataValue.FALSE.value, bool))
        self.assertIsNone(self.codec.decode("yes", bool))


class Plain:
    Code: str
    Count: int


class TestSchemaDescriptor(unittest.TestCase):

    def test_from_dataclass(self):
        descriptor = SchemaDescriptor.from_class(Product)
        self.assertEqual(descriptor.name, "Product")
        self.assertEqual(list(descriptor.fields), ["Id", "Name", "Colour", "InStock", "Price"])
        self.assertEqual(descriptor.fields["Price"], Optional[float])

    def test_from_annotated_class(self):
        descriptor = SchemaDescriptor.from_class(Plain, name="PlainRecord")
        obj = descriptor.build({"Code": "A", "Count": 2})
        self.assertIsInstance(obj, Plain)
        self.assertEqual((obj.Code, obj.Count), ("A", 2))
        self.assertEqual(descriptor.extract(obj), {"Code": "A", "Count": 2})


class TestSchemaBinder(unittest.TestCase):

    document = "\n".join([
        "Properties,Product,Id,Name,Colour,InStock",
        'Values,Product,#,"Widget",Colour.RED,True',
        'Values,Product,#,"Gadget",GREEN,False',
        'Label,Product,"New",1',
        "Notes,Product,internal",
        "Properties,Other,Id",
        "Values,Other,1",
    ])

    def setUp(self):
        self.options = Options()
        self.options.add_metadata(MetadataDeclaration(
            "Label", ["Text", "Priority"], kind=MetadataKind.TAG, descriptor=SchemaDescriptor.from_class(Label)))
        self.options.add_metadata(MetadataDeclaration("Notes", ["Text"]))
        self.result = RecordParser(self.options).parse(self.document)
        self.binder = SchemaBinder().register(SchemaDescriptor.from_class(Product))

    def test_bind_schema(self):
        products = self.binder.bind_schema(self.result, "Product")
        self.assertEqual(products, [
            Product(1, "Widget", Colour.RED, True, None),
            Product(2, "Gadget", Colour.GREEN, False, None),
        ])

    def test_metadata_routing(self):
        self.binder.bind_schema(self.result, "Product")
        self.assertEqual(self.binder.tags["Product"], [Label("New", 1)])
        self.assertEqual(self.binder.instance_metadata["Product"], [{"Text": "internal"}])

    def test_bind_only_registered(self):
        bound = self.binder.bind(self.result)
        self.assertEqual(list(bound), ["Product"])

    def test_unknown_schema(self):
        with self.assertRaises(NoObjectDataError):
            self.binder.bind_schema(self.result, "Missing")
        with self.assertRaises(NoObjectDataError):
            self.binder.bind_schema(self.result, "Other")

    def test_unbind(self):
        products = self.binder.bind_schema(self.result, "Product")
        table = self.binder.unbind(products, "Product")
        self.assertEqual(table.names, ["Id", "Name", "Colour", "InStock", "Price"])
        self.assertEqual(table.rows[0], ["1", "Widget", "Colour.RED", "True", ""])

    def test_mapped_columns(self):
        descriptor = SchemaDescriptor.from_class(Label, columns={"Text": "Caption"})
        self.assertEqual(descriptor.column_names, ["Caption", "Priority"])
        result = RecordParser().parse('Properties,Label,Priority,Caption\nValues,Label,2,"Hi"')
        binder = SchemaBinder().register(descriptor)
        labels = binder.bind_schema(result, "Label")
        self.assertEqual(labels, [Label("Hi", 2)])
        table = binder.unbind(labels, "Label")
        self.assertEqual(table.names, ["Caption", "Priority"])
        self.assertEqual(table.rows, [["Hi", "2"]])


if __name__ == "__main__":
    unittest.main()
