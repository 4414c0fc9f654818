#!/usr/bin/env python3
"""
Tests for the record engine: sequences, conversions, references and the
parse run lifecycle.
"""

import logging
import unittest

from ledgerline import (
    ConfigurationConflictError,
    ConversionTables,
    ConversionType,
    ConversionValue,
    EmptyDocumentError,
    MissingSchemaDefinitionError,
    NoObjectDataError,
    Options,
    ParseState,
    RecordParser,
    ReferenceDeclaration,
    SchemaDeclaration,
    SequenceTracker,
)
from tests.test_utils import INVENTORY_DOCUMENT, SEQUENCE_DOCUMENT


class TestSequenceTracker(unittest.TestCase):

    def test_next_returns_then_increments(self):
        tracker = SequenceTracker()
        tracker.initialize("Foo")
        self.assertEqual([tracker.next("Foo") for _ in range(3)], [1, 2, 3])

    def test_initialize_is_idempotent(self):
        tracker = SequenceTracker()
        tracker.initialize("Foo")
        tracker.next("Foo")
        tracker.initialize("Foo", "Bar")
        self.assertEqual(tracker.next("Foo"), 2)
        self.assertEqual(tracker.next("Bar"), 1)

    def test_clear(self):
        tracker = SequenceTracker()
        tracker.next("Foo")
        self.assertIn("Foo", tracker)
        tracker.clear()
        self.assertNotIn("Foo", tracker)
        self.assertEqual(tracker.next("Foo"), 1)


class TestConversionTables(unittest.TestCase):

    def setUp(self):
        self.types = [ConversionType("Doc", "Stored")]
        self.values = [ConversionValue("Bread", "Loaf"), ConversionValue("Bread", "Bun")]

    def test_identity_when_disabled(self):
        tables = ConversionTables(self.types, self.values)
        self.assertEqual(tables.convert_type("Doc"), "Doc")
        self.assertEqual(tables.convert_value("Bread"), "Bread")

    def test_first_match_wins(self):
        tables = ConversionTables(self.types, self.values, convert_types=True, convert_values=True)
        self.assertEqual(tables.convert_type("Doc"), "Stored")
        self.assertEqual(tables.convert_value("Bread"), "Loaf")
        self.assertEqual(tables.convert_value("Bread roll"), "Bread roll")

    def test_revert_type(self):
        tables = ConversionTables(self.types, convert_types=True)
        self.assertEqual(tables.revert_type("Stored"), "Doc")
        self.assertEqual(tables.revert_type("Other"), "Other")


class TestRecordParser(unittest.TestCase):

    def setUp(self):
        self.parser = RecordParser()

    def test_empty_text(self):
        with self.assertRaises(EmptyDocumentError):
            self.parser.parse("")
        with self.assertRaises(EmptyDocumentError):
            self.parser.parse("  \r\n ")

    def test_sequence_assignment(self):
        result = self.parser.parse(SEQUENCE_DOCUMENT)
        self.assertEqual(result["Foo"].column("Id"), ["1", "99", "2"])
        self.assertEqual(result["Foo"].column("Name"), ["One", "Two", "Three"])

    def test_three_placeholders(self):
        text = "Properties,Foo,Id\nValues,Foo,#\nValues,Foo,#\nValues,Foo, # \n"
        self.assertEqual(self.parser.parse(text)["Foo"].column("Id"), ["1", "2", "3"])

    def test_counters_are_per_schema(self):
        text = "\n".join([
            "Properties,A,Id",
            "Properties,B,Id",
            "Values,A,#",
            "Values,B,#",
            "Values,A,#",
        ])
        result = self.parser.parse(text)
        self.assertEqual(result["A"].column("Id"), ["1", "2"])
        self.assertEqual(result["B"].column("Id"), ["1"])

    def test_idempotent_reparse(self):
        first = RecordParser().parse(INVENTORY_DOCUMENT)
        second = RecordParser().parse(INVENTORY_DOCUMENT)
        self.assertEqual(first, second)
        # The same parser instance restarts its counters as well
        self.assertEqual(self.parser.parse(SEQUENCE_DOCUMENT), self.parser.parse(SEQUENCE_DOCUMENT))

    def test_quoted_field_with_comma(self):
        result = self.parser.parse('Properties,Foo,Id,Name\nValues,Foo,1,"Name, with a comma"')
        self.assertEqual(result["Foo"][0, "Name"], "Name, with a comma")

    def test_reference_resolution(self):
        result = self.parser.parse(INVENTORY_DOCUMENT)
        self.assertEqual(result["Shelf"].rows, [["1", "Top", "1"], ["2", "Bottom", "1"]])
        self.assertEqual(result["Item"].column("Shelf"), ["1", "2", "#Shelf(Nowhere)"])

    def test_reference_example(self):
        text = "\n".join([
            "Properties,B,Id,A",
            'Values,B,1,#A("Alpha")',
            "Properties,A,Id,Name",
            'Values,A,1,"Alpha"',
        ])
        result = self.parser.parse(text)
        self.assertEqual(result["B"][0, "A"], "1")

    def test_self_reference(self):
        text = "\n".join([
            "Properties,Node,Id,Name,Parent",
            "Values,Node,#,Root,",
            "Values,Node,#,Leaf,#Node(Root)",
        ])
        result = self.parser.parse(text)
        self.assertEqual(result["Node"].column("Parent"), ["", "1"])

    def test_reference_to_unknown_schema_left_unchanged(self):
        text = "Properties,B,Id,Ref\nValues,B,1,#Missing(X)"
        self.assertEqual(self.parser.parse(text)["B"][0, "Ref"], "#Missing(X)")

    def test_reference_columns_from_configuration(self):
        text = "\n".join([
            "TypedConfig,Shelf,ReferenceIdColumnName,Code",
            "TypedConfig,Shelf,ReferenceNameColumnName,Label",
            "Properties,Shelf,Code,Label",
            "Values,Shelf,S-1,Top",
            "Properties,Item,Id,Shelf",
            "Values,Item,1,#Shelf(Top)",
        ])
        self.assertEqual(self.parser.parse(text)["Item"][0, "Shelf"], "S-1")

    def test_reference_columns_from_options(self):
        options = Options().add_reference(ReferenceDeclaration("Code", "Label", schema="Shelf"))
        text = "\n".join([
            "Properties,Shelf,Code,Label",
            "Values,Shelf,S-9,Top",
            "Properties,Item,Id,Shelf",
            "Values,Item,1,#Shelf(Top)",
        ])
        self.assertEqual(RecordParser(options).parse(text)["Item"][0, "Shelf"], "S-9")

    def test_value_conversion_toggle(self):
        text = "\n".join([
            "ConversionValue,Bread,Loaf",
            "Properties,Food,Id,Name",
            "Values,Food,1,Bread",
            'Values,Food,2,"Bread"',
            "Values,Food,3,Breadcrumbs",
        ])
        disabled = RecordParser().parse(text)
        self.assertEqual(disabled["Food"].column("Name"), ["Bread", "Bread", "Breadcrumbs"])
        enabled = RecordParser(Options(value_conversion=True)).parse(text)
        self.assertEqual(enabled["Food"].column("Name"), ["Loaf", "Loaf", "Breadcrumbs"])

    def test_conversion_entries_are_unquoted(self):
        text = 'ConversionValue, "Bread" , "Loaf"\nProperties,Food,Name\nValues,Food,Bread'
        result = RecordParser(Options(value_conversion=True)).parse(text)
        self.assertEqual(result.conversion_values, [ConversionValue("Bread", "Loaf")])
        self.assertEqual(result["Food"][0, "Name"], "Loaf")

    def test_type_conversion_renames_stored_key(self):
        text = "ConversionType,Doc,Stored\nProperties,Doc,Id\nValues,Doc,#"
        self.assertEqual(RecordParser().parse(text).schemas, ["Doc"])
        result = RecordParser(Options(type_conversion=True)).parse(text)
        self.assertEqual(result.schemas, ["Stored"])
        self.assertEqual(result["Stored"].column("Id"), ["1"])

    def test_references_use_converted_values(self):
        text = "\n".join([
            "ConversionValue,Alpha,Beta",
            "Properties,A,Id,Name",
            "Values,A,1,Alpha",
            "Properties,B,Id,Ref",
            "Values,B,1,#A(Beta)",
            "Values,B,2,#A(Alpha)",
        ])
        result = RecordParser(Options(value_conversion=True)).parse(text)
        self.assertEqual(result["B"].column("Ref"), ["1", "#A(Alpha)"])

    def test_conversion_prefix_from_global_config(self):
        text = "\n".join([
            "GlobalConfig,ConversionValuePrefix,Swap",
            "Swap,Old,New",
            "Properties,Foo,Name",
            "Values,Foo,Old",
        ])
        result = RecordParser(Options(value_conversion=True)).parse(text)
        self.assertEqual(result["Foo"][0, "Name"], "New")

    def test_typed_prefix_override(self):
        text = "\n".join([
            "GlobalConfig,PropertyPrefix,Props",
            "TypedConfig,X,PropertyPrefix,XProps",
            "XProps,X,Id",
            "Values,X,1",
            "Props,Y,Id",
            "Values,Y,2",
            "Props,X,Wrong",
        ])
        result = self.parser.parse(text)
        self.assertEqual(result["X"].names, ["Id"])
        self.assertEqual(result["X"].rows, [["1"]])
        self.assertEqual(result["Y"].rows, [["2"]])

    def test_document_prefix_conflict(self):
        text = "TypedConfig,X,ValuesPrefix,Properties\nProperties,X,Id"
        with self.assertRaises(ConfigurationConflictError):
            self.parser.parse(text)

    def test_missing_schema_definition(self):
        with self.assertRaises(MissingSchemaDefinitionError) as context:
            self.parser.parse("Properties,Foo,Id\nValues,Bar,1")
        self.assertEqual(context.exception.schema, "Bar")

    def test_arity_mismatch_is_tolerated(self):
        text = "Properties,Foo,A,B,C\nValues,Foo,1\nValues,Foo,1,2,3,4"
        result = self.parser.parse(text)
        self.assertEqual(result["Foo"].rows, [["1", "", ""], ["1", "2", "3"]])

    def test_duplicate_property_block_first_wins(self):
        text = "Properties,Foo,Id\nProperties,Foo,Other\nValues,Foo,1"
        with self.assertLogs("ledgerline.records.parser", level=logging.WARNING):
            result = self.parser.parse(text)
        self.assertEqual(result["Foo"].names, ["Id"])

    def test_unknown_config_key_ignored(self):
        result = self.parser.parse("GlobalConfig,Colour,Blue\nProperties,Foo,Id\nValues,Foo,1")
        self.assertEqual(result["Foo"].rows, [["1"]])

    def test_schema_without_rows(self):
        result = self.parser.parse("Properties,Foo,Id,Name")
        self.assertEqual(result["Foo"].names, ["Id", "Name"])
        self.assertEqual(len(result["Foo"]), 0)

    def test_unknown_schema_lookup(self):
        result = self.parser.parse(SEQUENCE_DOCUMENT)
        with self.assertRaises(NoObjectDataError):
            result["Nope"]

    def test_declared_schemas_map_columns_by_name(self):
        options = Options().add_schema(SchemaDeclaration("Foo", ["Name", "Id", "Missing"]))
        text = "\n".join([
            "Properties,Foo,Id,Extra,Name",
            "Values,Foo,#,x,Alpha",
            "Properties,Bar,Id",
            "Values,Bar,1",
        ])
        result = RecordParser(options).parse(text)
        self.assertEqual(result.schemas, ["Foo"])
        self.assertEqual(result["Foo"].names, ["Name", "Id", "Missing"])
        self.assertEqual(result["Foo"].rows, [["Alpha", "1", ""]])

    def test_declared_schema_reads_mapped_columns(self):
        declaration = SchemaDeclaration("Foo", ["Id", "Name"], {"Id": "Key", "Name": "Title"})
        result = RecordParser(Options().add_schema(declaration)).parse(
            "Properties,Foo,Title,Key,Name\nValues,Foo,Alpha,#,ignored")
        self.assertEqual(result["Foo"].names, ["Id", "Name"])
        self.assertEqual(result["Foo"].rows, [["1", "Alpha"]])

    def test_state_machine_reaches_done(self):
        self.assertEqual(self.parser.state, ParseState.IDLE)
        self.parser.parse(SEQUENCE_DOCUMENT)
        self.assertEqual(self.parser.state, ParseState.DONE)

    def test_options_conflict_raised_before_parsing(self):
        with self.assertRaises(ConfigurationConflictError):
            RecordParser(Options(property_prefix="Rows", values_prefix="Rows"))

    def test_comments_never_reach_result(self):
        text = "! Properties,Hidden,Id\n-- Values,Hidden,1\nProperties,Foo,Id\nValues,Foo,1"
        self.assertEqual(self.parser.parse(text).schemas, ["Foo"])


if __name__ == "__main__":
    unittest.main()
