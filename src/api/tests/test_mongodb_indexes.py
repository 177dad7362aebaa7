"""Tests for index creation and drift repair."""

import unittest
from unittest.mock import MagicMock

from pymongo.errors import OperationFailure

from adapter.mongodb import MEMBERS_COLLECTION_NAME
from adapter.mongodb.indexes import MEMBER_INDEXES, IndexDefinition, apply_indexes, ensure_all_indexes


class TestApplyIndexes(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.collection.name = 'members'
        self.definition = IndexDefinition('idx_members_email', [('email', 1)])

    def test_creates_each_index(self):
        self.assertTrue(apply_indexes(self.collection, MEMBER_INDEXES))
        self.assertEqual(self.collection.create_index.call_count, len(MEMBER_INDEXES))

    def test_rebuilds_index_with_drifted_keys(self):
        self.collection.create_index.side_effect = [OperationFailure("Index already exists with different options"), None]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_members_email': {'key': [('email', -1)]},
        }

        self.assertTrue(apply_indexes(self.collection, [self.definition]))

        self.collection.drop_index.assert_called_once_with('idx_members_email')
        self.assertEqual(self.collection.create_index.call_count, 2)

    def test_rebuilds_renamed_index(self):
        self.collection.create_index.side_effect = [OperationFailure("IndexKeySpecsConflict"), None]
        self.collection.index_information.return_value = {'email_1': {'key': [('email', 1)]}}

        self.assertTrue(apply_indexes(self.collection, [self.definition]))

        self.collection.drop_index.assert_called_once_with('email_1')

    def test_unresolved_conflict(self):
        self.collection.create_index.side_effect = OperationFailure("Index already exists")
        self.collection.index_information.return_value = {}

        self.assertFalse(apply_indexes(self.collection, [self.definition]))
        self.collection.drop_index.assert_not_called()

    def test_other_errors_reported(self):
        self.collection.create_index.side_effect = OperationFailure("not authorized")

        self.assertFalse(apply_indexes(self.collection, [self.definition]))


class TestEnsureAllIndexes(unittest.TestCase):

    def test_targets_members_collection(self):
        db = MagicMock()

        self.assertTrue(ensure_all_indexes(db))

        db.__getitem__.assert_called_with(MEMBERS_COLLECTION_NAME)


if __name__ == '__main__':
    unittest.main()
