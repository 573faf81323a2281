"""
Tests for database initialization and seeding
"""
import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from puffy_delights.database.connection import DatabaseConnection, TABLES
from puffy_delights.database.repository import DessertRepository
from puffy_delights.init_db import SAMPLE_DESSERTS, init_database


class TestInitDatabase(unittest.TestCase):
    """Test cases for init_database"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, "store.db")

    def tearDown(self):
        self.tmp.cleanup()

    def run_init(self, **kwargs):
        with redirect_stdout(io.StringIO()):
            return init_database(self.db_path, **kwargs)

    def test_creates_tables_and_seeds_once(self):
        self.assertTrue(self.run_init())
        self.assertTrue(self.run_init())

        db = DatabaseConnection(self.db_path, create_schema=False)
        self.assertEqual(db.existing_tables(), list(TABLES))
        desserts = DessertRepository(db).find_desserts()
        self.assertEqual(len(desserts), len(SAMPLE_DESSERTS))
        self.assertEqual([d.name for d in desserts if not d.in_stock], ["Double Chocolate Cookies"])

    def test_without_seed(self):
        self.assertTrue(self.run_init(seed=False))
        self.assertEqual(DessertRepository(DatabaseConnection(self.db_path)).count_desserts(), 0)

    def test_unwritable_path_fails(self):
        self.db_path = os.path.join(self.tmp.name, "missing-dir", "store.db")
        self.assertFalse(self.run_init())


if __name__ == '__main__':
    unittest.main()
