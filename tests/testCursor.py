#!/usr/bin/python

import logging
import unittest

from rdemangle.v0.cursor import Cursor

LOG = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)-15s %(message)s")
logging.disable(logging.CRITICAL)


class CursorTestSuite(unittest.TestCase):
    """Sequential reading with save/restore of the position"""

    def testConsume(self):
        cursor = Cursor("ab")
        self.assertEqual("a", cursor.consume())
        self.assertEqual("b", cursor.consume())
        self.assertIsNone(cursor.consume())
        self.assertTrue(cursor.at_end())

    def testTake(self):
        cursor = Cursor("Ex")
        self.assertFalse(cursor.take("x"))
        self.assertEqual(0, cursor.position)
        self.assertTrue(cursor.take("E"))
        self.assertEqual(1, cursor.position)
        self.assertEqual("x", cursor.peek())
        self.assertTrue(cursor.take("x"))
        self.assertFalse(cursor.take("x"))

    def testOffsetAndPosition(self):
        cursor = Cursor("NvC3foo")
        cursor.consume()
        cursor.consume()
        cursor.offset(-1)
        self.assertEqual("v", cursor.peek())
        saved = cursor.position
        cursor.position = 3
        self.assertEqual("3foo", cursor.remaining())
        cursor.position = saved
        self.assertEqual("vC3foo", cursor.remaining())


if __name__ == "__main__":
    unittest.main()
