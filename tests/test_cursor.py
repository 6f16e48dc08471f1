import unittest

from command_manager.cursor import TextCursor


class TestTextCursor(unittest.TestCase):
    def test_push_advances_and_wraps(self) -> None:
        c = TextCursor(5, 2, 4)  # 3 characters per line
        c.push("a")
        self.assertEqual(c.position, (6, 2))
        c.push("b")
        self.assertEqual(c.position, (7, 2))
        c.push("c")
        self.assertEqual(c.position, (5, 3))
        c.push("d")
        self.assertEqual(c.position, (6, 3))
        self.assertEqual(c.text, "abcd")

    def test_push_then_pop_returns_to_anchor(self) -> None:
        for width in range(2, 7):
            for n in range(0, 3 * width + 2):
                c = TextCursor(3, 7, width)
                for i in range(n):
                    c.push(chr(ord("a") + i % 26))
                for _ in range(n):
                    c.pop()
                self.assertEqual(c.position, (3, 7), msg=f"width={width} n={n}")
                self.assertEqual(c.text, "")

    def test_pop_is_inverse_of_push_at_every_step(self) -> None:
        for width in range(2, 7):
            c = TextCursor(0, 0, width)
            positions = [c.position]
            for i in range(2 * width + 3):
                c.push("x")
                positions.append(c.position)
            positions.pop()
            while positions:
                c.pop()
                self.assertEqual(c.position, positions.pop(), msg=f"width={width}")

    def test_position_stays_inside_field(self) -> None:
        for width in range(2, 7):
            c = TextCursor(10, 4, width)
            for _ in range(25):
                c.push("z")
                self.assertGreaterEqual(c.x, 10)
                self.assertLess(c.x, 10 + width)
                self.assertGreaterEqual(c.y, 4)

    def test_pop_on_empty_is_noop(self) -> None:
        c = TextCursor(1, 1, 5)
        self.assertIsNone(c.pop())
        self.assertEqual(c.position, (1, 1))

    def test_pop_returns_removed_character(self) -> None:
        c = TextCursor(0, 0, 5)
        c.push("h")
        c.push("i")
        self.assertEqual(c.pop(), "i")
        self.assertEqual(c.text, "h")

    def test_width_one_wraps_every_character(self) -> None:
        c = TextCursor(2, 0, 1)
        c.push("a")
        self.assertEqual(c.position, (2, 1))
        c.push("b")
        self.assertEqual(c.position, (2, 2))
        c.pop()
        self.assertEqual(c.position, (2, 1))
        c.pop()
        self.assertEqual(c.position, (2, 0))

    def test_never_moves_above_or_left_of_anchor(self) -> None:
        c = TextCursor(4, 4, 3)
        for _ in range(5):
            c.push("q")
        for _ in range(10):
            c.pop()
            self.assertGreaterEqual(c.x, 4)
            self.assertGreaterEqual(c.y, 4)


if __name__ == "__main__":
    unittest.main()
