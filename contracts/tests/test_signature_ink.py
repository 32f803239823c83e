from unittest import mock

from django.test import SimpleTestCase
from PIL import Image

from contracts.signature_ink import has_visible_ink, normalize_ink


class NormalizeInkTests(SimpleTestCase):
    def setUp(self):
        self.image = Image.new('RGBA', (4, 4), (255, 255, 255, 0))
        self.image.putpixel((1, 1), (200, 30, 30, 255))
        self.image.putpixel((2, 2), (200, 30, 30, 5))
        self.image.putpixel((3, 3), (10, 200, 10, 6))

    def test_visible_pixels_become_black(self):
        out = normalize_ink(self.image)
        self.assertEqual(out.size, self.image.size)
        self.assertEqual(out.getpixel((1, 1)), (0, 0, 0, 255))
        self.assertEqual(out.getpixel((3, 3)), (0, 0, 0, 255))

    def test_faint_pixels_unchanged(self):
        out = normalize_ink(self.image)
        self.assertEqual(out.getpixel((2, 2)), (200, 30, 30, 5))
        self.assertEqual(out.getpixel((0, 0)), (255, 255, 255, 0))

    def test_input_is_not_modified(self):
        normalize_ink(self.image)
        self.assertEqual(self.image.getpixel((1, 1)), (200, 30, 30, 255))

    def test_opaque_rgb_image(self):
        out = normalize_ink(Image.new('RGB', (2, 2), (250, 250, 250)))
        self.assertEqual(out.mode, 'RGBA')
        self.assertEqual(out.getpixel((0, 0)), (0, 0, 0, 255))

    def test_failure_returns_original(self):
        broken = mock.MagicMock()
        broken.convert.side_effect = ValueError('bad mode')
        with self.assertLogs('contracts.signature_ink', level='WARNING'):
            self.assertIs(normalize_ink(broken), broken)

    def test_has_visible_ink(self):
        self.assertTrue(has_visible_ink(self.image))
        self.assertFalse(has_visible_ink(Image.new('RGBA', (4, 4), (0, 0, 0, 0))))
        faint = Image.new('RGBA', (4, 4), (0, 0, 0, 0))
        faint.putpixel((0, 0), (0, 0, 0, 5))
        self.assertFalse(has_visible_ink(faint))
