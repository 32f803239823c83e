from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings
from PIL import Image

from contracts.assets import Loaded, Unavailable, load_image

from .utils import png_bytes, signature_data_url, signature_image


class LoadImageTests(SimpleTestCase):
    def test_missing_source(self):
        for source in (None, '', '   '):
            result = load_image(source, label='logo')
            self.assertIsInstance(result, Unavailable)
            self.assertFalse(result.available)

    def test_pillow_image_and_passthrough(self):
        img = signature_image()
        self.assertIs(load_image(img).image, img)
        unavailable = Unavailable('gone')
        self.assertIs(load_image(unavailable), unavailable)

    def test_bytes(self):
        result = load_image(png_bytes(signature_image()))
        self.assertIsInstance(result, Loaded)
        self.assertEqual(result.image.size, (120, 40))

    def test_data_url_keeps_source_text(self):
        url = signature_data_url()
        result = load_image(url)
        self.assertTrue(result.available)
        self.assertEqual(result.source_text, url)

    def test_corrupt_data_url(self):
        with self.assertLogs('contracts.assets', level='WARNING'):
            result = load_image('data:image/png;base64,bm90IGFuIGltYWdl')
        self.assertIsInstance(result, Unavailable)
        self.assertEqual(result.source_text, 'data:image/png;base64,bm90IGFuIGltYWdl')

    def test_missing_file(self):
        with self.assertLogs('contracts.assets', level='WARNING'):
            result = load_image('/nonexistent/zafira/logo.png', label='logo')
        self.assertFalse(result.available)
        self.assertIn('logo', result.reason)

    @override_settings(ASSET_FETCH_TIMEOUT=3)
    def test_url(self):
        response = mock.MagicMock(content=png_bytes(Image.new('RGB', (5, 5))))
        with mock.patch('contracts.assets.requests.get', return_value=response) as get:
            result = load_image('https://cdn.example.com/logo.png')
        get.assert_called_once_with('https://cdn.example.com/logo.png', timeout=3)
        self.assertTrue(result.available)

    def test_unreachable_url(self):
        with mock.patch('contracts.assets.requests.get', side_effect=requests.ConnectionError('down')):
            with self.assertLogs('contracts.assets', level='WARNING'):
                result = load_image('https://cdn.example.com/logo.png')
        self.assertFalse(result.available)
