import os
import tempfile
import unittest
from unittest import mock

from backend.app.core.config import DEFAULT_CONFIG_PATH, load_settings


class TestSettings(unittest.TestCase):
    def test_shipped_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(DEFAULT_CONFIG_PATH))

        self.assertEqual(settings.lichess_url, "https://lichess.org")
        self.assertEqual(settings.fetch_timeout_seconds, 15.0)
        self.assertEqual(settings.port, 10000)
        self.assertEqual(settings.static_dir, "public")

    def test_environment_overrides_yaml(self):
        env = {
            "LICHESS_URL": "http://localhost:9663",
            "FETCH_TIMEOUT_SECONDS": "2.5",
            "PORT": "8080",
            "CORS_ORIGINS": "http://a.test, http://b.test,",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings(str(DEFAULT_CONFIG_PATH))

        self.assertEqual(settings.lichess_url, "http://localhost:9663")
        self.assertEqual(settings.fetch_timeout_seconds, 2.5)
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.cors_origins, ["http://a.test", "http://b.test"])

    def test_alternate_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "settings.yaml")
            with open(path, "w") as f:
                f.write("fetch_timeout_seconds: 3\nstatic_dir: /srv/www\n")

            with mock.patch.dict(os.environ, {"APP_CONFIG": path}, clear=True):
                settings = load_settings()

        self.assertEqual(settings.fetch_timeout_seconds, 3.0)
        self.assertEqual(settings.static_dir, "/srv/www")
        self.assertEqual(settings.lichess_url, "https://lichess.org")

    def test_missing_file_uses_model_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings("/nonexistent/settings.yaml")

        self.assertEqual(settings.port, 10000)
        self.assertEqual(settings.cors_origins, [])


if __name__ == '__main__':
    unittest.main()
