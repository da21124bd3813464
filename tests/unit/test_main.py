"""Unit tests for main.py module"""

import pytest
import tempfile
import os
import yaml
from unittest.mock import Mock, patch
from newsfeed.config import Settings
from newsfeed.main import load_feeds, main, FEEDS_FILE_DEFAULT


def _write_yaml(data):
    f = tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False)
    yaml.safe_dump(data, f)
    f.close()
    return f.name


class TestLoadFeeds:
    """Test load_feeds function"""

    def test_default_path(self):
        assert FEEDS_FILE_DEFAULT == "feeds.yaml"

    def test_load_valid_feeds_yaml(self):
        """Strings and url mappings are both accepted"""
        path = _write_yaml({
            "feeds": [
                "https://example.com/feed1",
                {"url": " https://example.com/feed2 "},
            ]
        })
        try:
            feeds = load_feeds(path)
            assert feeds == ["https://example.com/feed1", "https://example.com/feed2"]
        finally:
            os.unlink(path)

    def test_duplicates_collapsed(self):
        path = _write_yaml({
            "feeds": ["https://a.example/rss", "https://b.example/rss", "https://a.example/rss"]
        })
        try:
            assert load_feeds(path) == ["https://a.example/rss", "https://b.example/rss"]
        finally:
            os.unlink(path)

    def test_load_feeds_invalid_format(self):
        """Test that YAML missing feeds key raises error"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("url: https://example.com/feed\n")
            f.flush()

            try:
                with pytest.raises(ValueError) as exc_info:
                    load_feeds(f.name)
                assert "feeds" in str(exc_info.value)
            finally:
                os.unlink(f.name)

    def test_load_feeds_not_a_list(self):
        path = _write_yaml({"feeds": {"a": "https://example.com"}})
        try:
            with pytest.raises(ValueError):
                load_feeds(path)
        finally:
            os.unlink(path)

    def test_load_feeds_empty_list(self):
        path = _write_yaml({"feeds": []})
        try:
            with pytest.raises(ValueError) as exc_info:
                load_feeds(path)
            assert "at least one feed" in str(exc_info.value)
        finally:
            os.unlink(path)

    def test_mapping_without_url(self):
        path = _write_yaml({"feeds": [{"name": "no url"}]})
        try:
            with pytest.raises(ValueError) as exc_info:
                load_feeds(path)
            assert "url" in str(exc_info.value)
        finally:
            os.unlink(path)

    def test_bad_entry_type(self):
        path = _write_yaml({"feeds": [42]})
        try:
            with pytest.raises(ValueError):
                load_feeds(path)
        finally:
            os.unlink(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_feeds("/nonexistent/feeds.yaml")

    def test_repository_feeds_file_loads(self):
        assert load_feeds()


class TestMain:
    """Test main startup wiring"""

    @patch('newsfeed.main.uvicorn.run')
    @patch('newsfeed.main.create_app')
    @patch('newsfeed.main.FeedStore')
    @patch('newsfeed.main.configure_logging')
    @patch('newsfeed.main.load_settings')
    def test_main_wires_components(self, mock_settings, mock_logging, mock_store_cls,
                                   mock_create_app, mock_run):
        settings = Settings(database_url="postgresql://db/news", port=4000)
        mock_settings.return_value = settings
        store = Mock()
        mock_store_cls.return_value = store

        main()

        mock_logging.assert_called_once_with("INFO")
        mock_store_cls.assert_called_once_with("postgresql://db/news", min_conn=1, max_conn=10)
        store.init_schema.assert_called_once()
        feeds = mock_create_app.call_args[0][1]
        assert feeds == load_feeds()
        assert mock_run.call_args[1]["port"] == 4000

    @patch('newsfeed.main.uvicorn.run')
    @patch('newsfeed.main.load_settings')
    def test_main_fails_without_database_url(self, mock_settings, mock_run):
        from newsfeed.config import ConfigError
        mock_settings.side_effect = ConfigError("DATABASE_URL must be set.")

        with pytest.raises(ConfigError):
            main()

        mock_run.assert_not_called()
