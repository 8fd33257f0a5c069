"""Tests for loading the store contact configuration."""

import json

from storefront.infrastructure.credentials import StoreCredentials, load_store_credentials


class TestLoadStoreCredentials:
    """Tests for load_store_credentials."""

    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "store_credentials.json"
        path.write_text(
            json.dumps(
                {
                    "whatsapp_retail": "558534833373",
                    "whatsapp_reseller": "558599990000",
                    "instagram": "https://instagram.com/loja",
                    "unknown_key": "ignored",
                }
            ),
            encoding="utf-8",
        )

        credentials = load_store_credentials(path)

        assert credentials.whatsapp_retail == "558534833373"
        assert credentials.whatsapp_reseller == "558599990000"

    def test_reads_portuguese_number_keys(self, tmp_path):
        path = tmp_path / "store_credentials.json"
        path.write_text(
            json.dumps(
                {
                    "whatsapp_varejo": "558534833373",
                    "whatsapp_revenda": "558599990000",
                    "website": "https://loja.example.com",
                }
            ),
            encoding="utf-8",
        )

        credentials = load_store_credentials(path)

        assert credentials.whatsapp_retail == "558534833373"
        assert credentials.whatsapp_reseller == "558599990000"

    def test_missing_file_is_empty(self, tmp_path):
        credentials = load_store_credentials(tmp_path / "missing.json")

        assert credentials == StoreCredentials()

    def test_malformed_file_is_empty(self, tmp_path):
        path = tmp_path / "store_credentials.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_store_credentials(path).whatsapp_retail is None

    def test_wrong_shape_is_empty(self, tmp_path):
        path = tmp_path / "store_credentials.json"
        path.write_text(json.dumps(["558534833373"]), encoding="utf-8")

        assert load_store_credentials(path) == StoreCredentials()


class TestSocialLinks:
    """Tests for StoreCredentials.social_links."""

    def test_only_configured_links(self):
        credentials = StoreCredentials(
            instagram="https://instagram.com/loja",
            facebook="",
            website="https://loja.example.com",
        )

        assert credentials.social_links() == {
            "instagram": "https://instagram.com/loja",
            "website": "https://loja.example.com",
        }
